from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from splitledger.core.config import settings
from splitledger.core.logger import get_logger

logger = get_logger(__name__)


class MongoDatabase:
    """MongoDB connection manager."""

    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

mongodb = MongoDatabase()

async def connect_to_mongo():
    """Connect to MongoDB."""
    mongodb.client = AsyncIOMotorClient(settings.MONGODB_URL)
    mongodb.db = mongodb.client[settings.DATABASE_NAME]

    await create_indexes()
    logger.info(f"Connected to MongoDB: {settings.DATABASE_NAME}")

async def close_mongo_connection():
    """Disconnect from MongoDB."""
    if mongodb.client is not None:
        mongodb.client.close()
    logger.info("Disconnected from MongoDB")

async def create_indexes():
    """Create database indexes."""
    await mongodb.db["participants"].create_index("name")

    await mongodb.db["transactions"].create_index("payer_id")
    await mongodb.db["transactions"].create_index("beneficiary_id")
    await mongodb.db["transactions"].create_index("is_settlement")
    await mongodb.db["transactions"].create_index([("is_deleted", 1), ("occurred_at", -1)])

    await mongodb.db["pending_settlements"].create_index("payer_id")
    await mongodb.db["pending_settlements"].create_index("recipient_id")
    await mongodb.db["pending_settlements"].create_index("is_active")

def get_db() -> AsyncIOMotorDatabase:
    """Get database instance."""
    return mongodb.db
