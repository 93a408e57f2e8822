"""
LedgerRepository - MongoDB-backed ledger store.

Collections:
- participants: roster, ordered by name
- transactions: payer/beneficiary events, soft-deleted, newest first
- pending_settlements: cached solver output, oldest first
"""

import re
from decimal import Decimal
from typing import List, Optional
from datetime import datetime, timezone

from bson.decimal128 import Decimal128
from motor.motor_asyncio import AsyncIOMotorDatabase

from splitledger.core.logger import get_logger
from splitledger.models.participant import Participant
from splitledger.models.settlement import Settlement
from splitledger.models.transaction import Transaction

logger = get_logger(__name__)

TRANSACTION_ORDER = [("occurred_at", -1), ("created_at", -1)]


class LedgerRepository:
    """Repository implementing ``LedgerStore`` on top of motor."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.participants = db.participants
        self.transactions = db.transactions
        self.pending_settlements = db.pending_settlements

    # ===== READS =====

    async def list_participants(self) -> List[Participant]:
        docs = await self.participants.find({}).sort("name", 1).to_list(None)
        return [Participant(**doc) for doc in docs]

    async def list_transactions(self) -> List[Transaction]:
        """All non-deleted transactions, newest first."""
        return await self.find_transactions()

    async def list_all_transactions(self) -> List[Transaction]:
        """All transactions including soft-deleted ones (admin view)."""
        return await self.find_transactions(include_deleted=True)

    async def find_transactions(
        self,
        search_text: Optional[str] = None,
        payer_id: Optional[str] = None,
        beneficiary_id: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        include_deleted: bool = False
    ) -> List[Transaction]:
        """
        Filtered transaction listing.

        ``search_text`` matches the label case-insensitively; the date range
        is inclusive on both ends.
        """
        query = {}
        if not include_deleted:
            query["is_deleted"] = False
        if search_text:
            query["label"] = {"$regex": re.escape(search_text), "$options": "i"}
        if payer_id:
            query["payer_id"] = payer_id
        if beneficiary_id:
            query["beneficiary_id"] = beneficiary_id
        if date_from or date_to:
            query["occurred_at"] = {}
            if date_from:
                query["occurred_at"]["$gte"] = date_from
            if date_to:
                query["occurred_at"]["$lte"] = date_to

        docs = await self.transactions.find(query).sort(TRANSACTION_ORDER).to_list(None)
        return [Transaction(**doc) for doc in docs]

    async def list_active_pending_settlements(self) -> List[Settlement]:
        docs = await self.pending_settlements.find(
            {"is_active": True}
        ).sort("suggested_at", 1).to_list(None)
        return [Settlement(**doc) for doc in docs]

    # ===== WRITES =====

    async def append_transaction(self, transaction: Transaction) -> None:
        await self.transactions.insert_one(transaction.to_document())
        logger.info(
            f"Transaction added: {transaction.label} - {transaction.amount} (ID: {transaction.id})"
        )

    async def soft_delete_transaction(self, transaction_id: str) -> bool:
        """Mark a transaction deleted. Returns False if it does not exist."""
        result = await self.transactions.update_one(
            {"_id": transaction_id, "is_deleted": False},
            {
                "$set": {
                    "is_deleted": True,
                    "deleted_at": datetime.now(timezone.utc)
                }
            }
        )
        if result.modified_count == 0:
            logger.warning(f"Transaction to delete not found: ID {transaction_id}")
            return False
        logger.info(f"Transaction marked as deleted: ID {transaction_id}")
        return True

    async def deactivate_pending_settlement(self, settlement_id: str) -> None:
        await self.pending_settlements.update_one(
            {"_id": settlement_id},
            {"$set": {"is_active": False}}
        )

    async def reduce_pending_settlement_amount(self, settlement_id: str, amount: Decimal) -> None:
        """Store the remaining amount; a record at or below zero goes inactive."""
        await self.pending_settlements.update_one(
            {"_id": settlement_id},
            {"$set": {"amount": Decimal128(amount), "is_active": amount > 0}}
        )

    async def clear_all_pending_settlements(self) -> None:
        result = await self.pending_settlements.delete_many({})
        logger.debug(f"Cleared {result.deleted_count} pending settlements")

    async def save_pending_settlements(self, settlements: List[Settlement]) -> None:
        if settlements:
            await self.pending_settlements.insert_many(
                [settlement.to_document() for settlement in settlements]
            )
