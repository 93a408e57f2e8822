from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from splitledger.core.logger import get_logger
from splitledger.models.participant import Participant

logger = get_logger(__name__)


class ParticipantRepository:
    """Participant roster operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db.participants

    async def add_participant(self, name: str) -> Participant:
        """Create a new, active participant."""
        participant = Participant(name=name.strip())
        await self.collection.insert_one(participant.to_document())
        logger.info(f"Participant added: {participant.name} (ID: {participant.id})")
        return participant

    async def get_participant(self, participant_id: str) -> Optional[Participant]:
        doc = await self.collection.find_one({"_id": participant_id})
        if doc:
            return Participant(**doc)
        return None

    async def list_participants(self, active_only: bool = False) -> List[Participant]:
        query = {"is_active": True} if active_only else {}
        docs = await self.collection.find(query).sort("name", 1).to_list(None)
        return [Participant(**doc) for doc in docs]

    async def rename_participant(self, participant_id: str, name: str) -> Optional[Participant]:
        result = await self.collection.find_one_and_update(
            {"_id": participant_id},
            {"$set": {"name": name.strip()}},
            return_document=True
        )
        if result:
            return Participant(**result)
        return None

    async def remove_participant(self, participant_id: str) -> Optional[str]:
        """
        Remove a participant.

        Participants referenced by any transaction (deleted ones included)
        are deactivated so history keeps resolving; others are deleted.

        Returns "deactivated", "deleted", or None when not found.
        """
        participant = await self.get_participant(participant_id)
        if participant is None:
            return None

        referenced = await self.db.transactions.find_one({
            "$or": [
                {"payer_id": participant_id},
                {"beneficiary_id": participant_id}
            ]
        })

        if referenced:
            await self.collection.update_one(
                {"_id": participant_id},
                {"$set": {"is_active": False}}
            )
            logger.info(
                f"Participant deactivated (has transactions): {participant.name} (ID: {participant_id})"
            )
            return "deactivated"

        await self.collection.delete_one({"_id": participant_id})
        logger.info(f"Participant deleted: {participant.name} (ID: {participant_id})")
        return "deleted"
