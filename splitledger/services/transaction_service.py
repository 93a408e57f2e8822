from typing import List

from splitledger.core.exceptions import LedgerValidationError, TransactionNotFoundError
from splitledger.core.logger import get_logger
from splitledger.models.base import _utcnow
from splitledger.models.transaction import Transaction
from splitledger.repositories.ledger_repo import LedgerRepository
from splitledger.schemas.transaction import BulkTransactionCreate, TransactionCreate

logger = get_logger(__name__)


class TransactionService:
    """User-entered ledger writes, checked against the active roster."""

    def __init__(self, ledger: LedgerRepository):
        self.ledger = ledger

    async def _active_ids(self) -> set:
        participants = await self.ledger.list_participants()
        return {p.id for p in participants if p.is_active}

    @staticmethod
    def _require_active(active_ids: set, *participant_ids: str) -> None:
        for participant_id in participant_ids:
            if participant_id not in active_ids:
                raise LedgerValidationError(
                    f"Participant {participant_id} is unknown or inactive",
                    error_code="INACTIVE_PARTICIPANT",
                    details={"participant_id": participant_id}
                )

    async def add_transaction(self, transaction_in: TransactionCreate) -> Transaction:
        active_ids = await self._active_ids()
        self._require_active(active_ids, transaction_in.payer_id, transaction_in.beneficiary_id)

        transaction = Transaction(
            payer_id=transaction_in.payer_id,
            beneficiary_id=transaction_in.beneficiary_id,
            amount=transaction_in.amount,
            label=transaction_in.label,
            occurred_at=transaction_in.occurred_at or _utcnow()
        )
        await self.ledger.append_transaction(transaction)
        return transaction

    async def add_bulk_transactions(self, bulk_in: BulkTransactionCreate) -> List[Transaction]:
        """
        Append one transaction per billable share.

        Every participant is checked before the first write, so an invalid
        share leaves the ledger untouched.
        """
        shares = bulk_in.billable_shares()
        active_ids = await self._active_ids()
        self._require_active(active_ids, bulk_in.payer_id, *(s.beneficiary_id for s in shares))

        occurred_at = bulk_in.occurred_at or _utcnow()
        transactions = []
        for share in shares:
            label = f"{bulk_in.label} ({share.comment})" if share.comment.strip() else bulk_in.label
            transaction = Transaction(
                payer_id=bulk_in.payer_id,
                beneficiary_id=share.beneficiary_id,
                amount=share.amount,
                label=label,
                occurred_at=occurred_at
            )
            await self.ledger.append_transaction(transaction)
            transactions.append(transaction)

        logger.info(f"Bulk transaction '{bulk_in.label}' added as {len(transactions)} transactions")
        return transactions

    async def delete_transaction(self, transaction_id: str) -> None:
        if not await self.ledger.soft_delete_transaction(transaction_id):
            raise TransactionNotFoundError(
                f"Transaction {transaction_id} not found",
                details={"transaction_id": transaction_id}
            )
