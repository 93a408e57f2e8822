from decimal import Decimal
from typing import List, Optional

from splitledger.core.config import settings
from splitledger.core.exceptions import PartialSettlementError
from splitledger.core.logger import get_logger
from splitledger.models.balance import Balance, Debt
from splitledger.models.settlement import Settlement
from splitledger.repositories.base import LedgerStore
from splitledger.services.netting import calculate_balances, calculate_debts, settle_min_transfers

logger = get_logger(__name__)


class SettlementService:
    """
    Balance and settlement engine over a ledger store.

    Every call reads the ledger afresh; nothing is cached between calls.
    Store failures are logged with context and re-raised unchanged.
    """

    def __init__(
        self,
        ledger: LedgerStore,
        label_prefix: Optional[str] = None,
        tolerance: Optional[Decimal] = None
    ):
        self.ledger = ledger
        self.label_prefix = label_prefix or settings.SETTLEMENT_LABEL_PREFIX
        self.tolerance = tolerance if tolerance is not None else settings.BALANCE_TOLERANCE

    async def calculate_balances(self) -> List[Balance]:
        logger.debug("Starting balance calculation")
        try:
            participants = await self.ledger.list_participants()
            transactions = await self.ledger.list_transactions()
        except Exception:
            logger.exception("Error occurred during balance calculation")
            raise

        logger.info(
            f"Calculating balances for {len(participants)} participants "
            f"based on {len(transactions)} transactions"
        )
        balances = calculate_balances(participants, transactions)
        logger.debug(
            f"Balance summary: {sum(1 for b in balances if b.is_creditor)} positive, "
            f"{sum(1 for b in balances if b.is_debtor)} negative"
        )
        return balances

    async def calculate_minimal_transfers(self) -> List[Settlement]:
        logger.debug("Starting minimal transfers calculation")
        balances = await self.calculate_balances()
        settlements = settle_min_transfers(balances)
        logger.info(f"Minimal transfers calculation completed. Generated {len(settlements)} settlements")
        return settlements

    async def calculate_current_debts(self) -> List[Debt]:
        logger.debug("Starting current debts calculation")
        try:
            participants = await self.ledger.list_participants()
            transactions = await self.ledger.list_transactions()
        except Exception:
            logger.exception("Error occurred during current debts calculation")
            raise

        debts = calculate_debts(participants, transactions)
        logger.info(f"Current debts calculation completed. Found {len(debts)} debts")
        return debts

    async def get_user_balance(self, participant_id: str) -> Decimal:
        """Net balance of one participant; 0.00 if inactive or unknown."""
        balances = await self.calculate_balances()
        for balance in balances:
            if balance.participant_id == participant_id:
                return balance.net_balance
        return Decimal("0.00")

    async def can_delete_user(self, participant_id: str) -> bool:
        """Advisory: True when the participant's balance is zero up to rounding."""
        balance = await self.get_user_balance(participant_id)
        can_delete = abs(balance) < self.tolerance
        logger.info(
            f"Participant {participant_id} deletion check: "
            f"Balance = {balance}, CanDelete = {can_delete}"
        )
        return can_delete

    async def apply_settlement(self, settlement: Settlement) -> None:
        """
        Record a settlement as a tagged transaction, then consume the
        matching pending-settlement record (oldest first) if there is one.

        Display names missing from the settlement are taken from the roster
        for the transaction label.
        """
        logger.info(
            f"Applying settlement: {settlement.payer_id} pays {settlement.amount} "
            f"to {settlement.recipient_id}"
        )
        try:
            named = await self._with_display_names(settlement)
            transaction = named.to_transaction(self.label_prefix)
            await self.ledger.append_transaction(transaction)
            await self._reconcile_pending(settlement)
        except Exception:
            logger.exception(
                f"Failed to apply settlement: {settlement.payer_id} -> {settlement.recipient_id}, "
                f"Amount: {settlement.amount}"
            )
            raise

        logger.debug(f"Settlement applied as transaction {transaction.id}")

    async def _with_display_names(self, settlement: Settlement) -> Settlement:
        if settlement.payer_name and settlement.recipient_name:
            return settlement
        names = {p.id: p.name for p in await self.ledger.list_participants()}
        return settlement.model_copy(update={
            "payer_name": settlement.payer_name or names.get(settlement.payer_id),
            "recipient_name": settlement.recipient_name or names.get(settlement.recipient_id)
        })

    async def _reconcile_pending(self, settlement: Settlement) -> None:
        stored = await self.ledger.list_active_pending_settlements()
        match = next(
            (
                s for s in stored
                if s.payer_id == settlement.payer_id and s.recipient_id == settlement.recipient_id
            ),
            None
        )
        if match is None:
            return

        if settlement.amount >= match.amount:
            await self.ledger.deactivate_pending_settlement(match.id)
            logger.debug(f"Removed pending settlement {match.id} - fully paid")
        else:
            remaining = match.amount - settlement.amount
            await self.ledger.reduce_pending_settlement_amount(match.id, remaining)
            logger.debug(f"Reduced pending settlement {match.id} amount to {remaining}")

    async def apply_all_settlements(self) -> List[Settlement]:
        """
        Compute the current minimal transfers and apply them in order.

        Not atomic: if one fails after others went through, those stay in the
        ledger and ``PartialSettlementError`` reports what was applied.
        """
        logger.info("Starting to apply all settlements")
        settlements = await self.calculate_minimal_transfers()
        logger.info(f"Found {len(settlements)} settlements to apply")

        applied: List[Settlement] = []
        for index, settlement in enumerate(settlements):
            try:
                await self.apply_settlement(settlement)
            except Exception as exc:
                if not applied:
                    raise
                logger.error(
                    f"Settlement run aborted after {len(applied)} of {len(settlements)} settlements"
                )
                raise PartialSettlementError(
                    "Some settlements may have been applied",
                    applied=applied,
                    pending=settlements[index:]
                ) from exc
            applied.append(settlement)

        logger.info(f"Successfully applied all {len(applied)} settlements")
        return applied

    async def get_stored_settlements(self) -> List[Settlement]:
        logger.debug("Getting stored settlements")
        try:
            return await self.ledger.list_active_pending_settlements()
        except Exception:
            logger.exception("Failed to get stored settlements")
            raise

    async def save_calculated_settlements(self) -> List[Settlement]:
        """Replace the pending-settlement records with a fresh solver run."""
        logger.debug("Calculating and saving new settlements")
        try:
            await self.ledger.clear_all_pending_settlements()
            settlements = await self.calculate_minimal_transfers()
            if settlements:
                await self.ledger.save_pending_settlements(settlements)
                logger.info(f"Saved {len(settlements)} new settlements")
            else:
                logger.info("No settlements needed - all balances are settled")
        except Exception:
            logger.exception("Failed to save calculated settlements")
            raise
        return settlements
