from decimal import Decimal
from typing import List, Protocol

from splitledger.models.participant import Participant
from splitledger.models.settlement import Settlement
from splitledger.models.transaction import Transaction


class LedgerStore(Protocol):
    """Read/write interface the settlement engine needs from storage."""

    async def list_participants(self) -> List[Participant]: ...

    async def list_transactions(self) -> List[Transaction]:
        """Non-deleted transactions only."""
        ...

    async def append_transaction(self, transaction: Transaction) -> None: ...

    async def list_active_pending_settlements(self) -> List[Settlement]:
        """Active records, oldest ``suggested_at`` first."""
        ...

    async def deactivate_pending_settlement(self, settlement_id: str) -> None: ...

    async def reduce_pending_settlement_amount(self, settlement_id: str, amount: Decimal) -> None: ...

    async def clear_all_pending_settlements(self) -> None: ...

    async def save_pending_settlements(self, settlements: List[Settlement]) -> None: ...
