"""Derived, never-persisted views over the ledger."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from splitledger.models.base import Money
from splitledger.models.participant import Participant


class Balance(BaseModel):
    """Net position of one participant: > 0 is owed money, < 0 owes money."""

    participant_id: str
    net_balance: Money
    participant: Optional[Participant] = None

    @property
    def is_creditor(self) -> bool:
        return self.net_balance > 0

    @property
    def is_debtor(self) -> bool:
        return self.net_balance < 0

    @property
    def absolute_amount(self) -> Decimal:
        return abs(self.net_balance)


class Debt(BaseModel):
    """Direct pairwise debt: debtor owes creditor ``amount``."""

    debtor_id: str
    creditor_id: str
    amount: Money
    debtor: Optional[Participant] = None
    creditor: Optional[Participant] = None
