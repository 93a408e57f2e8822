"""
Transaction model - one "payer paid for beneficiary" event.

Design principles:
- Amount is always positive, direction is given by payer/beneficiary roles
- Amount is rounded to cents on construction
- Immutable once created; only the soft-delete marker can change
- Settlement transactions are machine-generated and tagged is_settlement
"""

from typing import Optional
from datetime import datetime
from pydantic import Field

from splitledger.models.base import MongoModel, Money, _utcnow


class Transaction(MongoModel):
    """
    Ledger entry: payer paid ``amount`` on behalf of beneficiary.

    Effect on balances: payer +amount, beneficiary -amount.
    """

    payer_id: str
    beneficiary_id: str
    amount: Money
    label: str = ""

    occurred_at: datetime = Field(default_factory=_utcnow)
    is_settlement: bool = False

    # Lifecycle
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None

    @property
    def is_self_transaction(self) -> bool:
        return self.payer_id == self.beneficiary_id
