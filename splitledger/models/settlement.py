from datetime import datetime
from typing import Optional

from pydantic import Field

from splitledger.models.base import MongoModel, Money, _utcnow
from splitledger.models.transaction import Transaction


class Settlement(MongoModel):
    """
    A suggested transfer from payer to recipient.

    Produced by the solver as a proposal; once saved it doubles as a
    pending-settlement record whose amount shrinks as payments come in.
    """

    payer_id: str
    recipient_id: str
    amount: Money
    suggested_at: datetime = Field(default_factory=_utcnow)
    is_active: bool = True

    # Display names, filled in by the solver or looked up on apply; not persisted
    payer_name: Optional[str] = Field(default=None, exclude=True)
    recipient_name: Optional[str] = Field(default=None, exclude=True)

    def to_transaction(self, label_prefix: str = "Settlement") -> Transaction:
        """Convert into the settlement-tagged ledger transaction."""
        payer = self.payer_name or self.payer_id
        recipient = self.recipient_name or self.recipient_id
        return Transaction(
            payer_id=self.payer_id,
            beneficiary_id=self.recipient_id,
            amount=self.amount,
            label=f"{label_prefix} {payer}->{recipient}",
            occurred_at=self.suggested_at,
            is_settlement=True
        )
