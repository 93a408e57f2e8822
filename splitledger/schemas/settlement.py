from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from splitledger.models.base import Money


class SettlementApply(BaseModel):
    """A transfer the caller wants recorded as paid."""
    payer_id: str = Field(..., min_length=1)
    recipient_id: str = Field(..., min_length=1)
    amount: Money
    suggested_at: Optional[datetime] = None

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("amount must be positive")
        return v

    @model_validator(mode="after")
    def distinct_parties(self):
        if self.payer_id == self.recipient_id:
            raise ValueError("payer and recipient must differ")
        return self


class SettlementResponse(BaseModel):
    id: str = Field(validation_alias="_id", serialization_alias="id")
    payer_id: str
    recipient_id: str
    payer_name: Optional[str] = None
    recipient_name: Optional[str] = None
    amount: Decimal
    suggested_at: datetime
    is_active: bool

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class ApplyAllResponse(BaseModel):
    applied: List[SettlementResponse]
