from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator

from splitledger.models.base import Money, to_money
from splitledger.services.amount_expression import evaluate_amount


def parse_amount(value: Any) -> Decimal:
    """Accept a number or a typed expression such as "12,50+3"."""
    if isinstance(value, str):
        value = evaluate_amount(value)
    return to_money(value)


AmountInput = Annotated[Decimal, BeforeValidator(parse_amount)]


class TransactionCreate(BaseModel):
    """Request body for a single user-entered transaction."""
    payer_id: str = Field(..., min_length=1)
    beneficiary_id: str = Field(..., min_length=1)
    amount: AmountInput
    label: str = Field(..., min_length=1, max_length=500)
    occurred_at: Optional[datetime] = None

    @field_validator("label")
    @classmethod
    def label_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("label must not be blank")
        return v.strip()

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("amount must be positive")
        return v

    @model_validator(mode="after")
    def distinct_parties(self):
        if self.payer_id == self.beneficiary_id:
            raise ValueError("payer and beneficiary must differ")
        return self


class BeneficiaryShare(BaseModel):
    """One beneficiary's part of a bulk transaction."""
    beneficiary_id: str = Field(..., min_length=1)
    amount: AmountInput
    comment: str = ""

    @field_validator("amount")
    @classmethod
    def amount_not_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("share amount must not be negative")
        return v


class BulkTransactionCreate(BaseModel):
    """
    One payment split across several beneficiaries.

    Expands to one transaction per share with a positive amount. The
    payer's own share is dropped since it would net to zero.

    ``expected_total`` is the full bill: it is checked against every listed
    share, the payer's own and zero shares included.
    """
    payer_id: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1, max_length=500)
    occurred_at: Optional[datetime] = None
    expected_total: Optional[Money] = None
    shares: List[BeneficiaryShare]

    @field_validator("label")
    @classmethod
    def label_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("label must not be blank")
        return v.strip()

    @model_validator(mode="after")
    def check_shares(self):
        if not self.billable_shares():
            raise ValueError("at least one share for another participant with a positive amount is required")
        if self.expected_total is not None:
            total = sum((share.amount for share in self.shares), Decimal("0"))
            if total != self.expected_total:
                raise ValueError(f"shares sum to {total}, expected {self.expected_total}")
        return self

    def billable_shares(self) -> List[BeneficiaryShare]:
        return [
            share for share in self.shares
            if share.amount > 0 and share.beneficiary_id != self.payer_id
        ]


class TransactionResponse(BaseModel):
    id: str = Field(validation_alias="_id", serialization_alias="id")
    payer_id: str
    beneficiary_id: str
    amount: Decimal
    label: str
    occurred_at: datetime
    is_settlement: bool
    is_deleted: bool
    deleted_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)
