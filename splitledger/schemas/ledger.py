from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ParticipantCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)


class ParticipantResponse(BaseModel):
    id: str = Field(validation_alias="_id", serialization_alias="id")
    name: str
    initial_name: str
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class ParticipantRemovedResponse(BaseModel):
    participant_id: str
    outcome: str  # deleted | deactivated


class BalanceResponse(BaseModel):
    participant_id: str
    participant_name: Optional[str] = None
    net_balance: Decimal


class UserBalanceResponse(BaseModel):
    participant_id: str
    net_balance: Decimal


class CanDeleteResponse(BaseModel):
    participant_id: str
    can_delete: bool


class DebtResponse(BaseModel):
    debtor_id: str
    debtor_name: Optional[str] = None
    creditor_id: str
    creditor_name: Optional[str] = None
    amount: Decimal
