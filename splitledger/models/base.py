from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Annotated, Any
from uuid import uuid4

from bson.decimal128 import Decimal128
from pydantic import BaseModel, BeforeValidator, Field, ConfigDict

CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("1e15")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


def to_money(value: Any) -> Decimal:
    """Coerce to a Decimal rounded to cents (banker's rounding)."""
    if isinstance(value, Decimal128):
        value = value.to_decimal()
    elif isinstance(value, float):
        value = str(value)
    elif isinstance(value, bool):
        raise ValueError("invalid amount")
    try:
        amount = Decimal(value)
        if not amount.is_finite() or abs(amount) > MAX_AMOUNT:
            raise ValueError("invalid amount")
        return amount.quantize(CENT, rounding=ROUND_HALF_EVEN)
    except (InvalidOperation, TypeError):
        raise ValueError("invalid amount")


Money = Annotated[Decimal, BeforeValidator(to_money)]


class MongoModel(BaseModel):
    id: str = Field(default_factory=_new_id, alias="_id")
    created_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        from_attributes=True
    )

    def to_document(self) -> dict:
        """Dump for MongoDB: ``_id`` key and Decimal128 amounts."""
        doc = self.model_dump(by_alias=True)
        for key, value in doc.items():
            if isinstance(value, Decimal):
                doc[key] = Decimal128(value)
        return doc
