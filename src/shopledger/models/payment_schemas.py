"""Pydantic schemas for Payment API."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shopledger.core.validators import MIN_BILL_AMOUNT, sanitize_html, validate_currency
from shopledger.models.enums import PaymentEntityType, PaymentMethod


class PaymentCreate(BaseModel):
    """A standalone payment against a customer's or wholesaler's balance.

    The amount is not capped by the outstanding due; overpaying leaves
    the entity with an advance (negative outstanding_due).
    """

    entity_type: PaymentEntityType
    entity_id: UUID
    amount: Decimal = Field(..., ge=MIN_BILL_AMOUNT)
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: str | None = Field(None, max_length=1000)

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        return validate_currency(v)

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: str | None) -> str | None:
        return sanitize_html(v)


class PaymentRead(BaseModel):
    id: UUID
    entity_type: PaymentEntityType
    entity_id: UUID | None
    entity_name: str
    amount: Decimal
    payment_method: PaymentMethod
    bill_id: UUID | None
    notes: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
