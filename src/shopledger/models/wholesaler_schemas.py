"""Pydantic schemas for Wholesaler API."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shopledger.core.validators import (
    sanitize_html,
    validate_currency,
    validate_email,
    validate_person_name,
    validate_phone,
)


class WholesalerContactFields(BaseModel):
    """Validators shared by create and update."""

    @field_validator("name", check_fields=False)
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return validate_person_name(v, "Wholesaler name")

    @field_validator("phone", "whatsapp_number", check_fields=False)
    @classmethod
    def validate_phone_number(cls, v: str | None) -> str | None:
        return validate_phone(v)

    @field_validator("email", check_fields=False)
    @classmethod
    def validate_email_address(cls, v: str | None) -> str | None:
        return validate_email(v)

    @field_validator("address", "place", "gst_number", check_fields=False)
    @classmethod
    def validate_text(cls, v: str | None) -> str | None:
        return sanitize_html(v)


class WholesalerCreate(WholesalerContactFields):
    """Schema for registering a wholesaler.

    initial_balance is signed: positive is a payable (we already owe
    them), negative is an advance we paid before any purchase.
    """

    name: str = Field(..., min_length=2, max_length=200)
    phone: str = Field(..., min_length=1, max_length=50)
    whatsapp_number: str | None = Field(None, max_length=50)
    email: str | None = Field(None, max_length=255)
    address: str = Field(..., min_length=1, max_length=500)
    place: str | None = Field(None, max_length=200)
    gst_number: str | None = Field(None, max_length=50)
    initial_balance: Decimal = Decimal("0.00")

    @field_validator("initial_balance")
    @classmethod
    def validate_initial_balance(cls, v: Decimal) -> Decimal:
        return validate_currency(v, allow_negative=True)


class WholesalerUpdate(WholesalerContactFields):
    """Profile update. Balance columns are deliberately absent."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=2, max_length=200)
    phone: str | None = Field(None, min_length=1, max_length=50)
    whatsapp_number: str | None = Field(None, max_length=50)
    email: str | None = Field(None, max_length=255)
    address: str | None = Field(None, max_length=500)
    place: str | None = Field(None, max_length=200)
    gst_number: str | None = Field(None, max_length=50)
    is_active: bool | None = None


class WholesalerRead(BaseModel):
    id: UUID
    name: str
    phone: str | None
    whatsapp_number: str | None
    email: str | None
    address: str | None
    place: str | None
    gst_number: str | None
    initial_balance: Decimal
    total_purchased: Decimal
    total_paid: Decimal
    outstanding_due: Decimal
    is_active: bool
    is_deleted: bool
    deleted_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WholesalerStats(BaseModel):
    """Counts over non-deleted wholesalers; deleted ones counted apart."""

    total: int
    active: int
    inactive: int
    deleted: int
    with_dues: int
    total_outstanding: Decimal


class WholesalerDashboard(BaseModel):
    """Totals over every wholesaler, soft-deleted ones included."""

    total_wholesalers: int
    total_purchased: Decimal
    total_paid: Decimal
    total_outstanding: Decimal
