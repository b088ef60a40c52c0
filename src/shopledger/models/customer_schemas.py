"""Pydantic schemas for Customer API."""

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
from shopledger.models.enums import CustomerType


class CustomerContactFields(BaseModel):
    """Validators shared by create and update."""

    @field_validator("name", check_fields=False)
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return validate_person_name(v, "Customer name")

    @field_validator("phone", "whatsapp_number", check_fields=False)
    @classmethod
    def validate_phone_number(cls, v: str | None) -> str | None:
        return validate_phone(v)

    @field_validator("email", check_fields=False)
    @classmethod
    def validate_email_address(cls, v: str | None) -> str | None:
        return validate_email(v)

    @field_validator("address", check_fields=False)
    @classmethod
    def validate_address(cls, v: str | None) -> str | None:
        return sanitize_html(v)


class CustomerCreate(CustomerContactFields):
    """Schema for registering a customer.

    opening_balance is signed: positive means the customer already owes
    the shop that much, negative means they paid in advance.
    """

    name: str = Field(..., min_length=2, max_length=200)
    phone: str | None = Field(None, max_length=50)
    whatsapp_number: str | None = Field(None, max_length=50)
    email: str | None = Field(None, max_length=255)
    address: str | None = Field(None, max_length=500)
    type: CustomerType = CustomerType.DUE
    opening_balance: Decimal = Decimal("0.00")

    @field_validator("opening_balance")
    @classmethod
    def validate_opening_balance(cls, v: Decimal) -> Decimal:
        return validate_currency(v, allow_negative=True)


class CustomerUpdate(CustomerContactFields):
    """Profile update. Balance columns are deliberately absent."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=2, max_length=200)
    phone: str | None = Field(None, max_length=50)
    whatsapp_number: str | None = Field(None, max_length=50)
    email: str | None = Field(None, max_length=255)
    address: str | None = Field(None, max_length=500)
    is_active: bool | None = None


class CustomerRead(BaseModel):
    id: UUID
    name: str
    phone: str | None
    whatsapp_number: str | None
    email: str | None
    address: str | None
    type: CustomerType
    total_sales: Decimal
    total_paid: Decimal
    outstanding_due: Decimal
    opening_balance: Decimal
    last_payment_date: datetime | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CustomerStats(BaseModel):
    total: int
    active: int
    inactive: int
    with_dues: int
    total_outstanding: Decimal
    total_sales: Decimal
    total_paid: Decimal


class CustomerDashboard(BaseModel):
    total_customers: int
    total_sales: Decimal
    total_paid: Decimal
    total_outstanding: Decimal
