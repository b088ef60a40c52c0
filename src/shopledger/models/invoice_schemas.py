"""Pydantic schemas for Invoice API."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from shopledger.core.validators import (
    sanitize_html,
    validate_currency,
    validate_email,
    validate_phone,
)
from shopledger.models.enums import DiscountType, InvoiceStatus


class InvoiceItem(BaseModel):
    description: str = Field(..., min_length=1, max_length=500)
    quantity: Decimal = Field(..., ge=0)
    rate: Decimal = Field(..., ge=0)
    amount: Decimal = Field(..., ge=0)
    tax_rate: Decimal | None = Field(None, ge=0, le=100)

    @field_validator("rate", "amount")
    @classmethod
    def validate_currency_fields(cls, v: Decimal) -> Decimal:
        return validate_currency(v)

    def to_json(self) -> dict:
        return {
            "description": self.description,
            "quantity": str(self.quantity),
            "rate": str(self.rate),
            "amount": str(self.amount),
            "tax_rate": str(self.tax_rate) if self.tax_rate is not None else None,
        }


class InvoiceFields(BaseModel):
    """Validators shared by create and update."""

    @field_validator("customer_phone", "shop_phone", check_fields=False)
    @classmethod
    def validate_phone_number(cls, v: str | None) -> str | None:
        return validate_phone(v)

    @field_validator("customer_email", check_fields=False)
    @classmethod
    def validate_email_address(cls, v: str | None) -> str | None:
        return validate_email(v)

    @field_validator(
        "customer_address",
        "customer_gstin",
        "shop_name",
        "shop_address",
        "shop_place",
        "notes",
        "terms",
        check_fields=False,
    )
    @classmethod
    def validate_text_fields(cls, v: str | None) -> str | None:
        return sanitize_html(v)

    @field_validator("subtotal", "tax_amount", "discount", "total", check_fields=False)
    @classmethod
    def validate_currency_fields(cls, v: Decimal | None) -> Decimal | None:
        if v is None:
            return None
        return validate_currency(v)


def check_invoice_terms(
    invoice_date: date | None,
    due_date: date | None,
    discount: Decimal | None,
    discount_type: DiscountType | None,
) -> None:
    """Raise ValueError when the dates or the discount don't make sense together."""
    if invoice_date and due_date and due_date < invoice_date:
        raise ValueError("due_date cannot be before invoice_date")
    if discount_type == DiscountType.PERCENTAGE and discount is not None and discount > 100:
        raise ValueError("Percentage discount cannot exceed 100")


class InvoiceCreate(InvoiceFields):
    """Schema for issuing an invoice.

    invoice_number is generated (INV-000001, ...) when omitted. Shop
    details default to the shopkeeper's own business profile.
    """

    invoice_number: str | None = Field(None, min_length=1, max_length=50)
    invoice_date: date | None = None
    due_date: date | None = None

    customer_name: str = Field(..., min_length=1, max_length=200)
    customer_email: str | None = Field(None, max_length=255)
    customer_phone: str | None = Field(None, max_length=50)
    customer_address: str | None = Field(None, max_length=500)
    customer_gstin: str | None = Field(None, max_length=50)

    shop_name: str | None = Field(None, max_length=200)
    shop_address: str | None = Field(None, max_length=500)
    shop_place: str | None = Field(None, max_length=200)
    shop_phone: str | None = Field(None, max_length=50)

    items: list[InvoiceItem] = Field(..., min_length=1)
    subtotal: Decimal = Field(..., ge=0)
    tax_rate: Decimal | None = Field(None, ge=0, le=100)
    tax_amount: Decimal | None = Field(None, ge=0)
    discount: Decimal | None = Field(None, ge=0)
    discount_type: DiscountType | None = None
    total: Decimal = Field(..., ge=0)

    notes: str | None = Field(None, max_length=2000)
    terms: str | None = Field(None, max_length=2000)
    status: InvoiceStatus = InvoiceStatus.DRAFT

    @field_validator("invoice_number")
    @classmethod
    def normalize_number(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip().upper()

    @field_validator("customer_name")
    @classmethod
    def validate_customer_name(cls, v: str) -> str:
        cleaned = sanitize_html(v)
        if not cleaned:
            raise ValueError("Customer name is required")
        return cleaned

    @model_validator(mode="after")
    def validate_terms(self) -> "InvoiceCreate":
        check_invoice_terms(self.invoice_date, self.due_date, self.discount, self.discount_type)
        return self


class InvoiceUpdate(InvoiceFields):
    """Partial update. The invoice number is fixed once issued."""

    model_config = ConfigDict(extra="forbid")

    invoice_date: date | None = None
    due_date: date | None = None

    customer_name: str | None = Field(None, min_length=1, max_length=200)
    customer_email: str | None = Field(None, max_length=255)
    customer_phone: str | None = Field(None, max_length=50)
    customer_address: str | None = Field(None, max_length=500)
    customer_gstin: str | None = Field(None, max_length=50)

    shop_name: str | None = Field(None, max_length=200)
    shop_address: str | None = Field(None, max_length=500)
    shop_place: str | None = Field(None, max_length=200)
    shop_phone: str | None = Field(None, max_length=50)

    items: list[InvoiceItem] | None = Field(None, min_length=1)
    subtotal: Decimal | None = Field(None, ge=0)
    tax_rate: Decimal | None = Field(None, ge=0, le=100)
    tax_amount: Decimal | None = Field(None, ge=0)
    discount: Decimal | None = Field(None, ge=0)
    discount_type: DiscountType | None = None
    total: Decimal | None = Field(None, ge=0)

    notes: str | None = Field(None, max_length=2000)
    terms: str | None = Field(None, max_length=2000)
    status: InvoiceStatus | None = None

    @field_validator("customer_name")
    @classmethod
    def validate_customer_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        cleaned = sanitize_html(v)
        if not cleaned:
            raise ValueError("Customer name is required")
        return cleaned


class InvoiceRead(BaseModel):
    id: UUID
    invoice_number: str
    invoice_date: date
    due_date: date | None
    customer_name: str
    customer_email: str | None
    customer_phone: str | None
    customer_address: str | None
    customer_gstin: str | None
    shop_name: str | None
    shop_address: str | None
    shop_place: str | None
    shop_phone: str | None
    items: list[InvoiceItem]
    subtotal: Decimal
    tax_rate: Decimal | None
    tax_amount: Decimal | None
    discount: Decimal | None
    discount_type: DiscountType | None
    total: Decimal
    notes: str | None
    terms: str | None
    status: InvoiceStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
