"""Pydantic schemas for Bill API."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from shopledger.core.ledger import BillTarget, bill_target
from shopledger.core.validators import MIN_BILL_AMOUNT, sanitize_html, validate_currency
from shopledger.models.enums import BillEntityType, BillType, PaymentMethod


class BillItem(BaseModel):
    """A line on a bill. Informational only, the ledger uses total_amount."""

    name: str = Field(..., min_length=1, max_length=200)
    quantity: int = Field(..., ge=1)
    price: Decimal = Field(..., ge=0)
    total: Decimal = Field(..., ge=0)

    @field_validator("price", "total")
    @classmethod
    def validate_currency_fields(cls, v: Decimal) -> Decimal:
        return validate_currency(v)

    def to_json(self) -> dict:
        return {
            "name": self.name,
            "quantity": self.quantity,
            "price": str(self.price),
            "total": str(self.total),
        }


class BillCreate(BaseModel):
    """Schema for creating a bill."""

    bill_type: BillType
    entity_type: BillEntityType
    entity_id: UUID | None = None
    entity_name: str = Field(..., min_length=1, max_length=200)
    total_amount: Decimal = Field(..., ge=MIN_BILL_AMOUNT)
    paid_amount: Decimal = Field(Decimal("0.00"), ge=0)
    payment_method: PaymentMethod
    items: list[BillItem] | None = None
    notes: str | None = Field(None, max_length=1000)

    @field_validator("total_amount", "paid_amount")
    @classmethod
    def validate_currency_fields(cls, v: Decimal) -> Decimal:
        return validate_currency(v)

    @field_validator("entity_name")
    @classmethod
    def validate_entity_name(cls, v: str) -> str:
        cleaned = sanitize_html(v)
        if not cleaned:
            raise ValueError("Entity name is required")
        return cleaned

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: str | None) -> str | None:
        return sanitize_html(v)

    @model_validator(mode="after")
    def validate_target(self) -> "BillCreate":
        # Walk-in sales never carry an entity, even if the client sent one
        if self.entity_type == BillEntityType.NORMAL_CUSTOMER:
            self.entity_id = None
        bill_target(self.bill_type, self.entity_type, self.entity_id)
        return self

    def target(self) -> BillTarget:
        return bill_target(self.bill_type, self.entity_type, self.entity_id)


class BillUpdate(BaseModel):
    """Schema for editing an active bill. Omitted fields keep their value."""

    model_config = ConfigDict(extra="forbid")

    total_amount: Decimal | None = Field(None, ge=MIN_BILL_AMOUNT)
    paid_amount: Decimal | None = Field(None, ge=0)
    payment_method: PaymentMethod | None = None
    notes: str | None = Field(None, max_length=1000)
    reason: str | None = Field(None, max_length=500, description="Reason for edit")

    @field_validator("total_amount", "paid_amount")
    @classmethod
    def validate_currency_fields(cls, v: Decimal | None) -> Decimal | None:
        if v is None:
            return None
        return validate_currency(v)

    @field_validator("notes", "reason")
    @classmethod
    def validate_text_fields(cls, v: str | None) -> str | None:
        return sanitize_html(v)


class BillRead(BaseModel):
    """Schema for reading a bill."""

    id: UUID
    bill_number: str
    bill_type: BillType
    entity_type: BillEntityType
    entity_id: UUID | None
    entity_name: str
    total_amount: Decimal
    paid_amount: Decimal
    due_amount: Decimal
    payment_method: PaymentMethod
    items: list[BillItem]
    notes: str | None
    status: str
    is_deleted: bool
    is_edited: bool
    deleted_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BillStats(BaseModel):
    """Counts and sums over a shopkeeper's active bills."""

    total_bills: int
    total_purchases: int
    total_sales: int
    today_bills: int
    purchase_amount: Decimal
    sale_amount: Decimal


class BillAuditLogRead(BaseModel):
    id: UUID
    bill_id: UUID
    action: str
    changed_by: str
    changed_at: datetime
    changed_fields: list[str]
    old_values: dict
    new_values: dict
    reason: str | None

    model_config = ConfigDict(from_attributes=True)
