"""Pydantic schemas for cash-flow transactions."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from shopledger.models.enums import PaymentMethod, TransactionType


class TransactionRead(BaseModel):
    id: UUID
    type: TransactionType
    category: str
    amount: Decimal
    payment_method: PaymentMethod
    reference: str | None
    description: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CashFlowSummary(BaseModel):
    start_date: date | None
    end_date: date | None
    income: Decimal
    expense: Decimal
    net: Decimal
    transaction_count: int
