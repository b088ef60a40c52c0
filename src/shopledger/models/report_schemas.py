"""Pydantic schemas for reports."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel


class DueLine(BaseModel):
    id: UUID
    name: str
    phone: str | None
    outstanding_due: Decimal


class DuesReport(BaseModel):
    """Who owes the shop (receivable) and whom the shop owes (payable)."""

    customers: list[DueLine]
    wholesalers: list[DueLine]
    total_receivable: Decimal
    total_payable: Decimal
    net_position: Decimal
