"""Customer model: due customers with a running balance, or walk-in customers."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import ClassVar

from sqlalchemy import ForeignKey, Index, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.core.db import Base
from shopledger.models.enums import CustomerType
from shopledger.utils.datetime import now_utc


class Customer(Base):
    """
    A customer of the shop.

    Balance columns are a materialized running total over the customer's
    sale bills and standalone payments:

        outstanding_due == total_sales - total_paid

    They are only ever changed by atomic increments (core/balances.py),
    never assigned from request data. A negative outstanding_due is an
    advance paid by the customer.
    """

    __tablename__ = "customers"
    __table_args__ = (
        Index("ix_customers_shopkeeper_type", "shopkeeper_id", "type"),
        Index("ix_customers_shopkeeper_name", "shopkeeper_id", "name"),
        Index("ix_customers_shopkeeper_outstanding", "shopkeeper_id", "outstanding_due"),
    )

    # Column incremented by bill amounts
    GROSS_FIELD: ClassVar[str] = "total_sales"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    shopkeeper_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    whatsapp_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)

    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=CustomerType.DUE.value,
    )

    total_sales: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00")
    )
    total_paid: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00")
    )
    outstanding_due: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00")
    )
    opening_balance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00")
    )

    last_payment_date: Mapped[datetime | None] = mapped_column(nullable=True)

    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc,
        onupdate=now_utc,
    )

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name={self.name}, outstanding_due={self.outstanding_due})>"
