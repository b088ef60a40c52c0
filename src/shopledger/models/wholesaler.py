"""Wholesaler (supplier) model."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import ClassVar

from sqlalchemy import ForeignKey, Index, Numeric, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.core.db import Base
from shopledger.utils.datetime import now_utc


class Wholesaler(Base):
    """
    A supplier the shop buys from.

    outstanding_due == total_purchased - total_paid. Positive means the
    shop owes the wholesaler, negative means the shop paid in advance.

    Wholesalers are soft-deleted (is_deleted + deleted_at) and can be
    restored; neither transition touches the balance columns.
    """

    __tablename__ = "wholesalers"
    __table_args__ = (
        UniqueConstraint("shopkeeper_id", "phone", name="uq_wholesalers_shopkeeper_phone"),
        UniqueConstraint(
            "shopkeeper_id", "whatsapp_number", name="uq_wholesalers_shopkeeper_whatsapp"
        ),
        Index("ix_wholesalers_shopkeeper_name", "shopkeeper_id", "name"),
        Index("ix_wholesalers_shopkeeper_outstanding", "shopkeeper_id", "outstanding_due"),
    )

    GROSS_FIELD: ClassVar[str] = "total_purchased"

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
    place: Mapped[str | None] = mapped_column(String(200), nullable=True)
    gst_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Signed opening balance as entered at registration
    initial_balance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00")
    )

    total_purchased: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00")
    )
    total_paid: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00")
    )
    outstanding_due: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00")
    )

    is_active: Mapped[bool] = mapped_column(default=True, nullable=False, index=True)
    is_deleted: Mapped[bool] = mapped_column(default=False, nullable=False, index=True)
    deleted_at: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc,
        onupdate=now_utc,
    )

    def __repr__(self) -> str:
        return f"<Wholesaler(id={self.id}, name={self.name}, outstanding_due={self.outstanding_due})>"
