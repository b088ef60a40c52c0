"""Invoice model: a customer-facing document issued by the shop."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Numeric, Sequence, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.core.db import Base
from shopledger.models.enums import InvoiceStatus
from shopledger.utils.datetime import now_utc, today_utc

invoice_number_seq = Sequence("invoice_number_seq", metadata=Base.metadata)


def format_invoice_number(number: int) -> str:
    return f"INV-{number:06d}"


class Invoice(Base):
    """
    An invoice with a copy of the customer and shop details at issue time.

    Invoices are documents only: issuing, paying or cancelling one never
    moves a balance. Bills and payments do that.
    """

    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint(
            "shopkeeper_id", "invoice_number", name="uq_invoices_shopkeeper_number"
        ),
        Index("ix_invoices_shopkeeper_created", "shopkeeper_id", "created_at"),
        Index("ix_invoices_shopkeeper_status", "shopkeeper_id", "status"),
    )

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

    invoice_number: Mapped[str] = mapped_column(String(50), nullable=False)
    invoice_date: Mapped[date] = mapped_column(nullable=False, default=today_utc)
    due_date: Mapped[date | None] = mapped_column(nullable=True)

    customer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    customer_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    customer_address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    customer_gstin: Mapped[str | None] = mapped_column(String(50), nullable=True)

    shop_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    shop_address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    shop_place: Mapped[str | None] = mapped_column(String(200), nullable=True)
    shop_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    items: Mapped[list[dict]] = mapped_column(JSONB, nullable=False, default=list)

    subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    tax_rate: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    tax_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    discount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    discount_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    terms: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=InvoiceStatus.DRAFT.value,
    )
    is_deleted: Mapped[bool] = mapped_column(default=False, nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc,
        onupdate=now_utc,
    )

    def __repr__(self) -> str:
        return (
            f"<Invoice(invoice_number={self.invoice_number}, "
            f"customer_name={self.customer_name}, total={self.total}, status={self.status})>"
        )
