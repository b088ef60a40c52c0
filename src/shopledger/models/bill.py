"""Bill model: one purchase from a wholesaler or one sale to a customer."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Integer, Numeric, Sequence, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.core.db import Base
from shopledger.models.enums import BillStatus
from shopledger.utils.datetime import now_utc

bill_number_seq = Sequence("bill_number_seq", metadata=Base.metadata)


def format_bill_number(number: int) -> str:
    return f"BILL-{number:06d}"


class Bill(Base):
    """
    A bill and its contribution to the linked entity's balance.

    due_amount is stored and always equals total_amount - paid_amount.
    entity_id is a plain column (no foreign key) because it points at
    either a wholesaler or a customer depending on entity_type; walk-in
    sales have no entity at all.

    version guards against two requests editing the same bill from the
    same stale snapshot: the second flush matches no row and raises
    StaleDataError.
    """

    __tablename__ = "bills"
    __table_args__ = (
        Index("ix_bills_shopkeeper_created", "shopkeeper_id", "created_at"),
        Index("ix_bills_shopkeeper_entity", "shopkeeper_id", "entity_id"),
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

    number: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    bill_number: Mapped[str] = mapped_column(String(30), nullable=False, unique=True, index=True)

    bill_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    entity_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    entity_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    entity_name: Mapped[str] = mapped_column(String(200), nullable=False)

    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    paid_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00")
    )
    due_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)

    items: Mapped[list[dict]] = mapped_column(JSONB, nullable=False, default=list)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=BillStatus.ACTIVE.value,
        index=True,
    )
    is_edited: Mapped[bool] = mapped_column(default=False, nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc,
        onupdate=now_utc,
    )

    __mapper_args__ = {"version_id_col": version}

    @hybrid_property
    def is_deleted(self) -> bool:
        return self.status == BillStatus.DELETED.value

    @is_deleted.inplace.expression
    @classmethod
    def _is_deleted_expression(cls):
        return cls.status == BillStatus.DELETED.value

    def __repr__(self) -> str:
        return (
            f"<Bill(bill_number={self.bill_number}, bill_type={self.bill_type}, "
            f"total_amount={self.total_amount}, paid_amount={self.paid_amount}, "
            f"status={self.status})>"
        )
