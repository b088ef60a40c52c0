"""Audit logging model for bill edits and deletions."""

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.core.db import Base
from shopledger.utils.datetime import now_utc


class BillAuditLog(Base):
    """Immutable audit trail for all bill modifications."""

    __tablename__ = "bill_audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    bill_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("bills.id"),
        nullable=False,
        index=True,
    )

    # WHO
    changed_by: Mapped[str] = mapped_column(String(255), nullable=False)

    # WHEN
    changed_at: Mapped[datetime] = mapped_column(default=now_utc)

    # WHAT: "EDIT" or "DELETE"
    action: Mapped[str] = mapped_column(String(20), nullable=False)

    changed_fields: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    old_values: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    new_values: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)

    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<BillAuditLog(bill_id={self.bill_id}, "
            f"action={self.action}, changed_by={self.changed_by})>"
        )
