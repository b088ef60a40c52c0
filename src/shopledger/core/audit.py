"""Audit logging utilities for tracking bill changes."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.models.bill import Bill
from shopledger.models.bill_audit_log import BillAuditLog
from shopledger.utils.datetime import now_utc

AUDITED_BILL_FIELDS = ("total_amount", "paid_amount", "due_amount", "payment_method", "notes", "status")


def capture_bill_values(bill: Bill) -> dict[str, Any]:
    """Snapshot of the audited bill fields."""
    return {field: getattr(bill, field) for field in AUDITED_BILL_FIELDS}


def _serialize_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


async def log_bill_change(
    db: AsyncSession,
    bill: Bill,
    changed_by: str,
    action: str,
    old_values: dict[str, Any],
    new_values: dict[str, Any],
    reason: str | None = None,
) -> BillAuditLog:
    """Log a bill edit or deletion to the audit trail.

    Args:
        db: Database session
        bill: The bill being modified
        changed_by: Email of the shopkeeper making the change
        action: "EDIT" or "DELETE"
        old_values: Dict of {field_name: old_value}
        new_values: Dict of {field_name: new_value}
        reason: Optional reason for the change

    Returns:
        Created BillAuditLog record
    """
    changed_fields = [k for k in old_values if old_values[k] != new_values.get(k)]

    audit_log = BillAuditLog(
        bill_id=bill.id,
        changed_by=changed_by,
        action=action,
        changed_fields=changed_fields,
        old_values={k: _serialize_value(old_values[k]) for k in changed_fields},
        new_values={k: _serialize_value(new_values.get(k)) for k in changed_fields},
        reason=reason,
        changed_at=now_utc(),
    )

    db.add(audit_log)
    return audit_log
