"""Bill endpoints (create, list, stats, get, edit, soft delete)."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.api.auth import get_current_user
from shopledger.api.bill_helpers import (
    apply_bill_filters,
    bill_filters,
    ensure_target_billable,
    get_bill_or_404,
    record_bill_adjustment,
    record_bill_payment,
    require_active,
)
from shopledger.core.audit import capture_bill_values, log_bill_change
from shopledger.core.balances import apply_delta
from shopledger.core.db import get_db
from shopledger.core.errors import NotFoundError, ValidationError
from shopledger.core.ledger import (
    bill_target,
    cash_flow_type,
    delta_on_create,
    delta_on_delete,
    delta_on_edit,
    due_amount,
    reverse_flow,
)
from shopledger.core.logging import get_logger
from shopledger.core.validators import sanitize_html
from shopledger.models import Bill, BillAuditLog, User
from shopledger.models.bill import bill_number_seq, format_bill_number
from shopledger.models.bill_schemas import (
    BillAuditLogRead,
    BillCreate,
    BillRead,
    BillStats,
    BillUpdate,
)
from shopledger.models.common_schemas import Page
from shopledger.models.enums import BillStatus, BillType
from shopledger.utils.datetime import now_utc, start_of_day, today_utc

logger = get_logger(__name__)

router = APIRouter(prefix="/bills", tags=["bills"])


@router.post("", response_model=BillRead, status_code=status.HTTP_201_CREATED)
async def create_bill(
    bill_in: BillCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a bill and move its amounts onto the entity's balance.

    Walk-in sales (normal_customer) touch no balance. Any paid amount is
    also recorded as a Payment and an income/expense Transaction.
    """
    target = bill_in.target()
    await ensure_target_billable(db, current_user.id, target)

    number = await db.scalar(select(bill_number_seq.next_value()))

    bill = Bill(
        shopkeeper_id=current_user.id,
        number=number,
        bill_number=format_bill_number(number),
        bill_type=bill_in.bill_type.value,
        entity_type=bill_in.entity_type.value,
        entity_id=bill_in.entity_id,
        entity_name=bill_in.entity_name,
        total_amount=bill_in.total_amount,
        paid_amount=bill_in.paid_amount,
        due_amount=due_amount(bill_in.total_amount, bill_in.paid_amount),
        payment_method=bill_in.payment_method.value,
        items=[item.to_json() for item in bill_in.items or []],
        notes=bill_in.notes,
        status=BillStatus.ACTIVE.value,
    )
    db.add(bill)
    await db.flush()

    await apply_delta(
        db,
        current_user.id,
        target,
        delta_on_create(bill.total_amount, bill.paid_amount),
    )

    if bill.paid_amount > 0:
        record_bill_payment(db, bill)

    await db.commit()
    await db.refresh(bill)

    logger.info(
        "bill.created",
        bill_id=str(bill.id),
        bill_number=bill.bill_number,
        bill_type=bill.bill_type,
        entity_type=bill.entity_type,
        total_amount=str(bill.total_amount),
        paid_amount=str(bill.paid_amount),
    )
    return bill


@router.get("", response_model=Page[BillRead])
async def list_bills(
    filters: dict = Depends(bill_filters),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List bills, newest first. Deleted bills only with include_deleted=true."""
    stmt = apply_bill_filters(select(Bill), current_user.id, **filters)

    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))

    stmt = stmt.order_by(Bill.created_at.desc()).offset((page - 1) * limit).limit(limit)
    result = await db.execute(stmt)

    return Page.build(list(result.scalars().all()), total or 0, page, limit)


@router.get("/stats", response_model=BillStats)
async def get_bill_stats(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Counts and amounts over active bills."""
    is_purchase = Bill.bill_type == BillType.PURCHASE.value
    is_sale = Bill.bill_type == BillType.SALE.value

    stmt = select(
        func.count(Bill.id),
        func.count(Bill.id).filter(is_purchase),
        func.count(Bill.id).filter(is_sale),
        func.count(Bill.id).filter(Bill.created_at >= start_of_day(today_utc())),
        func.coalesce(func.sum(Bill.total_amount).filter(is_purchase), 0),
        func.coalesce(func.sum(Bill.total_amount).filter(is_sale), 0),
    ).where(Bill.shopkeeper_id == current_user.id, ~Bill.is_deleted)

    row = (await db.execute(stmt)).one()

    return BillStats(
        total_bills=row[0],
        total_purchases=row[1],
        total_sales=row[2],
        today_bills=row[3],
        purchase_amount=row[4],
        sale_amount=row[5],
    )


@router.get("/recent", response_model=list[BillRead])
async def get_recent_bills(
    limit: int = Query(10, ge=1, le=50),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    stmt = (
        select(Bill)
        .where(Bill.shopkeeper_id == current_user.id, ~Bill.is_deleted)
        .order_by(Bill.created_at.desc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    return result.scalars().all()


@router.get("/number/{bill_number}", response_model=BillRead)
async def get_bill_by_number(
    bill_number: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(Bill).where(
        Bill.bill_number == bill_number.upper(),
        Bill.shopkeeper_id == current_user.id,
    )
    result = await db.execute(stmt)
    bill = result.scalar_one_or_none()

    if not bill:
        raise NotFoundError("Bill", bill_number)
    return bill


@router.get("/{bill_id}", response_model=BillRead)
async def get_bill(
    bill_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a bill by id. Deleted bills are still returned."""
    return await get_bill_or_404(db, current_user.id, bill_id)


@router.patch("/{bill_id}", response_model=BillRead)
async def edit_bill(
    bill_id: UUID,
    patch: BillUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Edit an active bill.

    The entity balance moves by the difference between the new and the
    old amounts. The bill row is flushed first: if another request changed
    it since it was read, the version check fails before any balance moves.
    """
    changes = patch.model_fields_set - {"reason"}
    if not changes:
        raise ValidationError("No changes provided")

    bill = await get_bill_or_404(db, current_user.id, bill_id)
    require_active(bill)

    old_values = capture_bill_values(bill)
    old_total, old_paid = bill.total_amount, bill.paid_amount

    new_total = patch.total_amount if patch.total_amount is not None else old_total
    new_paid = patch.paid_amount if patch.paid_amount is not None else old_paid

    bill.total_amount = new_total
    bill.paid_amount = new_paid
    bill.due_amount = due_amount(new_total, new_paid)
    # Method of a fully unpaid bill keeps its last value
    if patch.payment_method is not None and new_paid > 0:
        bill.payment_method = patch.payment_method.value
    if "notes" in changes:
        bill.notes = patch.notes
    bill.is_edited = True

    await db.flush()

    await apply_delta(
        db,
        current_user.id,
        bill_target(bill.bill_type, bill.entity_type, bill.entity_id),
        delta_on_edit(old_total, old_paid, new_total, new_paid),
    )

    paid_change = new_paid - old_paid
    if paid_change != 0:
        flow = cash_flow_type(bill.bill_type)
        record_bill_adjustment(
            db,
            bill,
            flow if paid_change > 0 else reverse_flow(flow),
            abs(paid_change),
            "Bill Adjustment",
        )

    await log_bill_change(
        db,
        bill,
        current_user.email,
        "EDIT",
        old_values,
        capture_bill_values(bill),
        reason=patch.reason,
    )

    await db.commit()
    await db.refresh(bill)

    logger.info(
        "bill.updated",
        bill_id=str(bill.id),
        bill_number=bill.bill_number,
        total_amount=str(bill.total_amount),
        paid_amount=str(bill.paid_amount),
        version=bill.version,
    )
    return bill


@router.delete("/{bill_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bill(
    bill_id: UUID,
    reason: str | None = Query(None, max_length=500),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Soft delete an active bill and take its amounts back off the entity."""
    bill = await get_bill_or_404(db, current_user.id, bill_id)
    require_active(bill)

    old_values = capture_bill_values(bill)

    bill.status = BillStatus.DELETED.value
    bill.deleted_at = now_utc()

    await db.flush()

    await apply_delta(
        db,
        current_user.id,
        bill_target(bill.bill_type, bill.entity_type, bill.entity_id),
        delta_on_delete(bill.total_amount, bill.paid_amount),
    )

    if bill.paid_amount > 0:
        record_bill_adjustment(
            db,
            bill,
            reverse_flow(cash_flow_type(bill.bill_type)),
            bill.paid_amount,
            "Bill Reversal",
        )

    await log_bill_change(
        db,
        bill,
        current_user.email,
        "DELETE",
        old_values,
        capture_bill_values(bill),
        reason=sanitize_html(reason),
    )

    await db.commit()

    logger.info("bill.deleted", bill_id=str(bill.id), bill_number=bill.bill_number)


@router.get("/{bill_id}/audit-logs", response_model=list[BillAuditLogRead])
async def get_bill_audit_logs(
    bill_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Edit and delete history of a bill, newest first."""
    await get_bill_or_404(db, current_user.id, bill_id)

    stmt = (
        select(BillAuditLog)
        .where(BillAuditLog.bill_id == bill_id)
        .order_by(BillAuditLog.changed_at.desc())
    )
    result = await db.execute(stmt)
    return result.scalars().all()
