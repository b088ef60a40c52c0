"""Invoice endpoints (issue, list, get, update, soft delete).

Invoices are paperwork for the customer. They never touch a balance,
a payment or the cash-flow log.
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.api.auth import get_current_user
from shopledger.core.db import get_db
from shopledger.core.errors import DuplicateFieldError, NotFoundError, ValidationError
from shopledger.core.logging import get_logger
from shopledger.models import Invoice, User
from shopledger.models.common_schemas import Page
from shopledger.models.enums import InvoiceSort, InvoiceStatus, SortOrder
from shopledger.models.invoice import format_invoice_number, invoice_number_seq
from shopledger.models.invoice_schemas import (
    InvoiceCreate,
    InvoiceRead,
    InvoiceUpdate,
    check_invoice_terms,
)
from shopledger.utils.datetime import now_utc, today_utc

logger = get_logger(__name__)

router = APIRouter(prefix="/invoices", tags=["invoices"])

SORT_COLUMNS = {
    InvoiceSort.CREATED_AT: Invoice.created_at,
    InvoiceSort.INVOICE_DATE: Invoice.invoice_date,
    InvoiceSort.TOTAL: Invoice.total,
    InvoiceSort.INVOICE_NUMBER: Invoice.invoice_number,
}

REQUIRED_FIELDS = ("invoice_date", "customer_name", "items", "subtotal", "total", "status")


async def get_invoice_or_404(db: AsyncSession, shopkeeper_id: UUID, invoice_id: UUID) -> Invoice:
    """Deleted invoices are gone as far as the API is concerned."""
    stmt = select(Invoice).where(
        Invoice.id == invoice_id,
        Invoice.shopkeeper_id == shopkeeper_id,
        ~Invoice.is_deleted,
    )
    result = await db.execute(stmt)
    invoice = result.scalar_one_or_none()

    if not invoice:
        raise NotFoundError("Invoice", str(invoice_id))
    return invoice


async def number_taken(db: AsyncSession, shopkeeper_id: UUID, invoice_number: str) -> bool:
    # Soft-deleted invoices keep their number
    stmt = select(Invoice.id).where(
        Invoice.shopkeeper_id == shopkeeper_id,
        Invoice.invoice_number == invoice_number,
    )
    return await db.scalar(stmt) is not None


async def next_invoice_number(db: AsyncSession, shopkeeper_id: UUID) -> str:
    """Next INV-nnnnnn, skipping numbers the shopkeeper already typed in by hand."""
    while True:
        candidate = format_invoice_number(await db.scalar(select(invoice_number_seq.next_value())))
        if not await number_taken(db, shopkeeper_id, candidate):
            return candidate


@router.post("", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice_in: InvoiceCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if invoice_in.invoice_number:
        invoice_number = invoice_in.invoice_number
        if await number_taken(db, current_user.id, invoice_number):
            raise DuplicateFieldError("Invoice", "invoice_number", invoice_number)
    else:
        invoice_number = await next_invoice_number(db, current_user.id)

    fields = invoice_in.model_dump(exclude={"invoice_number", "items", "status"})
    invoice = Invoice(
        **fields,
        shopkeeper_id=current_user.id,
        invoice_number=invoice_number,
        items=[item.to_json() for item in invoice_in.items],
        status=invoice_in.status.value,
    )
    if invoice.invoice_date is None:
        invoice.invoice_date = today_utc()
    if invoice_in.discount_type is not None:
        invoice.discount_type = invoice_in.discount_type.value
    # Letterhead falls back to the shopkeeper's business profile
    if invoice.shop_name is None:
        invoice.shop_name = current_user.business_name
    if invoice.shop_address is None:
        invoice.shop_address = current_user.address
    if invoice.shop_phone is None:
        invoice.shop_phone = current_user.phone

    db.add(invoice)
    await db.commit()
    await db.refresh(invoice)

    logger.info(
        "invoice.created",
        invoice_id=str(invoice.id),
        invoice_number=invoice.invoice_number,
        total=str(invoice.total),
        status=invoice.status,
    )
    return invoice


@router.get("", response_model=Page[InvoiceRead])
async def list_invoices(
    search: str | None = Query(None, max_length=100),
    status_filter: InvoiceStatus | None = Query(None, alias="status"),
    start_date: date | None = None,
    end_date: date | None = None,
    sort_by: InvoiceSort = InvoiceSort.CREATED_AT,
    sort_order: SortOrder = SortOrder.DESC,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List invoices. search matches the invoice number or the customer name."""
    if start_date and end_date and start_date > end_date:
        raise ValidationError("start_date must be on or before end_date")

    stmt = select(Invoice).where(
        Invoice.shopkeeper_id == current_user.id,
        ~Invoice.is_deleted,
    )

    if search and search.strip():
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                Invoice.invoice_number.ilike(pattern),
                Invoice.customer_name.ilike(pattern),
            )
        )
    if status_filter:
        stmt = stmt.where(Invoice.status == status_filter.value)
    if start_date:
        stmt = stmt.where(Invoice.invoice_date >= start_date)
    if end_date:
        stmt = stmt.where(Invoice.invoice_date <= end_date)

    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))

    column = SORT_COLUMNS[sort_by]
    ordering = column.asc() if sort_order == SortOrder.ASC else column.desc()
    stmt = stmt.order_by(ordering, Invoice.id).offset((page - 1) * limit).limit(limit)
    result = await db.execute(stmt)

    return Page.build(list(result.scalars().all()), total or 0, page, limit)


@router.get("/{invoice_id}", response_model=InvoiceRead)
async def get_invoice(
    invoice_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await get_invoice_or_404(db, current_user.id, invoice_id)


@router.patch("/{invoice_id}", response_model=InvoiceRead)
async def update_invoice(
    invoice_id: UUID,
    patch: InvoiceUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Change invoice fields or move it along draft -> sent -> paid."""
    changes = patch.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("No changes provided")

    cleared = sorted(key for key in REQUIRED_FIELDS if key in changes and changes[key] is None)
    if cleared:
        raise ValidationError("Required fields cannot be cleared", details={"fields": cleared})

    invoice = await get_invoice_or_404(db, current_user.id, invoice_id)

    if "items" in changes:
        changes["items"] = [item.to_json() for item in patch.items or []]
    for field in ("status", "discount_type"):
        if changes.get(field) is not None:
            changes[field] = changes[field].value

    merged = {
        key: changes.get(key, getattr(invoice, key))
        for key in ("invoice_date", "due_date", "discount", "discount_type")
    }
    try:
        check_invoice_terms(**merged)
    except ValueError as exc:
        raise ValidationError(str(exc)) from None

    for key, value in changes.items():
        setattr(invoice, key, value)

    await db.commit()
    await db.refresh(invoice)

    logger.info(
        "invoice.updated",
        invoice_id=str(invoice.id),
        invoice_number=invoice.invoice_number,
        fields=sorted(changes),
    )
    return invoice


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(
    invoice_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    invoice = await get_invoice_or_404(db, current_user.id, invoice_id)

    invoice.is_deleted = True
    invoice.deleted_at = now_utc()
    await db.commit()

    logger.info("invoice.deleted", invoice_id=str(invoice.id), invoice_number=invoice.invoice_number)
