"""Wholesaler CRUD, soft delete/restore and stats endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.api.auth import get_current_user
from shopledger.core.db import get_db
from shopledger.core.errors import DuplicateFieldError, InvalidStateError, NotFoundError
from shopledger.core.ledger import opening_balance
from shopledger.core.logging import get_logger
from shopledger.models import User, Wholesaler
from shopledger.models.common_schemas import Page
from shopledger.models.enums import DuesFilter, StatusFilter, WholesalerSort
from shopledger.models.wholesaler_schemas import (
    WholesalerCreate,
    WholesalerDashboard,
    WholesalerRead,
    WholesalerStats,
    WholesalerUpdate,
)
from shopledger.utils.datetime import now_utc

logger = get_logger(__name__)

router = APIRouter(prefix="/wholesalers", tags=["wholesalers"])

# Ties break on id so pages never overlap
SORT_ORDER = {
    WholesalerSort.NAME: Wholesaler.name.asc(),
    WholesalerSort.PURCHASES: Wholesaler.total_purchased.desc(),
    WholesalerSort.OUTSTANDING: Wholesaler.outstanding_due.desc(),
    WholesalerSort.CREATED_AT: Wholesaler.created_at.desc(),
}


async def get_wholesaler_or_404(
    db: AsyncSession, shopkeeper_id: UUID, wholesaler_id: UUID
) -> Wholesaler:
    """Load a wholesaler of this shopkeeper, soft-deleted ones included."""
    stmt = select(Wholesaler).where(
        Wholesaler.id == wholesaler_id,
        Wholesaler.shopkeeper_id == shopkeeper_id,
    )
    result = await db.execute(stmt)
    wholesaler = result.scalar_one_or_none()

    if not wholesaler:
        raise NotFoundError("Wholesaler", str(wholesaler_id))
    return wholesaler


async def ensure_unique_contact(
    db: AsyncSession,
    shopkeeper_id: UUID,
    phone: str | None,
    whatsapp_number: str | None,
    exclude_id: UUID | None = None,
) -> None:
    """
    Phone and WhatsApp numbers are unique per shopkeeper, deleted wholesalers included.

    Raises:
        DuplicateFieldError: naming the colliding field
    """
    for field, value in (("phone", phone), ("whatsapp_number", whatsapp_number)):
        if not value:
            continue
        stmt = select(Wholesaler.id).where(
            Wholesaler.shopkeeper_id == shopkeeper_id,
            getattr(Wholesaler, field) == value,
        )
        if exclude_id is not None:
            stmt = stmt.where(Wholesaler.id != exclude_id)
        if await db.scalar(stmt.limit(1)) is not None:
            raise DuplicateFieldError("Wholesaler", field, value)


@router.post("", response_model=WholesalerRead, status_code=status.HTTP_201_CREATED)
async def create_wholesaler(
    wholesaler_in: WholesalerCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Register a wholesaler, seeding balances from the signed initial balance."""
    await ensure_unique_contact(
        db, current_user.id, wholesaler_in.phone, wholesaler_in.whatsapp_number
    )

    purchased, paid, outstanding = opening_balance(wholesaler_in.initial_balance)

    wholesaler = Wholesaler(
        shopkeeper_id=current_user.id,
        name=wholesaler_in.name,
        phone=wholesaler_in.phone,
        whatsapp_number=wholesaler_in.whatsapp_number,
        email=wholesaler_in.email,
        address=wholesaler_in.address,
        place=wholesaler_in.place,
        gst_number=wholesaler_in.gst_number,
        initial_balance=wholesaler_in.initial_balance,
        total_purchased=purchased,
        total_paid=paid,
        outstanding_due=outstanding,
    )
    db.add(wholesaler)
    await db.commit()
    await db.refresh(wholesaler)

    logger.info(
        "wholesaler.created",
        wholesaler_id=str(wholesaler.id),
        initial_balance=str(wholesaler.initial_balance),
    )
    return wholesaler


@router.get("", response_model=Page[WholesalerRead])
async def list_wholesalers(
    search: str | None = Query(None, max_length=100),
    status_filter: StatusFilter = Query(StatusFilter.ALL, alias="status"),
    dues: DuesFilter = DuesFilter.ALL,
    sort_by: WholesalerSort = WholesalerSort.CREATED_AT,
    include_deleted: bool = False,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List wholesalers. Soft-deleted ones only with include_deleted=true."""
    stmt = select(Wholesaler).where(Wholesaler.shopkeeper_id == current_user.id)

    if not include_deleted:
        stmt = stmt.where(~Wholesaler.is_deleted)

    if search and search.strip():
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                Wholesaler.name.ilike(pattern),
                Wholesaler.phone.ilike(pattern),
                Wholesaler.address.ilike(pattern),
            )
        )

    if status_filter == StatusFilter.ACTIVE:
        stmt = stmt.where(Wholesaler.is_active)
    elif status_filter == StatusFilter.INACTIVE:
        stmt = stmt.where(~Wholesaler.is_active)

    if dues == DuesFilter.WITH_DUES:
        stmt = stmt.where(Wholesaler.outstanding_due > 0)
    elif dues == DuesFilter.CLEAR:
        stmt = stmt.where(Wholesaler.outstanding_due <= 0)

    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))

    stmt = stmt.order_by(SORT_ORDER[sort_by], Wholesaler.id).offset((page - 1) * limit).limit(limit)
    result = await db.execute(stmt)

    return Page.build(list(result.scalars().all()), total or 0, page, limit)


@router.get("/stats", response_model=WholesalerStats)
async def get_wholesaler_stats(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Counts over live wholesalers; soft-deleted ones only in ``deleted``."""
    live = ~Wholesaler.is_deleted

    stmt = select(
        func.count(Wholesaler.id).filter(live),
        func.count(Wholesaler.id).filter(live, Wholesaler.is_active),
        func.count(Wholesaler.id).filter(live, ~Wholesaler.is_active),
        func.count(Wholesaler.id).filter(Wholesaler.is_deleted),
        func.count(Wholesaler.id).filter(live, Wholesaler.outstanding_due > 0),
        func.coalesce(func.sum(Wholesaler.outstanding_due).filter(live), 0),
    ).where(Wholesaler.shopkeeper_id == current_user.id)

    row = (await db.execute(stmt)).one()

    return WholesalerStats(
        total=row[0],
        active=row[1],
        inactive=row[2],
        deleted=row[3],
        with_dues=row[4],
        total_outstanding=row[5],
    )


@router.get("/dashboard", response_model=WholesalerDashboard)
async def get_wholesaler_dashboard(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Balance totals over every wholesaler, soft-deleted ones included."""
    stmt = select(
        func.count(Wholesaler.id),
        func.coalesce(func.sum(Wholesaler.total_purchased), 0),
        func.coalesce(func.sum(Wholesaler.total_paid), 0),
        func.coalesce(func.sum(Wholesaler.outstanding_due), 0),
    ).where(Wholesaler.shopkeeper_id == current_user.id)

    row = (await db.execute(stmt)).one()

    return WholesalerDashboard(
        total_wholesalers=row[0],
        total_purchased=row[1],
        total_paid=row[2],
        total_outstanding=row[3],
    )


@router.get("/{wholesaler_id}", response_model=WholesalerRead)
async def get_wholesaler(
    wholesaler_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await get_wholesaler_or_404(db, current_user.id, wholesaler_id)


@router.patch("/{wholesaler_id}", response_model=WholesalerRead)
async def update_wholesaler(
    wholesaler_id: UUID,
    wholesaler_in: WholesalerUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update profile fields. Balances can only move through bills and payments."""
    wholesaler = await get_wholesaler_or_404(db, current_user.id, wholesaler_id)

    update_data = wholesaler_in.model_dump(exclude_unset=True)
    for required in ("name", "phone", "is_active"):
        if update_data.get(required) is None:
            update_data.pop(required, None)

    await ensure_unique_contact(
        db,
        current_user.id,
        update_data.get("phone"),
        update_data.get("whatsapp_number"),
        exclude_id=wholesaler.id,
    )

    for key, value in update_data.items():
        setattr(wholesaler, key, value)

    await db.commit()
    await db.refresh(wholesaler)

    logger.info("wholesaler.updated", wholesaler_id=str(wholesaler.id), fields=sorted(update_data))
    return wholesaler


@router.delete("/{wholesaler_id}", response_model=WholesalerRead)
async def delete_wholesaler(
    wholesaler_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Soft delete. Balances and past bills are left as they are."""
    wholesaler = await get_wholesaler_or_404(db, current_user.id, wholesaler_id)

    if wholesaler.is_deleted:
        raise InvalidStateError(f"Wholesaler {wholesaler.name} is already deleted")

    wholesaler.is_deleted = True
    wholesaler.is_active = False
    wholesaler.deleted_at = now_utc()

    await db.commit()
    await db.refresh(wholesaler)

    logger.info("wholesaler.deleted", wholesaler_id=str(wholesaler.id))
    return wholesaler


@router.patch("/{wholesaler_id}/restore", response_model=WholesalerRead)
async def restore_wholesaler(
    wholesaler_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    wholesaler = await get_wholesaler_or_404(db, current_user.id, wholesaler_id)

    if not wholesaler.is_deleted:
        raise InvalidStateError(f"Wholesaler {wholesaler.name} is not deleted")

    wholesaler.is_deleted = False
    wholesaler.is_active = True
    wholesaler.deleted_at = None

    await db.commit()
    await db.refresh(wholesaler)

    logger.info("wholesaler.restored", wholesaler_id=str(wholesaler.id))
    return wholesaler
