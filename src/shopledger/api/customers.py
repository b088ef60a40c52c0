"""Customer CRUD, listing and stats endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.api.auth import get_current_user
from shopledger.core.db import get_db
from shopledger.core.errors import InvalidStateError, NotFoundError, ValidationError
from shopledger.core.ledger import opening_balance
from shopledger.core.logging import get_logger
from shopledger.models import Bill, Customer, User
from shopledger.models.common_schemas import Page
from shopledger.models.customer_schemas import (
    CustomerCreate,
    CustomerDashboard,
    CustomerRead,
    CustomerStats,
    CustomerUpdate,
)
from shopledger.models.enums import (
    BillEntityType,
    BillStatus,
    CustomerSort,
    CustomerType,
    DuesFilter,
    StatusFilter,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/customers", tags=["customers"])

# Ties break on id so pages never overlap
SORT_ORDER = {
    CustomerSort.NAME: Customer.name.asc(),
    CustomerSort.TOTAL_SALES: Customer.total_sales.desc(),
    CustomerSort.OUTSTANDING_DUE: Customer.outstanding_due.desc(),
    CustomerSort.CREATED_AT: Customer.created_at.desc(),
}


async def get_customer_or_404(db: AsyncSession, shopkeeper_id: UUID, customer_id: UUID) -> Customer:
    stmt = select(Customer).where(
        Customer.id == customer_id,
        Customer.shopkeeper_id == shopkeeper_id,
    )
    result = await db.execute(stmt)
    customer = result.scalar_one_or_none()

    if not customer:
        raise NotFoundError("Customer", str(customer_id))
    return customer


@router.post("", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer_in: CustomerCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Register a customer, seeding balances from the signed opening balance."""
    if customer_in.type == CustomerType.NORMAL and customer_in.opening_balance != 0:
        raise ValidationError(
            "Walk-in customers cannot carry an opening balance",
            details={"opening_balance": str(customer_in.opening_balance)},
        )

    gross, paid, outstanding = opening_balance(customer_in.opening_balance)

    customer = Customer(
        shopkeeper_id=current_user.id,
        name=customer_in.name,
        phone=customer_in.phone,
        whatsapp_number=customer_in.whatsapp_number,
        email=customer_in.email,
        address=customer_in.address,
        type=customer_in.type.value,
        opening_balance=customer_in.opening_balance,
        total_sales=gross,
        total_paid=paid,
        outstanding_due=outstanding,
    )
    db.add(customer)
    await db.commit()
    await db.refresh(customer)

    logger.info(
        "customer.created",
        customer_id=str(customer.id),
        type=customer.type,
        opening_balance=str(customer.opening_balance),
    )
    return customer


@router.get("", response_model=Page[CustomerRead])
async def list_customers(
    type: CustomerType | None = None,
    search: str | None = Query(None, max_length=100),
    status_filter: StatusFilter = Query(StatusFilter.ALL, alias="status"),
    dues: DuesFilter = DuesFilter.ALL,
    sort_by: CustomerSort = CustomerSort.CREATED_AT,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List customers with search, status and dues filters."""
    stmt = select(Customer).where(Customer.shopkeeper_id == current_user.id)

    if type:
        stmt = stmt.where(Customer.type == type.value)

    if search and search.strip():
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                Customer.name.ilike(pattern),
                Customer.phone.ilike(pattern),
                Customer.address.ilike(pattern),
            )
        )

    if status_filter == StatusFilter.ACTIVE:
        stmt = stmt.where(Customer.is_active)
    elif status_filter == StatusFilter.INACTIVE:
        stmt = stmt.where(~Customer.is_active)

    if dues == DuesFilter.WITH_DUES:
        stmt = stmt.where(Customer.outstanding_due > 0)
    elif dues == DuesFilter.CLEAR:
        stmt = stmt.where(Customer.outstanding_due <= 0)

    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))

    stmt = stmt.order_by(SORT_ORDER[sort_by], Customer.id).offset((page - 1) * limit).limit(limit)
    result = await db.execute(stmt)

    return Page.build(list(result.scalars().all()), total or 0, page, limit)


@router.get("/stats", response_model=CustomerStats)
async def get_customer_stats(
    type: CustomerType | None = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(
        func.count(Customer.id),
        func.count(Customer.id).filter(Customer.is_active),
        func.count(Customer.id).filter(~Customer.is_active),
        func.count(Customer.id).filter(Customer.outstanding_due > 0),
        func.coalesce(func.sum(Customer.outstanding_due), 0),
        func.coalesce(func.sum(Customer.total_sales), 0),
        func.coalesce(func.sum(Customer.total_paid), 0),
    ).where(Customer.shopkeeper_id == current_user.id)

    if type:
        stmt = stmt.where(Customer.type == type.value)

    row = (await db.execute(stmt)).one()

    return CustomerStats(
        total=row[0],
        active=row[1],
        inactive=row[2],
        with_dues=row[3],
        total_outstanding=row[4],
        total_sales=row[5],
        total_paid=row[6],
    )


@router.get("/dashboard", response_model=CustomerDashboard)
async def get_customer_dashboard(
    type: CustomerType = CustomerType.DUE,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Balance totals for one customer type (due customers by default)."""
    stmt = select(
        func.count(Customer.id),
        func.coalesce(func.sum(Customer.total_sales), 0),
        func.coalesce(func.sum(Customer.total_paid), 0),
        func.coalesce(func.sum(Customer.outstanding_due), 0),
    ).where(Customer.shopkeeper_id == current_user.id, Customer.type == type.value)

    row = (await db.execute(stmt)).one()

    return CustomerDashboard(
        total_customers=row[0],
        total_sales=row[1],
        total_paid=row[2],
        total_outstanding=row[3],
    )


@router.get("/{customer_id}", response_model=CustomerRead)
async def get_customer(
    customer_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await get_customer_or_404(db, current_user.id, customer_id)


@router.patch("/{customer_id}", response_model=CustomerRead)
async def update_customer(
    customer_id: UUID,
    customer_in: CustomerUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update profile fields. Balances can only move through bills and payments."""
    customer = await get_customer_or_404(db, current_user.id, customer_id)

    update_data = customer_in.model_dump(exclude_unset=True)
    if update_data.get("name") is None:
        update_data.pop("name", None)
    if update_data.get("is_active") is None:
        update_data.pop("is_active", None)

    for key, value in update_data.items():
        setattr(customer, key, value)

    await db.commit()
    await db.refresh(customer)

    logger.info("customer.updated", customer_id=str(customer.id), fields=sorted(update_data))
    return customer


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Permanently delete a customer. Past bills and payments keep their copy of the name.

    Refused while an active bill still points at the customer: editing or
    deleting that bill later would have no balance to move.
    """
    customer = await get_customer_or_404(db, current_user.id, customer_id)

    open_bills = await db.scalar(
        select(func.count(Bill.id)).where(
            Bill.shopkeeper_id == current_user.id,
            Bill.entity_type == BillEntityType.DUE_CUSTOMER.value,
            Bill.entity_id == customer_id,
            Bill.status == BillStatus.ACTIVE.value,
        )
    )
    if open_bills:
        raise InvalidStateError(
            f"Customer {customer.name} has {open_bills} active bill(s), delete them first",
            details={"active_bills": open_bills},
        )

    await db.delete(customer)
    await db.commit()

    logger.info("customer.deleted", customer_id=str(customer_id))
