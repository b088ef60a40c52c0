"""Standalone payment endpoints and payment history."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.api.auth import get_current_user
from shopledger.api.customers import get_customer_or_404
from shopledger.api.wholesalers import get_wholesaler_or_404
from shopledger.core.balances import apply_entity_delta
from shopledger.core.db import get_db
from shopledger.core.errors import InvalidStateError
from shopledger.core.ledger import delta_on_payment, payment_cash_flow_type
from shopledger.core.logging import get_logger
from shopledger.models import Customer, Payment, Transaction, User, Wholesaler
from shopledger.models.common_schemas import Page
from shopledger.models.enums import CustomerType, PaymentEntityType
from shopledger.models.payment_schemas import PaymentCreate, PaymentRead
from shopledger.utils.datetime import end_of_day, start_of_day

logger = get_logger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("", response_model=PaymentRead, status_code=status.HTTP_201_CREATED)
async def record_payment(
    payment_in: PaymentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Record money received from a customer or paid to a wholesaler.

    total_paid goes up and outstanding_due goes down by the amount; the
    gross total is untouched. Paying more than is owed leaves an advance.
    """
    if payment_in.entity_type == PaymentEntityType.CUSTOMER:
        entity = await get_customer_or_404(db, current_user.id, payment_in.entity_id)
        if entity.type != CustomerType.DUE.value:
            raise InvalidStateError(f"Customer {entity.name} is not a due customer")
        model = Customer
        category = "Payment Received"
        description = f"Payment received from {entity.name}"
    else:
        entity = await get_wholesaler_or_404(db, current_user.id, payment_in.entity_id)
        model = Wholesaler
        category = "Payment Made"
        description = f"Payment made to {entity.name}"

    await apply_entity_delta(
        db,
        model,
        current_user.id,
        entity.id,
        delta_on_payment(payment_in.amount),
    )

    payment = Payment(
        shopkeeper_id=current_user.id,
        entity_type=payment_in.entity_type.value,
        entity_id=entity.id,
        entity_name=entity.name,
        amount=payment_in.amount,
        payment_method=payment_in.payment_method.value,
        notes=payment_in.notes,
    )
    db.add(payment)
    db.add(
        Transaction(
            shopkeeper_id=current_user.id,
            type=payment_cash_flow_type(payment_in.entity_type).value,
            category=category,
            amount=payment_in.amount,
            payment_method=payment_in.payment_method.value,
            description=description,
        )
    )

    await db.commit()
    await db.refresh(payment)

    logger.info(
        "payment.recorded",
        payment_id=str(payment.id),
        entity_type=payment.entity_type,
        entity_id=str(payment.entity_id),
        amount=str(payment.amount),
    )
    return payment


async def _paginate(db: AsyncSession, stmt: Select, page: int, limit: int) -> Page[PaymentRead]:
    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))
    stmt = stmt.order_by(Payment.created_at.desc()).offset((page - 1) * limit).limit(limit)
    result = await db.execute(stmt)
    return Page.build(list(result.scalars().all()), total or 0, page, limit)


@router.get("", response_model=Page[PaymentRead])
async def list_payments(
    entity_type: PaymentEntityType | None = None,
    entity_id: UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(Payment).where(Payment.shopkeeper_id == current_user.id)

    if entity_type:
        stmt = stmt.where(Payment.entity_type == entity_type.value)
    if entity_id:
        stmt = stmt.where(Payment.entity_id == entity_id)
    if start_date:
        stmt = stmt.where(Payment.created_at >= start_of_day(start_date))
    if end_date:
        stmt = stmt.where(Payment.created_at <= end_of_day(end_date))

    return await _paginate(db, stmt, page, limit)


@router.get("/customer/{customer_id}", response_model=Page[PaymentRead])
async def get_customer_payments(
    customer_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await get_customer_or_404(db, current_user.id, customer_id)

    stmt = select(Payment).where(
        Payment.shopkeeper_id == current_user.id,
        Payment.entity_type == PaymentEntityType.CUSTOMER.value,
        Payment.entity_id == customer_id,
    )
    return await _paginate(db, stmt, page, limit)


@router.get("/wholesaler/{wholesaler_id}", response_model=Page[PaymentRead])
async def get_wholesaler_payments(
    wholesaler_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await get_wholesaler_or_404(db, current_user.id, wholesaler_id)

    stmt = select(Payment).where(
        Payment.shopkeeper_id == current_user.id,
        Payment.entity_type == PaymentEntityType.WHOLESALER.value,
        Payment.entity_id == wholesaler_id,
    )
    return await _paginate(db, stmt, page, limit)
