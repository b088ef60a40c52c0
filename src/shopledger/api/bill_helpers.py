"""Helper functions for bill creation, editing and listing."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from fastapi import Query
from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.errors import InvalidStateError, NotFoundError, ValidationError
from shopledger.core.ledger import (
    BillTarget,
    PurchaseFromWholesaler,
    SaleToDueCustomer,
    cash_flow_type,
    payment_entity_type,
)
from shopledger.models import Bill, Customer, Payment, Transaction, Wholesaler
from shopledger.models.enums import (
    BillEntityType,
    BillStatus,
    BillType,
    CustomerType,
    PaymentMethod,
    TransactionType,
)
from shopledger.utils.datetime import end_of_day, start_of_day


async def get_bill_or_404(db: AsyncSession, shopkeeper_id: UUID, bill_id: UUID) -> Bill:
    """Load a bill of this shopkeeper, deleted bills included."""
    stmt = select(Bill).where(Bill.id == bill_id, Bill.shopkeeper_id == shopkeeper_id)
    result = await db.execute(stmt)
    bill = result.scalar_one_or_none()

    if not bill:
        raise NotFoundError("Bill", str(bill_id))
    return bill


def require_active(bill: Bill) -> None:
    if bill.status != BillStatus.ACTIVE.value:
        raise InvalidStateError(
            f"Bill {bill.bill_number} is deleted and cannot be modified",
            details={"bill_id": str(bill.id), "status": bill.status},
        )


async def ensure_target_billable(
    db: AsyncSession,
    shopkeeper_id: UUID,
    target: BillTarget,
) -> None:
    """
    Check the entity a new bill points at.

    Raises:
        NotFoundError: entity missing or owned by another shopkeeper
        InvalidStateError: wholesaler soft-deleted, or customer is not a due customer
    """
    if isinstance(target, PurchaseFromWholesaler):
        stmt = select(Wholesaler).where(
            Wholesaler.id == target.entity_id,
            Wholesaler.shopkeeper_id == shopkeeper_id,
        )
        wholesaler = (await db.execute(stmt)).scalar_one_or_none()
        if not wholesaler:
            raise NotFoundError("Wholesaler", str(target.entity_id))
        if wholesaler.is_deleted:
            raise InvalidStateError(f"Wholesaler {wholesaler.name} is deleted")

    elif isinstance(target, SaleToDueCustomer):
        stmt = select(Customer).where(
            Customer.id == target.entity_id,
            Customer.shopkeeper_id == shopkeeper_id,
        )
        customer = (await db.execute(stmt)).scalar_one_or_none()
        if not customer:
            raise NotFoundError("Customer", str(target.entity_id))
        if customer.type != CustomerType.DUE.value:
            raise InvalidStateError(f"Customer {customer.name} is not a due customer")


def bill_description(bill: Bill) -> str:
    if bill.bill_type == BillType.PURCHASE.value:
        return f"Purchase from {bill.entity_name}"
    return f"Sale to {bill.entity_name}"


def record_bill_payment(db: AsyncSession, bill: Bill) -> None:
    """Add the Payment and cash-flow Transaction for money paid on a new bill."""
    flow = cash_flow_type(bill.bill_type)
    category = "Purchase" if bill.bill_type == BillType.PURCHASE.value else "Sale"

    db.add(
        Transaction(
            shopkeeper_id=bill.shopkeeper_id,
            type=flow.value,
            category=category,
            amount=bill.paid_amount,
            payment_method=bill.payment_method,
            reference=bill.bill_number,
            description=bill_description(bill),
        )
    )
    db.add(
        Payment(
            shopkeeper_id=bill.shopkeeper_id,
            entity_type=payment_entity_type(bill.bill_type).value,
            entity_id=bill.entity_id,
            entity_name=bill.entity_name,
            amount=bill.paid_amount,
            payment_method=bill.payment_method,
            bill_id=bill.id,
            notes=f"Payment for bill {bill.bill_number}",
        )
    )


def record_bill_adjustment(
    db: AsyncSession,
    bill: Bill,
    flow: TransactionType,
    amount: Decimal,
    category: str,
) -> None:
    """Cash-flow line for money moved by a bill edit or deletion."""
    db.add(
        Transaction(
            shopkeeper_id=bill.shopkeeper_id,
            type=flow.value,
            category=category,
            amount=amount,
            payment_method=bill.payment_method,
            reference=bill.bill_number,
            description=bill_description(bill),
        )
    )


def apply_bill_filters(
    stmt: Select,
    shopkeeper_id: UUID,
    bill_type: BillType | None = None,
    entity_type: BillEntityType | None = None,
    entity_id: UUID | None = None,
    payment_method: PaymentMethod | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    search: str | None = None,
    include_deleted: bool = False,
    is_edited: bool | None = None,
) -> Select:
    """Add the bill listing filters to ``stmt``. Deleted bills are hidden by default."""
    stmt = stmt.where(Bill.shopkeeper_id == shopkeeper_id)

    if not include_deleted:
        stmt = stmt.where(~Bill.is_deleted)
    if bill_type:
        stmt = stmt.where(Bill.bill_type == bill_type.value)
    if entity_type:
        stmt = stmt.where(Bill.entity_type == entity_type.value)
    if entity_id:
        stmt = stmt.where(Bill.entity_id == entity_id)
    if payment_method:
        stmt = stmt.where(Bill.payment_method == payment_method.value)
    if start_date:
        stmt = stmt.where(Bill.created_at >= start_of_day(start_date))
    if end_date:
        stmt = stmt.where(Bill.created_at <= end_of_day(end_date))
    if is_edited is not None:
        stmt = stmt.where(Bill.is_edited == is_edited)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(or_(Bill.bill_number.ilike(pattern), Bill.entity_name.ilike(pattern)))

    return stmt


def bill_filters(
    bill_type: BillType | None = None,
    entity_type: BillEntityType | None = None,
    entity_id: UUID | None = None,
    payment_method: PaymentMethod | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    search: str | None = Query(None, max_length=100),
    include_deleted: bool = False,
    is_edited: bool | None = None,
) -> dict:
    """Query parameters shared by the bill listing and the bill export."""
    if start_date and end_date and start_date > end_date:
        raise ValidationError(
            "start_date must be on or before end_date",
            details={"start_date": str(start_date), "end_date": str(end_date)},
        )
    return {
        "bill_type": bill_type,
        "entity_type": entity_type,
        "entity_id": entity_id,
        "payment_method": payment_method,
        "start_date": start_date,
        "end_date": end_date,
        "search": search,
        "include_deleted": include_deleted,
        "is_edited": is_edited,
    }
