"""Dues report: receivables from customers and payables to wholesalers."""

from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.api.auth import get_current_user
from shopledger.core.db import get_db
from shopledger.core.logging import get_logger
from shopledger.models import Customer, User, Wholesaler
from shopledger.models.enums import CustomerType
from shopledger.models.report_schemas import DueLine, DuesReport

logger = get_logger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/dues", response_model=DuesReport)
async def get_dues_report(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Everyone with a positive outstanding balance, largest first.

    Due customers owe the shop (receivable); live wholesalers are owed by
    the shop (payable). Advances (negative balances) are left out.
    """
    customers_stmt = (
        select(Customer)
        .where(
            Customer.shopkeeper_id == current_user.id,
            Customer.type == CustomerType.DUE.value,
            Customer.outstanding_due > 0,
        )
        .order_by(Customer.outstanding_due.desc())
    )
    wholesalers_stmt = (
        select(Wholesaler)
        .where(
            Wholesaler.shopkeeper_id == current_user.id,
            ~Wholesaler.is_deleted,
            Wholesaler.outstanding_due > 0,
        )
        .order_by(Wholesaler.outstanding_due.desc())
    )

    customers = (await db.execute(customers_stmt)).scalars().all()
    wholesalers = (await db.execute(wholesalers_stmt)).scalars().all()

    receivable = sum((c.outstanding_due for c in customers), Decimal("0.00"))
    payable = sum((w.outstanding_due for w in wholesalers), Decimal("0.00"))

    logger.info(
        "report.dues",
        shopkeeper_id=str(current_user.id),
        customers=len(customers),
        wholesalers=len(wholesalers),
    )

    return DuesReport(
        customers=[
            DueLine(id=c.id, name=c.name, phone=c.phone, outstanding_due=c.outstanding_due)
            for c in customers
        ],
        wholesalers=[
            DueLine(id=w.id, name=w.name, phone=w.phone, outstanding_due=w.outstanding_due)
            for w in wholesalers
        ],
        total_receivable=receivable,
        total_payable=payable,
        net_position=receivable - payable,
    )
