"""Cash-flow transaction listing and summary."""

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.api.auth import get_current_user
from shopledger.core.db import get_db
from shopledger.core.errors import ValidationError
from shopledger.models import Transaction, User
from shopledger.models.common_schemas import Page
from shopledger.models.enums import TransactionType
from shopledger.models.transaction_schemas import CashFlowSummary, TransactionRead
from shopledger.utils.datetime import end_of_day, start_of_day

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _date_range(stmt: Select, start_date: date | None, end_date: date | None) -> Select:
    if start_date and end_date and start_date > end_date:
        raise ValidationError("start_date must be on or before end_date")
    if start_date:
        stmt = stmt.where(Transaction.created_at >= start_of_day(start_date))
    if end_date:
        stmt = stmt.where(Transaction.created_at <= end_of_day(end_date))
    return stmt


@router.get("", response_model=Page[TransactionRead])
async def list_transactions(
    type: TransactionType | None = None,
    category: str | None = Query(None, max_length=50),
    start_date: date | None = None,
    end_date: date | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(Transaction).where(Transaction.shopkeeper_id == current_user.id)
    stmt = _date_range(stmt, start_date, end_date)

    if type:
        stmt = stmt.where(Transaction.type == type.value)
    if category:
        stmt = stmt.where(Transaction.category == category)

    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))

    stmt = stmt.order_by(Transaction.created_at.desc()).offset((page - 1) * limit).limit(limit)
    result = await db.execute(stmt)

    return Page.build(list(result.scalars().all()), total or 0, page, limit)


@router.get("/summary", response_model=CashFlowSummary)
async def get_cash_flow_summary(
    start_date: date | None = None,
    end_date: date | None = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Income, expense and net cash flow, optionally within a date range."""
    is_income = Transaction.type == TransactionType.INCOME.value
    is_expense = Transaction.type == TransactionType.EXPENSE.value

    stmt = select(
        func.coalesce(func.sum(Transaction.amount).filter(is_income), 0),
        func.coalesce(func.sum(Transaction.amount).filter(is_expense), 0),
        func.count(Transaction.id),
    ).where(Transaction.shopkeeper_id == current_user.id)
    stmt = _date_range(stmt, start_date, end_date)

    income, expense, count = (await db.execute(stmt)).one()
    income, expense = Decimal(income), Decimal(expense)

    return CashFlowSummary(
        start_date=start_date,
        end_date=end_date,
        income=income,
        expense=expense,
        net=income - expense,
        transaction_count=count,
    )
