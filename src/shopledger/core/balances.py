"""Atomic application of balance deltas to customers and wholesalers."""

from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.errors import NotFoundError
from shopledger.core.ledger import (
    BalanceDelta,
    BillTarget,
    PurchaseFromWholesaler,
    SaleToDueCustomer,
)
from shopledger.core.logging import get_logger
from shopledger.models.customer import Customer
from shopledger.models.wholesaler import Wholesaler
from shopledger.utils.datetime import now_utc

logger = get_logger(__name__)

BalanceModel = type[Customer] | type[Wholesaler]


def model_for_target(target: BillTarget) -> BalanceModel | None:
    """Entity model a bill target points at; None for walk-in sales."""
    if isinstance(target, PurchaseFromWholesaler):
        return Wholesaler
    if isinstance(target, SaleToDueCustomer):
        return Customer
    return None


async def apply_entity_delta(
    db: AsyncSession,
    model: BalanceModel,
    shopkeeper_id: UUID,
    entity_id: UUID,
    delta: BalanceDelta,
) -> None:
    """
    Increment an entity's balance columns in one UPDATE statement.

    The row is matched on (id, shopkeeper_id), so another shopkeeper's
    entity is indistinguishable from a missing one. Balances are never
    read back and rewritten: concurrent increments on the same row cannot
    lose updates.

    Raises:
        NotFoundError: no entity with that id for this shopkeeper
    """
    gross_column = getattr(model, model.GROSS_FIELD)
    values = {
        model.GROSS_FIELD: gross_column + delta.gross,
        "total_paid": model.total_paid + delta.paid,
        "outstanding_due": model.outstanding_due + delta.outstanding,
        "updated_at": now_utc(),
    }
    if model is Customer and delta.paid > 0:
        values["last_payment_date"] = now_utc()

    stmt = (
        update(model)
        .where(model.id == entity_id, model.shopkeeper_id == shopkeeper_id)
        .values(**values)
        .returning(model.id, gross_column, model.total_paid, model.outstanding_due)
        .execution_options(synchronize_session="fetch")
    )
    result = await db.execute(stmt)
    row = result.one_or_none()

    if row is None:
        raise NotFoundError(model.__name__, str(entity_id))

    logger.info(
        "ledger.delta_applied",
        entity=model.__tablename__,
        entity_id=str(entity_id),
        shopkeeper_id=str(shopkeeper_id),
        gross_delta=str(delta.gross),
        paid_delta=str(delta.paid),
        outstanding_delta=str(delta.outstanding),
        outstanding_due=str(row[3]),
    )


async def apply_delta(
    db: AsyncSession,
    shopkeeper_id: UUID,
    target: BillTarget,
    delta: BalanceDelta,
) -> None:
    """Apply a bill delta to the bill's entity. Walk-in sales are a no-op."""
    model = model_for_target(target)
    if model is None or delta.is_zero:
        return
    await apply_entity_delta(db, model, shopkeeper_id, target.entity_id, delta)
