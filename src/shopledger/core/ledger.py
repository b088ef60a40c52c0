"""Balance delta arithmetic for bills and payments.

Every change to a customer's or wholesaler's running totals is expressed
as a BalanceDelta and applied with a single atomic increment
(see core/balances.py). Nothing here touches the database.

A bill's contribution to its entity is (gross=total, paid=paid,
outstanding=total - paid). Create adds it, delete subtracts exactly the
same amounts, and an edit adds the difference between the new and the
old contribution, so any sequence of create/edit/delete ends where a
single create with the final amounts would.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Union
from uuid import UUID

from shopledger.models.enums import BillEntityType, BillType, PaymentEntityType, TransactionType

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class PurchaseFromWholesaler:
    entity_id: UUID


@dataclass(frozen=True)
class SaleToDueCustomer:
    entity_id: UUID


@dataclass(frozen=True)
class WalkInSale:
    """Anonymous sale. Has no entity, so it never moves a balance."""


BillTarget = Union[PurchaseFromWholesaler, SaleToDueCustomer, WalkInSale]


def bill_target(bill_type: str, entity_type: str, entity_id: UUID | None) -> BillTarget:
    """
    Resolve the (bill_type, entity_type, entity_id) triple into a target.

    Raises:
        ValueError: for combinations that cannot be billed
    """
    bill_type = BillType(bill_type)
    entity_type = BillEntityType(entity_type)

    if bill_type == BillType.PURCHASE:
        if entity_type != BillEntityType.WHOLESALER:
            raise ValueError("Purchase bills must be issued against a wholesaler")
        if entity_id is None:
            raise ValueError("Purchase bills require a wholesaler id")
        return PurchaseFromWholesaler(entity_id)

    if entity_type == BillEntityType.WHOLESALER:
        raise ValueError("Sale bills cannot be issued to a wholesaler")
    if entity_type == BillEntityType.NORMAL_CUSTOMER:
        return WalkInSale()
    if entity_id is None:
        raise ValueError("Sales to due customers require a customer id")
    return SaleToDueCustomer(entity_id)


@dataclass(frozen=True)
class BalanceDelta:
    """Signed increments for (gross, total_paid, outstanding_due)."""

    gross: Decimal = ZERO
    paid: Decimal = ZERO
    outstanding: Decimal = ZERO

    @property
    def is_zero(self) -> bool:
        return self.gross == 0 and self.paid == 0 and self.outstanding == 0

    def __neg__(self) -> "BalanceDelta":
        return BalanceDelta(-self.gross, -self.paid, -self.outstanding)

    def __add__(self, other: "BalanceDelta") -> "BalanceDelta":
        return BalanceDelta(
            self.gross + other.gross,
            self.paid + other.paid,
            self.outstanding + other.outstanding,
        )


def delta_on_create(total_amount: Decimal, paid_amount: Decimal) -> BalanceDelta:
    return BalanceDelta(
        gross=total_amount,
        paid=paid_amount,
        outstanding=total_amount - paid_amount,
    )


def delta_on_edit(
    old_total: Decimal,
    old_paid: Decimal,
    new_total: Decimal,
    new_paid: Decimal,
) -> BalanceDelta:
    """Difference between the new and the old contribution of one bill.

    old_* must be the bill's amounts as currently stored; a stale snapshot
    produces a wrong delta (Bill.version rejects such writes).
    """
    return delta_on_create(new_total, new_paid) + -delta_on_create(old_total, old_paid)


def delta_on_delete(total_amount: Decimal, paid_amount: Decimal) -> BalanceDelta:
    return -delta_on_create(total_amount, paid_amount)


def delta_on_payment(amount: Decimal) -> BalanceDelta:
    """Standalone payment. No upper bound: overpaying leaves an advance."""
    return BalanceDelta(gross=ZERO, paid=amount, outstanding=-amount)


def opening_balance(amount: Decimal) -> tuple[Decimal, Decimal, Decimal]:
    """
    Split a signed opening balance into (gross, total_paid, outstanding_due).

    Positive: the party is owed (or owes) that much with nothing paid yet.
    Negative: an advance, recorded as paid with no gross amount.
    """
    if amount > 0:
        return amount, ZERO, amount
    if amount < 0:
        return ZERO, -amount, amount
    return ZERO, ZERO, ZERO


def due_amount(total_amount: Decimal, paid_amount: Decimal) -> Decimal:
    return total_amount - paid_amount


def payment_entity_type(bill_type: str) -> PaymentEntityType:
    if BillType(bill_type) == BillType.PURCHASE:
        return PaymentEntityType.WHOLESALER
    return PaymentEntityType.CUSTOMER


def cash_flow_type(bill_type: str) -> TransactionType:
    """Money paid on a sale comes in, money paid on a purchase goes out."""
    if BillType(bill_type) == BillType.SALE:
        return TransactionType.INCOME
    return TransactionType.EXPENSE


def payment_cash_flow_type(entity_type: str) -> TransactionType:
    if PaymentEntityType(entity_type) == PaymentEntityType.CUSTOMER:
        return TransactionType.INCOME
    return TransactionType.EXPENSE


def reverse_flow(flow: TransactionType) -> TransactionType:
    if flow == TransactionType.INCOME:
        return TransactionType.EXPENSE
    return TransactionType.INCOME
