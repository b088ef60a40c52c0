"""Tests for balance delta arithmetic (no database)."""

from decimal import Decimal
from uuid import uuid4

import pytest

from shopledger.core.ledger import (
    BalanceDelta,
    PurchaseFromWholesaler,
    SaleToDueCustomer,
    WalkInSale,
    bill_target,
    cash_flow_type,
    delta_on_create,
    delta_on_delete,
    delta_on_edit,
    delta_on_payment,
    opening_balance,
    payment_cash_flow_type,
    payment_entity_type,
    reverse_flow,
)
from shopledger.models.enums import PaymentEntityType, TransactionType


def D(value: str) -> Decimal:
    return Decimal(value)


class TestBillTarget:
    """Resolving (bill_type, entity_type, entity_id) into a target."""

    def test_purchase_from_wholesaler(self):
        wid = uuid4()
        assert bill_target("purchase", "wholesaler", wid) == PurchaseFromWholesaler(wid)

    def test_sale_to_due_customer(self):
        cid = uuid4()
        assert bill_target("sale", "due_customer", cid) == SaleToDueCustomer(cid)

    def test_walk_in_sale_ignores_entity_id(self):
        assert bill_target("sale", "normal_customer", None) == WalkInSale()
        assert bill_target("sale", "normal_customer", uuid4()) == WalkInSale()

    def test_purchase_requires_wholesaler_id(self):
        with pytest.raises(ValueError, match="require a wholesaler id"):
            bill_target("purchase", "wholesaler", None)

    def test_purchase_cannot_target_customer(self):
        with pytest.raises(ValueError, match="against a wholesaler"):
            bill_target("purchase", "due_customer", uuid4())

    def test_sale_cannot_target_wholesaler(self):
        with pytest.raises(ValueError, match="cannot be issued to a wholesaler"):
            bill_target("sale", "wholesaler", uuid4())

    def test_due_customer_sale_requires_id(self):
        with pytest.raises(ValueError, match="require a customer id"):
            bill_target("sale", "due_customer", None)

    def test_unknown_bill_type_rejected(self):
        with pytest.raises(ValueError):
            bill_target("refund", "wholesaler", uuid4())


class TestDeltas:
    """Create, edit, delete and payment deltas."""

    def test_create_delta(self):
        assert delta_on_create(D("1000.00"), D("300.00")) == BalanceDelta(
            D("1000.00"), D("300.00"), D("700.00")
        )

    def test_delete_negates_create(self):
        created = delta_on_create(D("250.50"), D("100.25"))
        deleted = delta_on_delete(D("250.50"), D("100.25"))
        assert (created + deleted).is_zero

    def test_edit_delta(self):
        delta = delta_on_edit(D("1000.00"), D("300.00"), D("1200.00"), D("300.00"))
        assert delta == BalanceDelta(D("200.00"), D("0.00"), D("200.00"))

    def test_edit_outstanding_is_gross_minus_paid(self):
        delta = delta_on_edit(D("100.00"), D("40.00"), D("80.00"), D("70.00"))
        assert delta.gross == D("-20.00")
        assert delta.paid == D("30.00")
        assert delta.outstanding == delta.gross - delta.paid

    @pytest.mark.parametrize(
        "old, new",
        [
            ((D("100.00"), D("40.00")), (D("150.00"), D("40.00"))),
            ((D("100.00"), D("0.00")), (D("100.00"), D("100.00"))),
            ((D("500.00"), D("500.00")), (D("20.00"), D("0.00"))),
        ],
    )
    def test_create_then_edit_equals_create_with_final_amounts(self, old, new):
        combined = delta_on_create(*old) + delta_on_edit(*old, *new)
        assert combined == delta_on_create(*new)

    def test_create_edit_delete_sums_to_zero(self):
        total = (
            delta_on_create(D("1000.00"), D("300.00"))
            + delta_on_edit(D("1000.00"), D("300.00"), D("1200.00"), D("300.00"))
            + delta_on_delete(D("1200.00"), D("300.00"))
        )
        assert total.is_zero

    def test_payment_delta_leaves_gross_alone(self):
        assert delta_on_payment(D("300.00")) == BalanceDelta(D("0.00"), D("300.00"), D("-300.00"))

    def test_zero_delta(self):
        assert BalanceDelta().is_zero
        assert not BalanceDelta(paid=D("0.01")).is_zero


class TestOpeningBalance:
    def test_positive_seeds_gross(self):
        assert opening_balance(D("500.00")) == (D("500.00"), D("0.00"), D("500.00"))

    def test_negative_seeds_paid(self):
        assert opening_balance(D("-200.00")) == (D("0.00"), D("200.00"), D("-200.00"))

    def test_zero(self):
        assert opening_balance(D("0.00")) == (D("0.00"), D("0.00"), D("0.00"))


class TestCashFlowDirection:
    def test_sale_is_income_purchase_is_expense(self):
        assert cash_flow_type("sale") == TransactionType.INCOME
        assert cash_flow_type("purchase") == TransactionType.EXPENSE

    def test_payment_direction(self):
        assert payment_cash_flow_type("customer") == TransactionType.INCOME
        assert payment_cash_flow_type("wholesaler") == TransactionType.EXPENSE

    def test_reverse_flow(self):
        assert reverse_flow(TransactionType.INCOME) == TransactionType.EXPENSE
        assert reverse_flow(TransactionType.EXPENSE) == TransactionType.INCOME

    def test_payment_entity_type_for_bill(self):
        assert payment_entity_type("purchase") == PaymentEntityType.WHOLESALER
        assert payment_entity_type("sale") == PaymentEntityType.CUSTOMER
