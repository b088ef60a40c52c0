"""Domain models package.

Only ORM models and enums are re-exported here; pydantic schemas are
imported from their own modules.
"""

from shopledger.models.bill import Bill
from shopledger.models.bill_audit_log import BillAuditLog
from shopledger.models.customer import Customer
from shopledger.models.enums import (
    BillEntityType,
    BillStatus,
    BillType,
    CustomerType,
    InvoiceStatus,
    PaymentEntityType,
    PaymentMethod,
    TransactionType,
)
from shopledger.models.invoice import Invoice
from shopledger.models.payment import Payment
from shopledger.models.transaction import Transaction
from shopledger.models.user import User
from shopledger.models.wholesaler import Wholesaler

__all__ = [
    "Bill",
    "BillAuditLog",
    "BillEntityType",
    "BillStatus",
    "BillType",
    "Customer",
    "CustomerType",
    "Invoice",
    "InvoiceStatus",
    "Payment",
    "PaymentEntityType",
    "PaymentMethod",
    "Transaction",
    "TransactionType",
    "User",
    "Wholesaler",
]
