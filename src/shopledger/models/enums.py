"""
Enums for domain models.
Enums provide type safety and clarity. Validation for categorical fields.
"""

import enum


class BillType(str, enum.Enum):
    PURCHASE = "purchase"
    SALE = "sale"


class BillEntityType(str, enum.Enum):
    """Who is on the other side of a bill."""

    WHOLESALER = "wholesaler"
    DUE_CUSTOMER = "due_customer"
    NORMAL_CUSTOMER = "normal_customer"


class BillStatus(str, enum.Enum):
    """Bill lifecycle states. Edits keep a bill ACTIVE (see Bill.is_edited)."""

    ACTIVE = "ACTIVE"
    DELETED = "DELETED"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    ONLINE = "online"


class CustomerType(str, enum.Enum):
    """Due customers keep a running balance, normal (walk-in) ones pay in full."""

    DUE = "due"
    NORMAL = "normal"


class PaymentEntityType(str, enum.Enum):
    WHOLESALER = "wholesaler"
    CUSTOMER = "customer"


class TransactionType(str, enum.Enum):
    INCOME = "income"
    EXPENSE = "expense"


class StatusFilter(str, enum.Enum):
    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"


class DuesFilter(str, enum.Enum):
    ALL = "all"
    WITH_DUES = "with_dues"
    CLEAR = "clear"


class CustomerSort(str, enum.Enum):
    NAME = "name"
    TOTAL_SALES = "total_sales"
    OUTSTANDING_DUE = "outstanding_due"
    CREATED_AT = "created_at"


class WholesalerSort(str, enum.Enum):
    NAME = "name"
    PURCHASES = "purchases"
    OUTSTANDING = "outstanding"
    CREATED_AT = "created_at"


class InvoiceStatus(str, enum.Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    CANCELLED = "cancelled"


class DiscountType(str, enum.Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class InvoiceSort(str, enum.Enum):
    CREATED_AT = "created_at"
    INVOICE_DATE = "invoice_date"
    TOTAL = "total"
    INVOICE_NUMBER = "invoice_number"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"
