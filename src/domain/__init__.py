from .product import Product, StockLevel
from .sale import (
    LineItem,
    Sale,
    Totals,
    PaymentStatus,
    PaymentMethod,
    DocumentType,
    ItemCondition,
    CheckoutPayment,
    CheckoutSummary,
    StockAdjustment,
    ReturnRequest,
    WriteOff,
    EditOutcome,
    ReturnOutcome,
)
from .debtor import Debtor, summarize_debtors
from .errors import LedgerErrorCode

__all__ = [
    "Product",
    "StockLevel",
    "LineItem",
    "Sale",
    "Totals",
    "PaymentStatus",
    "PaymentMethod",
    "DocumentType",
    "ItemCondition",
    "CheckoutPayment",
    "CheckoutSummary",
    "StockAdjustment",
    "ReturnRequest",
    "WriteOff",
    "EditOutcome",
    "ReturnOutcome",
    "Debtor",
    "summarize_debtors",
    "LedgerErrorCode",
]
