"""Ledger error codes

Every business-rule failure of the sale ledger is reported as a
``libs.result.Error`` with one of these codes.
"""

from enum import Enum
from typing import Optional
from libs.result import Error


class LedgerErrorCode(str, Enum):
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    EXCESSIVE_RETURN_QUANTITY = "EXCESSIVE_RETURN_QUANTITY"
    INVALID_PAYMENT_AMOUNT = "INVALID_PAYMENT_AMOUNT"
    MISSING_CUSTOMER_INFO = "MISSING_CUSTOMER_INFO"
    INVALID_PHONE_FORMAT = "INVALID_PHONE_FORMAT"
    MISSING_PAYMENT_REFERENCE = "MISSING_PAYMENT_REFERENCE"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    LINE_NOT_FOUND = "LINE_NOT_FOUND"
    EMPTY_CART = "EMPTY_CART"


def ledger_error(code: LedgerErrorCode, message: str, reason: Optional[str] = None) -> Error:
    return Error(code=code.value, message=message, reason=reason)
