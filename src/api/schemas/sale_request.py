"""Request schemas for Sales API

Pydantic models for validating incoming HTTP requests.
"""

from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from src.app.use_cases.sales.dtos import LineItemDTO, PaymentDTO, ReturnItemDTO


def _two_places(v: Optional[Decimal]) -> Optional[Decimal]:
    if v is not None and v.as_tuple().exponent < -2:
        raise ValueError("Amounts are limited to 2 decimal places")
    return v


class CheckoutRequestSchema(BaseModel):
    """
    Request schema for processing a sale

    Used for POST /sales/checkout endpoint.
    """

    items: List[LineItemDTO] = Field(
        ...,
        description="Cart lines (prices are re-read from inventory)"
    )

    payment: PaymentDTO = Field(
        default_factory=PaymentDTO,
        description="Payment details"
    )

    note: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Free-text note"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "items": [
                    {"product_id": 42, "quantity": 3, "unit_price": "500.00", "discount_amount": "0.00"}
                ],
                "payment": {"method": "cash", "amount_paid": "1500.00"},
                "note": None
            }
        }


class EditSaleRequestSchema(BaseModel):
    """Request schema for PUT /sales/{sale_id}"""

    items: List[LineItemDTO] = Field(
        ...,
        description="Complete edited item list"
    )

    paid_amount: Optional[Decimal] = Field(
        default=None,
        description="Paid amount after the edit (KES)"
    )

    @field_validator("paid_amount")
    @classmethod
    def validate_paid_amount(cls, v):
        return _two_places(v)


class ReturnRequestSchema(BaseModel):
    """Request schema for POST /sales/{sale_id}/returns"""

    items: List[ReturnItemDTO] = Field(
        ...,
        min_length=1,
        description="Returned lines"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "items": [
                    {"product_id": 42, "return_quantity": 2, "reason": "Cracked handle", "condition": "DAMAGED"}
                ]
            }
        }


class PaymentRequestSchema(BaseModel):
    """Request schema for POST /sales/{sale_id}/payments"""

    payment_amount: Decimal = Field(
        ...,
        description="Amount paid now (KES, must be > 0)"
    )

    @field_validator("payment_amount")
    @classmethod
    def validate_payment_amount(cls, v):
        """Positivity is a ledger rule; only precision is checked here"""
        return _two_places(v)

    class Config:
        json_schema_extra = {
            "example": {"payment_amount": "300.00"}
        }
