"""Data Transfer Objects for Sales Use Cases

Pydantic models for command inputs and response outputs. Amounts are KES
Decimals here and integer cents in the domain; the ``to_domain`` /
``from_domain`` helpers are the only conversion points.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.debtor import Debtor
from src.domain.ledger import clamp_discount
from src.domain.money import from_cents, to_cents
from src.domain.product import Product, StockLevel
from src.domain.sale import (
    CheckoutPayment,
    CheckoutSummary,
    DocumentType,
    ItemCondition,
    LineItem,
    PaymentMethod,
    PaymentStatus,
    ReturnRequest,
    Sale,
    StockAdjustment,
    WriteOff,
)


class LineItemDTO(BaseModel):
    """
    Line item as sent by the till or the edit screen

    Used as input to cart, checkout and edit use cases.
    """

    product_id: int = Field(
        ...,
        description="Product identifier"
    )

    product_name: str = Field(
        default="",
        description="Product name"
    )

    quantity: int = Field(
        ...,
        ge=0,
        description="Units in the line"
    )

    unit_price: Decimal = Field(
        ...,
        ge=0,
        description="Selling price per unit (KES)"
    )

    buying_price: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Cost per unit (KES); filled from the product when omitted"
    )

    discount_amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Absolute line discount (KES)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "product_id": 42,
                "product_name": "Claw hammer 16oz",
                "quantity": 3,
                "unit_price": "500.00",
                "buying_price": "300.00",
                "discount_amount": "0.00"
            }
        }

    def to_domain(self, buying_price: Optional[int] = None) -> LineItem:
        """Build the domain line; the requested discount is clamped to the margin"""
        if self.buying_price is not None:
            buying_price = to_cents(self.buying_price)
        line = LineItem(
            product_id=self.product_id,
            product_name=self.product_name,
            quantity=self.quantity,
            unit_price=to_cents(self.unit_price),
            buying_price=buying_price or 0,
        )
        return clamp_discount(line, to_cents(self.discount_amount))


class LineItemResponseDTO(BaseModel):
    """Line item with derived totals"""

    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    buying_price: Decimal
    discount_amount: Decimal
    line_total: Decimal
    line_profit: Decimal

    @classmethod
    def from_domain(cls, item: LineItem) -> "LineItemResponseDTO":
        return cls(
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price=from_cents(item.unit_price),
            buying_price=from_cents(item.buying_price),
            discount_amount=from_cents(item.discount_amount),
            line_total=from_cents(item.line_total),
            line_profit=from_cents(item.line_profit),
        )


class PaymentDTO(BaseModel):
    """Payment details captured at checkout"""

    method: PaymentMethod = Field(
        default=PaymentMethod.CASH,
        description="Payment method (cash, mpesa, bank)"
    )

    amount_paid: Decimal = Field(
        default=Decimal("0"),
        description="Amount tendered (KES)"
    )

    reference: Optional[str] = Field(
        default=None,
        description="M-Pesa or bank reference"
    )

    customer_name: Optional[str] = Field(
        default=None,
        description="Customer name (required when a balance is due)"
    )

    customer_phone: Optional[str] = Field(
        default=None,
        description="Customer phone, 07XXXXXXXX or 01XXXXXXXX (required when a balance is due)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "method": "mpesa",
                "amount_paid": "1000.00",
                "reference": "QGH7K2LMN4",
                "customer_name": "Jane Wanjiku",
                "customer_phone": "0712345678"
            }
        }

    def to_domain(self) -> CheckoutPayment:
        return CheckoutPayment(
            method=self.method,
            amount_paid=to_cents(self.amount_paid),
            reference=self.reference,
            customer_name=self.customer_name,
            customer_phone=self.customer_phone,
        )


class AddCartLineCommandDTO(BaseModel):
    """
    Command DTO for setting a product's quantity in a cart

    Used as input to AddCartLine use case.
    """

    items: List[LineItemDTO] = Field(default_factory=list, description="Current cart")
    product_id: int = Field(..., description="Product to add or update")
    quantity: int = Field(..., description="Requested total quantity (<= 0 removes the line)")


class ApplyDiscountCommandDTO(BaseModel):
    """Command DTO for discounting a cart line"""

    items: List[LineItemDTO] = Field(default_factory=list, description="Current cart")
    product_id: int = Field(..., description="Line to discount")
    discount_amount: Decimal = Field(..., description="Requested absolute discount (KES)")


class QuoteCartCommandDTO(BaseModel):
    """Command DTO for pricing and validating a cart before checkout"""

    items: List[LineItemDTO] = Field(default_factory=list)
    payment: PaymentDTO = Field(default_factory=PaymentDTO)


class CartResponseDTO(BaseModel):
    """
    Response DTO for cart operations

    Returned by AddCartLine and ApplyCartDiscount.
    """

    items: List[LineItemResponseDTO]
    total_amount: Decimal
    profit: Decimal

    @classmethod
    def from_domain(cls, cart: List[LineItem]) -> "CartResponseDTO":
        sale = Sale(items=cart)
        return cls(
            items=[LineItemResponseDTO.from_domain(item) for item in cart],
            total_amount=from_cents(sale.total_amount),
            profit=from_cents(sale.profit),
        )


class CheckoutSummaryDTO(BaseModel):
    """Response DTO for QuoteCart"""

    total_amount: Decimal
    profit: Decimal
    paid_amount: Decimal
    balance: Decimal
    change_amount: Decimal
    payment_status: PaymentStatus
    document_type: DocumentType

    @classmethod
    def from_domain(cls, summary: CheckoutSummary) -> "CheckoutSummaryDTO":
        return cls(
            total_amount=from_cents(summary.total_amount),
            profit=from_cents(summary.profit),
            paid_amount=from_cents(summary.paid_amount),
            balance=from_cents(summary.balance),
            change_amount=from_cents(summary.change_amount),
            payment_status=summary.payment_status,
            document_type=summary.document_type,
        )


class CheckoutCommandDTO(BaseModel):
    """
    Command DTO for processing a sale

    Prices are re-read from the inventory backend; client prices only carry
    the requested discount.
    """

    items: List[LineItemDTO] = Field(..., description="Cart lines")
    payment: PaymentDTO = Field(default_factory=PaymentDTO)
    note: Optional[str] = Field(default=None, description="Free-text note")


class SaleResponseDTO(BaseModel):
    """Sale with every derived field"""

    sale_id: Optional[int]
    items: List[LineItemResponseDTO]
    total_amount: Decimal
    profit: Decimal
    paid_amount: Decimal
    balance: Decimal
    change_amount: Decimal
    payment_status: PaymentStatus
    document_type: DocumentType
    payment_method: PaymentMethod
    payment_reference: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    note: Optional[str] = None
    sale_date: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            "example": {
                "sale_id": 1001,
                "items": [],
                "total_amount": "1500.00",
                "profit": "600.00",
                "paid_amount": "1500.00",
                "balance": "0.00",
                "change_amount": "0.00",
                "payment_status": "PAID",
                "document_type": "receipt",
                "payment_method": "cash",
                "customer_name": None,
                "customer_phone": None,
                "note": None,
                "sale_date": "2024-01-01T10:00:00Z"
            }
        }

    @classmethod
    def from_domain(cls, sale: Sale) -> "SaleResponseDTO":
        return cls(
            sale_id=sale.id,
            items=[LineItemResponseDTO.from_domain(item) for item in sale.items],
            total_amount=from_cents(sale.total_amount),
            profit=from_cents(sale.profit),
            paid_amount=from_cents(sale.paid_amount),
            balance=from_cents(sale.balance),
            change_amount=from_cents(sale.change_amount),
            payment_status=sale.payment_status,
            document_type=sale.document_type,
            payment_method=sale.payment_method,
            payment_reference=sale.payment_reference,
            customer_name=sale.customer_name,
            customer_phone=sale.customer_phone,
            note=sale.note,
            sale_date=sale.sale_date,
        )


class StockAdjustmentDTO(BaseModel):
    product_id: int
    delta: int
    stock_after: Optional[int] = None

    @classmethod
    def from_domain(cls, adjustment: StockAdjustment, stock_after: Optional[int] = None) -> "StockAdjustmentDTO":
        return cls(product_id=adjustment.product_id, delta=adjustment.delta, stock_after=stock_after)


class CheckoutResponseDTO(BaseModel):
    """Response DTO for CheckoutSale"""

    sale: SaleResponseDTO
    stock_adjustments: List[StockAdjustmentDTO]


class EditSaleCommandDTO(BaseModel):
    """Command DTO for editing a persisted sale"""

    sale_id: int = Field(..., description="Sale to edit")
    items: List[LineItemDTO] = Field(..., description="Complete edited item list")
    paid_amount: Optional[Decimal] = Field(
        default=None,
        description="Paid amount after the edit (KES); omitted keeps the current amount"
    )


class EditSaleResponseDTO(BaseModel):
    sale: SaleResponseDTO
    stock_adjustments: List[StockAdjustmentDTO]


class ReturnItemDTO(BaseModel):
    product_id: int = Field(..., description="Returned product")
    return_quantity: int = Field(..., description="Units returned")
    reason: str = Field(default="", description="Reason for return")
    condition: ItemCondition = Field(default=ItemCondition.GOOD, description="GOOD or DAMAGED")

    def to_domain(self) -> ReturnRequest:
        return ReturnRequest(
            product_id=self.product_id,
            return_quantity=self.return_quantity,
            reason=self.reason,
            condition=self.condition,
        )


class ReturnSaleCommandDTO(BaseModel):
    """Command DTO for returning items from a persisted sale"""

    sale_id: int
    items: List[ReturnItemDTO]


class WriteOffDTO(BaseModel):
    product_id: int
    quantity: int
    reason: str

    @classmethod
    def from_domain(cls, write_off: WriteOff) -> "WriteOffDTO":
        return cls(product_id=write_off.product_id, quantity=write_off.quantity, reason=write_off.reason)


class ReturnSaleResponseDTO(BaseModel):
    """Response DTO for ReturnSale"""

    sale: SaleResponseDTO
    stock_adjustments: List[StockAdjustmentDTO]
    write_offs: List[WriteOffDTO]
    returned_amount: Decimal = Field(..., description="Value taken off the sale (KES)")
    refund_due: Decimal = Field(..., description="Amount owed back to the customer (KES)")


class RecordPaymentCommandDTO(BaseModel):
    """Command DTO for recording a debtor payment"""

    sale_id: int
    payment_amount: Decimal = Field(..., description="Amount paid now (KES, must be > 0)")


class DebtorDTO(BaseModel):
    customer_phone: str
    customer_name: str
    total_debt: Decimal
    outstanding_sales: int
    sale_ids: List[int]
    last_sale_date: Optional[datetime] = None

    @classmethod
    def from_domain(cls, debtor: Debtor) -> "DebtorDTO":
        return cls(
            customer_phone=debtor.customer_phone,
            customer_name=debtor.customer_name,
            total_debt=from_cents(debtor.total_debt),
            outstanding_sales=debtor.outstanding_sales,
            sale_ids=debtor.sale_ids,
            last_sale_date=debtor.last_sale_date,
        )


class ListDebtorsResponseDTO(BaseModel):
    """Response DTO for ListDebtors"""

    debtors: List[DebtorDTO]
    total_receivable: Decimal
    debtor_count: int


class ProductDTO(BaseModel):
    """Product as shown in the till's product search"""

    product_id: int
    name: str
    category: Optional[str] = None
    stock_quantity: int
    selling_price: Decimal
    stock_level: StockLevel

    @classmethod
    def from_domain(cls, product: Product, stock_level: StockLevel) -> "ProductDTO":
        return cls(
            product_id=product.product_id,
            name=product.name,
            category=product.category,
            stock_quantity=product.stock_quantity,
            selling_price=from_cents(product.selling_price),
            stock_level=stock_level,
        )


class SearchProductsResponseDTO(BaseModel):
    products: List[ProductDTO]
