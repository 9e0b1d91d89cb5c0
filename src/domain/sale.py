"""Sale Domain Entities

Line items, sales and the value objects produced by the sale ledger.
All amounts are integer cents.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Sequence
from pydantic import BaseModel, Field, computed_field, model_validator


class PaymentStatus(str, Enum):
    """Payment status, always derived from (total_amount, paid_amount)"""
    PENDING = "PENDING"    # Nothing paid yet
    PARTIAL = "PARTIAL"    # Some but not all of the total paid
    PAID = "PAID"          # Paid exactly
    OVERPAID = "OVERPAID"  # Paid more than the total (change or refund owed)


class PaymentMethod(str, Enum):
    CASH = "cash"
    MPESA = "mpesa"
    BANK = "bank"


class DocumentType(str, Enum):
    """Document printed for a processed sale"""
    RECEIPT = "receipt"  # Fully paid
    INVOICE = "invoice"  # Balance due


class ItemCondition(str, Enum):
    GOOD = "GOOD"
    DAMAGED = "DAMAGED"


class LineItem(BaseModel):
    """
    Line Item - One product entry within a sale

    Domain Rules:
    - line_total = unit_price * quantity - discount_amount
    - line_profit = (unit_price - buying_price) * quantity - discount_amount
    - The discount cap (gross margin) is enforced when a discount is applied,
      not re-checked here
    - A discount can never exceed the line's gross value, so line_total
      is never negative
    """

    product_id: int = Field(..., description="Product identifier")
    product_name: str = Field(default="", description="Product name for receipts")
    quantity: int = Field(..., ge=0, description="Units sold")
    unit_price: int = Field(..., ge=0, description="Selling price per unit (cents)")
    buying_price: int = Field(default=0, ge=0, description="Cost per unit (cents)")
    discount_amount: int = Field(default=0, ge=0, description="Absolute line discount (cents)")

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_discount(self) -> "LineItem":
        if self.discount_amount > self.unit_price * self.quantity:
            raise ValueError(
                f"discount_amount {self.discount_amount} exceeds line value "
                f"{self.unit_price * self.quantity} for product {self.product_id}"
            )
        return self

    @computed_field
    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity - self.discount_amount

    @computed_field
    @property
    def line_profit(self) -> int:
        return (self.unit_price - self.buying_price) * self.quantity - self.discount_amount

    @property
    def margin_cap(self) -> int:
        """Largest discount that keeps the line at or above cost"""
        return max(self.unit_price - self.buying_price, 0) * self.quantity


class Totals(BaseModel):
    total_amount: int
    profit: int

    class Config:
        frozen = True


def compute_totals(items: Sequence[LineItem]) -> Totals:
    """Re-sum every line; nothing is accumulated between calls"""
    return Totals(
        total_amount=sum(item.line_total for item in items),
        profit=sum(item.line_profit for item in items),
    )


def classify_payment(total_amount: int, paid_amount: int) -> PaymentStatus:
    """
    Classify a payment against a total

    Boundaries are closed at paid == 0 (PENDING) and paid == total (PAID).
    Both arguments are integer cents so the comparisons are exact.
    """
    if paid_amount == 0:
        return PaymentStatus.PENDING
    if paid_amount < total_amount:
        return PaymentStatus.PARTIAL
    if paid_amount == total_amount:
        return PaymentStatus.PAID
    return PaymentStatus.OVERPAID


class Sale(BaseModel):
    """
    Sale - A processed (or in-progress) sale

    Domain Rules:
    - total_amount, profit, balance and payment_status are derived on every
      access and are never stored
    - paid_amount only grows through payments; edits may set it explicitly
    - balance > 0 means the customer owes, balance < 0 means overpaid
    """

    id: Optional[int] = Field(default=None, description="Sale id once persisted")
    items: List[LineItem] = Field(default_factory=list)
    paid_amount: int = Field(default=0, ge=0, description="Amount paid so far (cents)")
    payment_method: PaymentMethod = Field(default=PaymentMethod.CASH)
    payment_reference: Optional[str] = Field(default=None, description="M-Pesa or bank reference")
    customer_name: Optional[str] = Field(default=None)
    customer_phone: Optional[str] = Field(default=None)
    note: Optional[str] = Field(default=None)
    sale_date: Optional[datetime] = Field(default=None)

    class Config:
        frozen = True

    @property
    def totals(self) -> Totals:
        return compute_totals(self.items)

    @computed_field
    @property
    def total_amount(self) -> int:
        return self.totals.total_amount

    @computed_field
    @property
    def profit(self) -> int:
        return self.totals.profit

    @computed_field
    @property
    def balance(self) -> int:
        return self.total_amount - self.paid_amount

    @computed_field
    @property
    def payment_status(self) -> PaymentStatus:
        return classify_payment(self.total_amount, self.paid_amount)

    @computed_field
    @property
    def change_amount(self) -> int:
        return max(self.paid_amount - self.total_amount, 0)

    @computed_field
    @property
    def document_type(self) -> DocumentType:
        return DocumentType.INVOICE if self.balance > 0 else DocumentType.RECEIPT

    def find_line(self, product_id: int) -> Optional[LineItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None


class CheckoutPayment(BaseModel):
    """Payment details captured at the till"""

    method: PaymentMethod = PaymentMethod.CASH
    amount_paid: int = Field(default=0, description="Amount tendered (cents)")
    reference: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None

    class Config:
        frozen = True


class CheckoutSummary(BaseModel):
    """What the till shows once a cart passes validation"""

    total_amount: int
    profit: int
    paid_amount: int
    balance: int
    change_amount: int
    payment_status: PaymentStatus
    document_type: DocumentType

    class Config:
        frozen = True


class StockAdjustment(BaseModel):
    """Signed change to apply to a product's persisted stock"""

    product_id: int
    delta: int

    class Config:
        frozen = True


class ReturnRequest(BaseModel):
    product_id: int
    return_quantity: int
    reason: str = ""
    condition: ItemCondition = ItemCondition.GOOD

    class Config:
        frozen = True


class WriteOff(BaseModel):
    """Damaged units taken off a sale without going back on the shelf"""

    product_id: int
    quantity: int
    reason: str = ""

    class Config:
        frozen = True


class EditOutcome(BaseModel):
    sale: Sale
    stock_adjustments: List[StockAdjustment] = Field(default_factory=list)

    class Config:
        frozen = True


class ReturnOutcome(BaseModel):
    sale: Sale
    stock_adjustments: List[StockAdjustment] = Field(default_factory=list)
    write_offs: List[WriteOff] = Field(default_factory=list)
    returned_amount: int = 0

    class Config:
        frozen = True
