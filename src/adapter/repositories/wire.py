"""Wire schemas for the upstream inventory and sales backend

The backend speaks camelCase JSON with KES decimal amounts. These models
parse its payloads and convert them to cents-based domain entities.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence
from pydantic import AliasChoices, BaseModel, Field

from src.domain.money import from_cents, to_cents
from src.domain.product import Product
from src.domain.sale import LineItem, PaymentMethod, ReturnRequest, Sale


class ItemWire(BaseModel):
    id: int
    name: str = ""
    stock_quantity: int = Field(0, validation_alias=AliasChoices("stockQuantity", "stock_quantity"))
    selling_price: Decimal = Field(Decimal("0"), validation_alias=AliasChoices("sellingPrice", "selling_price"))
    price: Decimal = Field(Decimal("0"), description="Buying price")
    category: Optional[str] = None

    def to_domain(self) -> Product:
        return Product(
            product_id=self.id,
            name=self.name,
            stock_quantity=max(self.stock_quantity, 0),
            selling_price=to_cents(self.selling_price),
            buying_price=to_cents(self.price),
            category=self.category,
        )


class SaleItemWire(BaseModel):
    product_id: int = Field(..., validation_alias=AliasChoices("productId", "itemId", "id"))
    product_name: str = Field("", validation_alias=AliasChoices("productName", "name"))
    quantity: int
    unit_price: Decimal = Field(..., validation_alias=AliasChoices("unitPrice", "price"))
    buying_price: Decimal = Field(Decimal("0"), validation_alias=AliasChoices("buyingPrice", "costPrice"))
    discount_amount: Decimal = Field(Decimal("0"), validation_alias=AliasChoices("discountAmount", "discount"))

    def to_domain(self) -> LineItem:
        return LineItem(
            product_id=self.product_id,
            product_name=self.product_name,
            quantity=self.quantity,
            unit_price=to_cents(self.unit_price),
            buying_price=to_cents(self.buying_price),
            discount_amount=to_cents(self.discount_amount),
        )


class SaleWire(BaseModel):
    id: int
    items: List[SaleItemWire] = Field(default_factory=list, validation_alias=AliasChoices("items", "saleItems"))
    paid_amount: Decimal = Field(Decimal("0"), validation_alias=AliasChoices("paidAmount", "amountPaid"))
    payment_method: Optional[str] = Field(None, validation_alias=AliasChoices("paymentMethod", "payment_method"))
    payment_reference: Optional[str] = Field(None, validation_alias=AliasChoices("paymentReference", "reference"))
    customer_name: Optional[str] = Field(None, validation_alias=AliasChoices("customerName", "customer_name"))
    customer_phone: Optional[str] = Field(None, validation_alias=AliasChoices("customerPhone", "customer_phone"))
    note: Optional[str] = None
    sale_date: Optional[datetime] = Field(None, validation_alias=AliasChoices("saleDate", "createdAt"))

    def to_domain(self) -> Sale:
        try:
            method = PaymentMethod((self.payment_method or "cash").lower())
        except ValueError:
            method = PaymentMethod.CASH
        return Sale(
            id=self.id,
            items=[item.to_domain() for item in self.items],
            paid_amount=max(to_cents(self.paid_amount), 0),
            payment_method=method,
            payment_reference=self.payment_reference,
            customer_name=self.customer_name,
            customer_phone=self.customer_phone,
            note=self.note,
            sale_date=self.sale_date,
        )


def _money(cents: int) -> str:
    return str(from_cents(cents))


def sale_payload(sale: Sale) -> Dict[str, Any]:
    """Serialize a sale with its derived fields for the backend"""
    return {
        "customerName": sale.customer_name,
        "customerPhone": sale.customer_phone,
        "paymentMethod": sale.payment_method.value,
        "paymentReference": sale.payment_reference,
        "note": sale.note,
        "saleDate": sale.sale_date.isoformat() if sale.sale_date else None,
        "totalAmount": _money(sale.total_amount),
        "profit": _money(sale.profit),
        "paidAmount": _money(sale.paid_amount),
        "balanceDue": _money(max(sale.balance, 0)),
        "changeAmount": _money(sale.change_amount),
        "paymentStatus": sale.payment_status.value,
        "items": [
            {
                "productId": item.product_id,
                "productName": item.product_name,
                "quantity": item.quantity,
                "unitPrice": _money(item.unit_price),
                "buyingPrice": _money(item.buying_price),
                "discountAmount": _money(item.discount_amount),
                "total": _money(item.line_total),
            }
            for item in sale.items
        ],
    }


def return_payload(sale: Sale, requests: Sequence[ReturnRequest]) -> Dict[str, Any]:
    payload = sale_payload(sale)
    payload["returns"] = [
        {
            "productId": request.product_id,
            "quantity": request.return_quantity,
            "reason": request.reason,
            "condition": request.condition.value,
        }
        for request in requests
    ]
    return payload
