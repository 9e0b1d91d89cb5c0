"""Sale Ledger Calculator

Pure functions shared by checkout, sale editing, returns and debtor
payments. Nothing here performs I/O, logs or mutates its inputs: every
operation returns new immutable values, and business-rule failures come
back as ``Result`` errors rather than exceptions.

Amounts are integer cents, quantities are integers.
"""

import re
from collections import OrderedDict
from typing import Dict, List, Mapping, Optional, Sequence
from libs.result import Result, Return
from src.domain.errors import LedgerErrorCode, ledger_error
from src.domain.product import Product, StockLevel
from src.domain.sale import (
    CheckoutPayment,
    CheckoutSummary,
    EditOutcome,
    ItemCondition,
    LineItem,
    PaymentMethod,
    ReturnOutcome,
    ReturnRequest,
    Sale,
    StockAdjustment,
    WriteOff,
    classify_payment,
    compute_totals,
)

PHONE_PATTERN = re.compile(r"^(07|01)\d{8}$")

Cart = List[LineItem]

__all__ = [
    "PHONE_PATTERN",
    "add_or_update_line",
    "remove_line",
    "apply_discount",
    "clamp_discount",
    "compute_totals",
    "classify_payment",
    "validate_checkout",
    "apply_edit",
    "apply_return",
    "apply_payment",
    "stock_level",
]


def _find_index(cart: Sequence[LineItem], product_id: int) -> Optional[int]:
    for index, item in enumerate(cart):
        if item.product_id == product_id:
            return index
    return None


def add_or_update_line(cart: Sequence[LineItem], product: Product, requested_quantity: int) -> Result[Cart]:
    """
    Set the cart quantity for a product

    Available stock is the persisted snapshot; the cart never reserves stock.
    An existing line keeps its discount verbatim. A quantity of zero or less
    removes an existing line.
    """
    index = _find_index(cart, product.product_id)
    available = product.stock_quantity

    if requested_quantity <= 0:
        if index is None:
            return Return.err(
                ledger_error(
                    LedgerErrorCode.INVALID_QUANTITY,
                    message="Quantity must be at least 1",
                    reason=f"product_id={product.product_id}, requested={requested_quantity}",
                )
            )
        return Return.ok(remove_line(cart, product.product_id))

    if index is None and available == 0:
        return Return.err(
            ledger_error(
                LedgerErrorCode.OUT_OF_STOCK,
                message=f"{product.name or product.product_id} is out of stock",
                reason=f"product_id={product.product_id}, available=0",
            )
        )

    if requested_quantity > available:
        return Return.err(
            ledger_error(
                LedgerErrorCode.INSUFFICIENT_STOCK,
                message=f"Only {available} items available in stock",
                reason=f"product_id={product.product_id}, requested={requested_quantity}, available={available}",
            )
        )

    updated = list(cart)
    if index is not None:
        updated[index] = updated[index].model_copy(update={"quantity": requested_quantity})
    else:
        updated.append(
            LineItem(
                product_id=product.product_id,
                product_name=product.name,
                quantity=requested_quantity,
                unit_price=product.selling_price,
                buying_price=product.buying_price,
                discount_amount=0,
            )
        )
    return Return.ok(updated)


def remove_line(cart: Sequence[LineItem], product_id: int) -> Cart:
    return [item for item in cart if item.product_id != product_id]


def apply_discount(cart: Sequence[LineItem], product_id: int, discount_amount: int) -> Result[Cart]:
    """
    Apply an absolute discount to a cart line

    The discount is silently clamped to the line's gross margin so a line
    can never be sold below cost. Negative requests clamp to zero.
    """
    index = _find_index(cart, product_id)
    if index is None:
        return Return.err(
            ledger_error(
                LedgerErrorCode.LINE_NOT_FOUND,
                message=f"Product {product_id} is not in the cart",
                reason=f"product_id={product_id}",
            )
        )

    updated = list(cart)
    updated[index] = clamp_discount(cart[index], discount_amount)
    return Return.ok(updated)


def clamp_discount(line: LineItem, discount_amount: int) -> LineItem:
    """Set a line's discount, clamped to [0, gross margin]"""
    applied = min(max(discount_amount, 0), line.margin_cap)
    if applied == line.discount_amount:
        return line
    return line.model_copy(update={"discount_amount": applied})


def _summarize(items: Sequence[LineItem], paid_amount: int) -> CheckoutSummary:
    totals = compute_totals(items)
    balance = totals.total_amount - paid_amount
    sale = Sale(items=list(items), paid_amount=paid_amount)
    return CheckoutSummary(
        total_amount=totals.total_amount,
        profit=totals.profit,
        paid_amount=paid_amount,
        balance=balance,
        change_amount=sale.change_amount,
        payment_status=classify_payment(totals.total_amount, paid_amount),
        document_type=sale.document_type,
    )


def validate_checkout(cart: Sequence[LineItem], payment: CheckoutPayment) -> Result[CheckoutSummary]:
    """
    Validate a cart and payment before the sale is processed

    Rules are checked in order and the first failure is returned:
    1. M-Pesa payments need a reference
    2. Bank payments need a reference
    3. An underpaid sale needs the customer's name
    4. An underpaid sale needs a phone number of 10 digits starting 07 or 01
    """
    if not cart:
        return Return.err(
            ledger_error(LedgerErrorCode.EMPTY_CART, message="Cart is empty")
        )

    if payment.amount_paid < 0:
        return Return.err(
            ledger_error(
                LedgerErrorCode.INVALID_PAYMENT_AMOUNT,
                message="Amount paid cannot be negative",
                reason=f"amount_paid={payment.amount_paid}",
            )
        )

    reference = (payment.reference or "").strip()
    if payment.method == PaymentMethod.MPESA and not reference:
        return Return.err(
            ledger_error(
                LedgerErrorCode.MISSING_PAYMENT_REFERENCE,
                message="M-Pesa reference is required",
                reason="payment_method=mpesa",
            )
        )
    if payment.method == PaymentMethod.BANK and not reference:
        return Return.err(
            ledger_error(
                LedgerErrorCode.MISSING_PAYMENT_REFERENCE,
                message="Bank reference is required",
                reason="payment_method=bank",
            )
        )

    summary = _summarize(cart, payment.amount_paid)

    if summary.balance > 0:
        if not (payment.customer_name or "").strip():
            return Return.err(
                ledger_error(
                    LedgerErrorCode.MISSING_CUSTOMER_INFO,
                    message="Customer name is required if balance is due",
                    reason=f"balance={summary.balance}",
                )
            )
        phone = (payment.customer_phone or "").strip()
        if not phone:
            return Return.err(
                ledger_error(
                    LedgerErrorCode.MISSING_CUSTOMER_INFO,
                    message="Customer phone number is required if balance is due",
                    reason=f"balance={summary.balance}",
                )
            )
        if not PHONE_PATTERN.match(phone):
            return Return.err(
                ledger_error(
                    LedgerErrorCode.INVALID_PHONE_FORMAT,
                    message="Valid customer phone number is required if balance is due",
                    reason=f"phone={phone!r} must be 10 digits starting with 07 or 01",
                )
            )

    return Return.ok(summary)


def _quantities(items: Sequence[LineItem]) -> "OrderedDict[int, int]":
    totals: "OrderedDict[int, int]" = OrderedDict()
    for item in items:
        totals[item.product_id] = totals.get(item.product_id, 0) + item.quantity
    return totals


def apply_edit(
    original_sale: Sale,
    edited_items: Sequence[LineItem],
    new_paid_amount: Optional[int],
    stock: Mapping[int, int],
) -> Result[EditOutcome]:
    """
    Reconcile an edited sale against its persisted original

    Deltas are always measured from the original persisted quantities.
    Edited discounts are clamped to each line's gross margin.
    ``stock`` holds the persisted stock per product; a product can grow to
    at most its persisted stock plus what this sale already holds.
    """
    if new_paid_amount is not None and new_paid_amount < 0:
        return Return.err(
            ledger_error(
                LedgerErrorCode.INVALID_PAYMENT_AMOUNT,
                message="Paid amount cannot be negative",
                reason=f"paid_amount={new_paid_amount}",
            )
        )

    for item in edited_items:
        if item.quantity < 0:
            return Return.err(
                ledger_error(
                    LedgerErrorCode.INVALID_QUANTITY,
                    message="Quantity cannot be negative",
                    reason=f"product_id={item.product_id}, quantity={item.quantity}",
                )
            )

    # Zero-quantity lines count as removed; discounts get the same margin cap as the till
    edited_items = [
        clamp_discount(item, item.discount_amount)
        for item in edited_items
        if item.quantity > 0
    ]
    original = _quantities(original_sale.items)
    edited = _quantities(edited_items)

    deltas: "OrderedDict[int, int]" = OrderedDict()
    for product_id in list(original) + [p for p in edited if p not in original]:
        original_qty = original.get(product_id, 0)
        edited_qty = edited.get(product_id, 0)
        delta = original_qty - edited_qty

        if delta < 0:
            available = stock.get(product_id, 0) + original_qty
            if edited_qty > available:
                return Return.err(
                    ledger_error(
                        LedgerErrorCode.INSUFFICIENT_STOCK,
                        message=f"Only {available} items available for product {product_id}",
                        reason=f"product_id={product_id}, requested={edited_qty}, available={available}",
                    )
                )

        if delta != 0:
            deltas[product_id] = delta

    paid_amount = original_sale.paid_amount if new_paid_amount is None else new_paid_amount
    updated_sale = original_sale.model_copy(
        update={"items": list(edited_items), "paid_amount": paid_amount}
    )

    return Return.ok(
        EditOutcome(
            sale=updated_sale,
            stock_adjustments=[
                StockAdjustment(product_id=product_id, delta=delta)
                for product_id, delta in deltas.items()
            ],
        )
    )


def _shrink_line(line: LineItem, returned: int) -> Optional[LineItem]:
    remaining = line.quantity - returned
    if remaining == 0:
        return None
    # Discount shrinks with the quantity, floored to the cent
    discount = line.discount_amount * remaining // line.quantity
    return line.model_copy(update={"quantity": remaining, "discount_amount": discount})


def apply_return(
    original_sale: Sale,
    return_requests: Sequence[ReturnRequest],
    restock_damaged: bool = False,
) -> Result[ReturnOutcome]:
    """
    Take returned units off a sale

    GOOD units go back on the shelf (positive stock delta). DAMAGED units
    leave the sale's totals but are written off instead of restocked unless
    ``restock_damaged`` is set. paid_amount is untouched, so a return can
    leave the sale OVERPAID, meaning a refund is owed.
    """
    sold = _quantities(original_sale.items)
    returned: Dict[int, int] = {}
    restocked: "OrderedDict[int, int]" = OrderedDict()
    write_offs: List[WriteOff] = []

    for request in return_requests:
        if request.return_quantity < 0:
            return Return.err(
                ledger_error(
                    LedgerErrorCode.INVALID_QUANTITY,
                    message="Return quantity cannot be negative",
                    reason=f"product_id={request.product_id}, quantity={request.return_quantity}",
                )
            )
        if request.return_quantity == 0:
            continue
        if request.product_id not in sold:
            return Return.err(
                ledger_error(
                    LedgerErrorCode.LINE_NOT_FOUND,
                    message=f"Product {request.product_id} was not sold in this sale",
                    reason=f"product_id={request.product_id}",
                )
            )

        total_returned = returned.get(request.product_id, 0) + request.return_quantity
        if total_returned > sold[request.product_id]:
            return Return.err(
                ledger_error(
                    LedgerErrorCode.EXCESSIVE_RETURN_QUANTITY,
                    message=f"Return quantity cannot exceed {sold[request.product_id]}",
                    reason=(
                        f"product_id={request.product_id}, returned={total_returned}, "
                        f"sold={sold[request.product_id]}"
                    ),
                )
            )
        returned[request.product_id] = total_returned

        if request.condition == ItemCondition.GOOD or restock_damaged:
            restocked[request.product_id] = restocked.get(request.product_id, 0) + request.return_quantity
        else:
            write_offs.append(
                WriteOff(
                    product_id=request.product_id,
                    quantity=request.return_quantity,
                    reason=request.reason,
                )
            )

    # Returns are applied line by line so duplicate product lines drain in order
    items: List[LineItem] = []
    outstanding = dict(returned)
    for line in original_sale.items:
        take = min(outstanding.get(line.product_id, 0), line.quantity)
        if take:
            outstanding[line.product_id] -= take
            shrunk = _shrink_line(line, take)
            if shrunk is not None:
                items.append(shrunk)
        else:
            items.append(line)

    updated_sale = original_sale.model_copy(update={"items": items})

    return Return.ok(
        ReturnOutcome(
            sale=updated_sale,
            stock_adjustments=[
                StockAdjustment(product_id=product_id, delta=quantity)
                for product_id, quantity in restocked.items()
            ],
            write_offs=write_offs,
            returned_amount=original_sale.total_amount - updated_sale.total_amount,
        )
    )


def apply_payment(sale: Sale, payment_amount: int) -> Result[Sale]:
    """Add a payment to a sale; payments accumulate, never overwrite"""
    if payment_amount <= 0:
        return Return.err(
            ledger_error(
                LedgerErrorCode.INVALID_PAYMENT_AMOUNT,
                message="Payment amount must be greater than 0",
                reason=f"payment_amount={payment_amount}",
            )
        )
    return Return.ok(sale.model_copy(update={"paid_amount": sale.paid_amount + payment_amount}))


def stock_level(quantity: int, reorder_level: int = 5, low_level: int = 15) -> StockLevel:
    if quantity <= reorder_level:
        return StockLevel.REORDER
    if quantity <= low_level:
        return StockLevel.LOW
    return StockLevel.OK
