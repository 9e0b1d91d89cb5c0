"""CheckoutSale Use Case

Processes a till cart into a persisted sale and consumes stock, holding the
per-product stock lock so concurrent sales cannot oversell.
"""

import logging
from collections import OrderedDict
from datetime import datetime
from typing import List, Optional
from libs.result import Result, Return, Error
from src.app.repositories.product_repository import ProductRepository
from src.app.repositories.sale_repository import SaleRepository
from src.app.services.notification_service import NotificationService
from src.app.services.stock_lock import StockLock
from src.domain.ledger import add_or_update_line, apply_discount, validate_checkout
from src.domain.money import format_kes, to_cents
from src.domain.sale import LineItem, Sale, StockAdjustment
from .dtos import CheckoutCommandDTO, CheckoutResponseDTO, SaleResponseDTO, StockAdjustmentDTO
from .stock_sync import alert_low_stock, commit_stock_adjustments, load_snapshots

logger = logging.getLogger(__name__)


class CheckoutSale:
    """
    Use Case: Process a sale at the till

    Business Rules:
    1. Prices come from fresh product snapshots, not from the client
    2. Quantities are checked against persisted stock under the stock lock
    3. Requested discounts are re-clamped to each line's margin
    4. Payment rules (references, customer details on balance due) must pass
    5. Stock is consumed only after the sale is persisted

    Flow:
    1. Lock every product in the cart
    2. Read product snapshots and rebuild the cart
    3. Validate checkout
    4. Persist the sale
    5. Write back stock and send reorder alerts
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        sale_repo: SaleRepository,
        stock_lock: StockLock,
        notifier: Optional[NotificationService] = None,
        reorder_level: int = 5,
        low_stock_level: int = 15,
    ):
        self.product_repo = product_repo
        self.sale_repo = sale_repo
        self.stock_lock = stock_lock
        self.notifier = notifier
        self.reorder_level = reorder_level
        self.low_stock_level = low_stock_level

    async def execute(self, command: CheckoutCommandDTO) -> Result[CheckoutResponseDTO]:
        """
        Execute checkout

        Args:
            command: CheckoutCommandDTO with cart lines and payment

        Returns:
            Result[CheckoutResponseDTO]: Persisted sale and stock changes or error
        """
        # Merge duplicate lines so each product is checked once
        requested: "OrderedDict[int, dict]" = OrderedDict()
        for item in command.items:
            entry = requested.setdefault(item.product_id, {"quantity": 0, "discount": 0})
            entry["quantity"] += item.quantity
            entry["discount"] += to_cents(item.discount_amount)

        created_sale = None
        try:
            async with self.stock_lock.hold(requested.keys()):
                snapshots = await load_snapshots(self.product_repo, requested.keys())

                cart: List[LineItem] = []
                for product_id, entry in requested.items():
                    product = snapshots[product_id]
                    if not product:
                        return Return.err(
                            Error(
                                code="PRODUCT_NOT_FOUND",
                                message=f"Product {product_id} not found",
                            )
                        )

                    added = add_or_update_line(cart, product, entry["quantity"])
                    if added.is_err():
                        return Return.err(added.error)
                    cart = added.value

                    if entry["discount"]:
                        discounted = apply_discount(cart, product_id, entry["discount"])
                        if discounted.is_err():
                            return Return.err(discounted.error)
                        cart = discounted.value

                payment = command.payment.to_domain()
                validation = validate_checkout(cart, payment)
                if validation.is_err():
                    return Return.err(validation.error)

                sale = Sale(
                    items=cart,
                    paid_amount=payment.amount_paid,
                    payment_method=payment.method,
                    payment_reference=payment.reference,
                    customer_name=payment.customer_name,
                    customer_phone=payment.customer_phone,
                    note=command.note,
                    sale_date=datetime.utcnow(),
                )
                created_sale = await self.sale_repo.create(sale)

                adjustments = [
                    StockAdjustment(product_id=item.product_id, delta=-item.quantity)
                    for item in cart
                ]
                updated_products = await commit_stock_adjustments(
                    self.product_repo, snapshots, adjustments
                )

            logger.info(
                f"Sale {created_sale.id} processed: total={format_kes(created_sale.total_amount)}, "
                f"paid={format_kes(created_sale.paid_amount)}, status={created_sale.payment_status.value}"
            )

            await alert_low_stock(
                self.notifier, updated_products, self.reorder_level, self.low_stock_level
            )

            stock_after = {p.product_id: p.stock_quantity for p in updated_products}
            return Return.ok(
                CheckoutResponseDTO(
                    sale=SaleResponseDTO.from_domain(created_sale),
                    stock_adjustments=[
                        StockAdjustmentDTO.from_domain(a, stock_after.get(a.product_id))
                        for a in adjustments
                    ],
                )
            )

        except Exception as e:
            reason = str(e)
            if created_sale is not None:
                reason = f"Sale {created_sale.id} was saved but stock was not fully updated: {e}"
            logger.error(f"Checkout failed: {reason}")
            return Return.err(
                Error(
                    code="CHECKOUT_FAILED",
                    message="Failed to process sale",
                    reason=reason,
                )
            )
