"""EditSale Use Case

Applies edits to a persisted sale and reconciles stock against the sale's
original persisted quantities.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.product_repository import ProductRepository
from src.app.repositories.sale_repository import SaleRepository
from src.app.services.notification_service import NotificationService
from src.app.services.stock_lock import StockLock
from src.domain.ledger import apply_edit
from src.domain.money import to_cents
from .dtos import EditSaleCommandDTO, EditSaleResponseDTO, SaleResponseDTO, StockAdjustmentDTO
from .stock_sync import alert_low_stock, commit_stock_adjustments, load_snapshots

logger = logging.getLogger(__name__)


class EditSale:
    """
    Use Case: Edit a processed sale

    Business Rules:
    1. Stock deltas are measured from the persisted sale, never from an
       earlier unsaved edit
    2. A line may grow to at most persisted stock plus what the sale holds
    3. Totals, balance and payment status are re-derived
    4. Buying prices missing from the edit come from the original line or
       the product snapshot

    Flow:
    1. Load the persisted sale to learn which products it touches
    2. Lock every product in the original and edited item lists
    3. Re-read the sale under the lock; re-lock if its products changed
    4. Read fresh stock, compute the edit
    5. Persist the sale, then write back stock
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

    async def execute(self, command: EditSaleCommandDTO) -> Result[EditSaleResponseDTO]:
        """
        Execute sale edit

        Args:
            command: EditSaleCommandDTO with the full edited item list

        Returns:
            Result[EditSaleResponseDTO]: Updated sale and stock changes or error
        """
        persisted = False
        try:
            original_sale = await self.sale_repo.get_by_id(command.sale_id)
            if not original_sale:
                return self._not_found(command.sale_id)

            locked_ids = {item.product_id for item in original_sale.items}
            locked_ids |= {item.product_id for item in command.items}

            while True:
                async with self.stock_lock.hold(locked_ids):
                    # Re-read under the lock; another edit or return may have landed
                    original_sale = await self.sale_repo.get_by_id(command.sale_id)
                    if not original_sale:
                        return self._not_found(command.sale_id)

                    needed = {item.product_id for item in original_sale.items}
                    needed |= {item.product_id for item in command.items}
                    if not needed <= locked_ids:
                        locked_ids |= needed
                        continue

                    snapshots = await load_snapshots(self.product_repo, sorted(locked_ids))

                    edited_items = []
                    for item in command.items:
                        buying_price = None
                        product_name = item.product_name
                        original_line = original_sale.find_line(item.product_id)
                        snapshot = snapshots.get(item.product_id)
                        if original_line is not None:
                            buying_price = original_line.buying_price
                            product_name = product_name or original_line.product_name
                        elif snapshot is not None:
                            buying_price = snapshot.buying_price
                            product_name = product_name or snapshot.name
                        elif item.buying_price is None:
                            return Return.err(
                                Error(
                                    code="PRODUCT_NOT_FOUND",
                                    message=f"Product {item.product_id} not found",
                                )
                            )
                        line = item.to_domain(buying_price=buying_price)
                        edited_items.append(line.model_copy(update={"product_name": product_name}))

                    stock = {
                        product_id: product.stock_quantity
                        for product_id, product in snapshots.items()
                        if product is not None
                    }
                    paid_amount = None if command.paid_amount is None else to_cents(command.paid_amount)

                    result = apply_edit(original_sale, edited_items, paid_amount, stock)
                    if result.is_err():
                        return Return.err(result.error)
                    outcome = result.value

                    updated_sale = await self.sale_repo.update(outcome.sale)
                    persisted = True
                    updated_products = await commit_stock_adjustments(
                        self.product_repo, snapshots, outcome.stock_adjustments
                    )
                break

            logger.info(
                f"Sale {command.sale_id} edited: total={updated_sale.total_amount}, "
                f"balance={updated_sale.balance}, "
                f"{len(outcome.stock_adjustments)} stock adjustments"
            )

            await alert_low_stock(
                self.notifier, updated_products, self.reorder_level, self.low_stock_level
            )

            stock_after = {p.product_id: p.stock_quantity for p in updated_products}
            return Return.ok(
                EditSaleResponseDTO(
                    sale=SaleResponseDTO.from_domain(updated_sale),
                    stock_adjustments=[
                        StockAdjustmentDTO.from_domain(a, stock_after.get(a.product_id))
                        for a in outcome.stock_adjustments
                    ],
                )
            )

        except Exception as e:
            reason = str(e)
            if persisted:
                reason = f"Sale {command.sale_id} was saved but stock was not fully updated: {e}"
            logger.error(f"Edit of sale {command.sale_id} failed: {reason}")
            return Return.err(
                Error(
                    code="EDIT_SALE_FAILED",
                    message="Failed to edit sale",
                    reason=reason,
                )
            )

    @staticmethod
    def _not_found(sale_id: int):
        return Return.err(
            Error(
                code="SALE_NOT_FOUND",
                message=f"Sale {sale_id} not found",
            )
        )
