"""ReturnSale Use Case

Takes returned units off a persisted sale. Good units go back on the shelf;
damaged units are written off.
"""

import logging
from libs.result import Result, Return, Error
from src.app.repositories.product_repository import ProductRepository
from src.app.repositories.sale_repository import SaleRepository
from src.app.services.stock_lock import StockLock
from src.domain.ledger import apply_return
from src.domain.money import from_cents
from .dtos import (
    ReturnSaleCommandDTO,
    ReturnSaleResponseDTO,
    SaleResponseDTO,
    StockAdjustmentDTO,
    WriteOffDTO,
)
from .stock_sync import commit_stock_adjustments, load_snapshots

logger = logging.getLogger(__name__)


class ReturnSale:
    """
    Use Case: Process a customer return

    Business Rules:
    1. Returned quantity per product may not exceed the sold quantity
    2. GOOD units are restocked; DAMAGED units are written off unless the
       restock_damaged policy is on
    3. paid_amount is unchanged; an OVERPAID sale means a refund is owed

    Flow:
    1. Load the persisted sale to learn which products it touches
    2. Lock those products and re-read the sale under the lock
    3. Compute and persist the return
    4. Read fresh stock and restock the returned products
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        sale_repo: SaleRepository,
        stock_lock: StockLock,
        restock_damaged: bool = False,
    ):
        self.product_repo = product_repo
        self.sale_repo = sale_repo
        self.stock_lock = stock_lock
        self.restock_damaged = restock_damaged

    async def execute(self, command: ReturnSaleCommandDTO) -> Result[ReturnSaleResponseDTO]:
        """
        Execute return

        Args:
            command: ReturnSaleCommandDTO with the returned lines

        Returns:
            Result[ReturnSaleResponseDTO]: Reduced sale, restock and write-offs or error
        """
        persisted = False
        try:
            original_sale = await self.sale_repo.get_by_id(command.sale_id)
            if not original_sale:
                return self._not_found(command.sale_id)

            locked_ids = {item.product_id for item in original_sale.items}

            while True:
                async with self.stock_lock.hold(locked_ids):
                    # Re-read under the lock so concurrent returns see each other
                    original_sale = await self.sale_repo.get_by_id(command.sale_id)
                    if not original_sale:
                        return self._not_found(command.sale_id)

                    needed = {item.product_id for item in original_sale.items}
                    if not needed <= locked_ids:
                        locked_ids |= needed
                        continue

                    requests = [item.to_domain() for item in command.items]
                    result = apply_return(
                        original_sale, requests, restock_damaged=self.restock_damaged
                    )
                    if result.is_err():
                        return Return.err(result.error)
                    outcome = result.value

                    accepted = [request for request in requests if request.return_quantity > 0]
                    updated_sale = await self.sale_repo.record_return(outcome.sale, accepted)
                    persisted = True

                    restocked_ids = [a.product_id for a in outcome.stock_adjustments]
                    snapshots = await load_snapshots(self.product_repo, restocked_ids)
                    updated_products = await commit_stock_adjustments(
                        self.product_repo, snapshots, outcome.stock_adjustments
                    )
                break

            for write_off in outcome.write_offs:
                logger.info(
                    f"Sale {command.sale_id}: wrote off {write_off.quantity} x product "
                    f"{write_off.product_id} ({write_off.reason or 'damaged'})"
                )

            stock_after = {p.product_id: p.stock_quantity for p in updated_products}
            return Return.ok(
                ReturnSaleResponseDTO(
                    sale=SaleResponseDTO.from_domain(updated_sale),
                    stock_adjustments=[
                        StockAdjustmentDTO.from_domain(a, stock_after.get(a.product_id))
                        for a in outcome.stock_adjustments
                    ],
                    write_offs=[WriteOffDTO.from_domain(w) for w in outcome.write_offs],
                    returned_amount=from_cents(outcome.returned_amount),
                    refund_due=from_cents(max(-updated_sale.balance, 0)),
                )
            )

        except Exception as e:
            reason = str(e)
            if persisted:
                reason = f"Return on sale {command.sale_id} was saved but stock was not fully updated: {e}"
            logger.error(f"Return for sale {command.sale_id} failed: {reason}")
            return Return.err(
                Error(
                    code="RETURN_SALE_FAILED",
                    message="Failed to process return",
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
