"""Stock write-back shared by checkout, edit and return"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence
from src.app.repositories.product_repository import ProductRepository
from src.app.services.notification_service import NotificationService
from src.domain.ledger import stock_level
from src.domain.product import Product, StockLevel
from src.domain.sale import StockAdjustment

logger = logging.getLogger(__name__)


async def load_snapshots(
    product_repo: ProductRepository, product_ids: Iterable[int]
) -> Dict[int, Optional[Product]]:
    """Read a fresh snapshot for every product; missing products map to None"""
    snapshots: Dict[int, Optional[Product]] = {}
    for product_id in product_ids:
        if product_id not in snapshots:
            snapshots[product_id] = await product_repo.get_by_id(product_id)
    return snapshots


async def commit_stock_adjustments(
    product_repo: ProductRepository,
    snapshots: Mapping[int, Product],
    adjustments: Sequence[StockAdjustment],
) -> List[Product]:
    """
    Apply stock deltas on top of the snapshots read under the stock lock

    Returns:
        Products with their stock after the write
    """
    updated: List[Product] = []
    for adjustment in adjustments:
        product = snapshots.get(adjustment.product_id)
        if product is None:
            logger.warning(
                f"Product {adjustment.product_id} no longer exists, "
                f"skipping stock delta {adjustment.delta}"
            )
            continue
        new_stock = product.stock_quantity + adjustment.delta
        await product_repo.set_stock(adjustment.product_id, new_stock)
        logger.info(
            f"Stock for product {adjustment.product_id}: "
            f"{product.stock_quantity} -> {new_stock} (delta={adjustment.delta})"
        )
        updated.append(product.model_copy(update={"stock_quantity": new_stock}))
    return updated


async def alert_low_stock(
    notifier: Optional[NotificationService],
    products: Sequence[Product],
    reorder_level: int,
    low_level: int,
) -> None:
    """Send reorder alerts; a failed alert never fails the sale"""
    if notifier is None:
        return
    for product in products:
        level = stock_level(product.stock_quantity, reorder_level, low_level)
        if level != StockLevel.REORDER:
            continue
        try:
            await notifier.send_low_stock_alert(product, level)
        except Exception as e:
            logger.warning(f"Low stock alert failed for product {product.product_id}: {e}")
