"""Product Repository Interface

Defines the contract for reading product stock snapshots and writing stock
levels back to the inventory backend.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.product import Product


class ProductRepository(ABC):
    """
    Repository interface for Product stock

    Callers must hold the per-product StockLock around a read followed by
    set_stock so two sales cannot both pass the availability check.
    """

    @abstractmethod
    async def get_by_id(self, product_id: int) -> Optional[Product]:
        """
        Retrieve a fresh stock snapshot

        Args:
            product_id: Product identifier

        Returns:
            Product if found, None otherwise
        """
        pass

    @abstractmethod
    async def search(self, term: str) -> List[Product]:
        """
        Search products by name

        Args:
            term: Search text

        Returns:
            Matching products (may be empty)
        """
        pass

    @abstractmethod
    async def set_stock(self, product_id: int, stock_quantity: int) -> None:
        """
        Write an absolute stock level

        Args:
            product_id: Product identifier
            stock_quantity: New stock on hand
        """
        pass
