"""Stock Lock Interface

Serialises stock-affecting operations per product.
"""

from abc import ABC, abstractmethod
from typing import AsyncContextManager, Iterable


class StockLock(ABC):
    """
    Per-product lock held across read-check-write of stock

    Implementations must acquire locks in a stable order so two operations
    touching overlapping products cannot deadlock.
    """

    @abstractmethod
    def hold(self, product_ids: Iterable[int]) -> AsyncContextManager[None]:
        """
        Hold the locks for every given product

        Args:
            product_ids: Products whose stock will be read and written

        Returns:
            Async context manager; locks are released on exit
        """
        pass
