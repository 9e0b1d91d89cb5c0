"""Sale Repository Interface

Defines the contract for sale persistence in the sales backend.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from src.domain.sale import ReturnRequest, Sale


class SaleRepository(ABC):
    """Repository interface for Sale persistence"""

    @abstractmethod
    async def get_by_id(self, sale_id: int) -> Optional[Sale]:
        """
        Retrieve a persisted sale

        Args:
            sale_id: Sale identifier

        Returns:
            Sale if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, sale: Sale) -> Sale:
        """
        Persist a processed sale

        Args:
            sale: Sale computed by the ledger (id is None)

        Returns:
            Created Sale with generated ID
        """
        pass

    @abstractmethod
    async def update(self, sale: Sale) -> Sale:
        """
        Persist an edited sale (items and paid amount)

        Args:
            sale: Edited sale with its id set

        Returns:
            Updated Sale
        """
        pass

    @abstractmethod
    async def record_return(self, sale: Sale, requests: Sequence[ReturnRequest]) -> Sale:
        """
        Persist a return against a sale

        Args:
            sale: Sale after the returned units were taken off
            requests: The accepted return requests

        Returns:
            Updated Sale
        """
        pass

    @abstractmethod
    async def record_payment(self, sale_id: int, payment_amount: int) -> None:
        """
        Record an additional payment

        Args:
            sale_id: Sale identifier
            payment_amount: Amount paid now (cents, > 0)
        """
        pass

    @abstractmethod
    async def list_pending(self) -> List[Sale]:
        """
        List sales with an outstanding balance

        Returns:
            Sales whose balance may be due
        """
        pass
