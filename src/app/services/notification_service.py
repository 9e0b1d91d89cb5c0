"""Notification Service Interface

Defines the contract for sending low-stock alerts.
"""

from abc import ABC, abstractmethod
from src.domain.product import Product, StockLevel


class NotificationService(ABC):
    """
    Abstract notification service for stock alerts

    Implementations can send notifications via:
    - Logging
    - Webhook (HTTP POST)
    """

    @abstractmethod
    async def send_low_stock_alert(self, product: Product, level: StockLevel) -> bool:
        """
        Send alert for a product at or below its reorder level

        Args:
            product: Product with its stock after the sale
            level: Classified stock level

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass
