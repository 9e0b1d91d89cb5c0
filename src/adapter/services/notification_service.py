"""Notification Service Implementations

Provides concrete implementations for sending low-stock alerts.
"""

import logging
from typing import Optional
import httpx
from src.app.services.notification_service import NotificationService
from src.domain.money import format_kes
from src.domain.product import Product, StockLevel

logger = logging.getLogger(__name__)


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs alerts

    Useful for development and testing, or as a fallback.
    """

    def __init__(self, currency: str = "KES"):
        self.currency = currency

    async def send_low_stock_alert(self, product: Product, level: StockLevel) -> bool:
        logger.warning(
            f"[LOW STOCK] Product: {product.product_id} ({product.name}), "
            f"Stock: {product.stock_quantity}, Level: {level.value}, "
            f"Price: {format_kes(product.selling_price, self.currency)}"
        )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that sends alerts via HTTP webhook

    Sends JSON payload to configured webhook URL.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST alerts to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def send_low_stock_alert(self, product: Product, level: StockLevel) -> bool:
        """
        Send low-stock alert via webhook

        Args:
            product: Product with its stock after the sale
            level: Classified stock level

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {
            "type": "low_stock_alert",
            "product_id": product.product_id,
            "product_name": product.name,
            "stock_quantity": product.stock_quantity,
            "level": level.value,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(
                    f"Webhook notification sent for product {product.product_id} to {self.webhook_url}"
                )
                return True
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to send webhook notification for product {product.product_id}: {e}"
            )
            return False


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_low_stock_alert(self, product: Product, level: StockLevel) -> bool:
        """
        Send alert to all configured services

        Returns:
            True if at least one service succeeded, False otherwise
        """
        success = False
        for service in self.services:
            try:
                if await service.send_low_stock_alert(product, level):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(webhook_url: Optional[str] = None, currency: str = "KES") -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.
        currency: Currency label used in logged alerts

    Returns:
        Configured NotificationService
    """
    services: list[NotificationService] = [LoggingNotificationService(currency)]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
