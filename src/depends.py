from typing import AsyncIterator, Optional
import httpx
from config import ApplicationConfig
from src.adapter.repositories.product_repository import HttpProductRepository
from src.adapter.repositories.sale_repository import HttpSaleRepository
from src.adapter.services.notification_service import create_notification_service
from src.adapter.services.stock_lock import InProcessStockLock
from src.app.repositories.product_repository import ProductRepository
from src.app.repositories.sale_repository import SaleRepository
from src.app.services.notification_service import NotificationService
from src.app.services.stock_lock import StockLock

stock_lock = InProcessStockLock()

notification_service = (
    create_notification_service(ApplicationConfig.LOW_STOCK_WEBHOOK, ApplicationConfig.CURRENCY)
    if ApplicationConfig.LOW_STOCK_ALERTS_ENABLED
    else None
)


async def get_upstream_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(
        base_url=ApplicationConfig.UPSTREAM_API_URL,
        timeout=ApplicationConfig.UPSTREAM_TIMEOUT_SECONDS,
    ) as client:
        yield client


async def get_product_repository() -> AsyncIterator[ProductRepository]:
    async for client in get_upstream_client():
        yield HttpProductRepository(client)


async def get_sale_repository() -> AsyncIterator[SaleRepository]:
    async for client in get_upstream_client():
        yield HttpSaleRepository(client)


def get_stock_lock() -> StockLock:
    return stock_lock


def get_notification_service() -> Optional[NotificationService]:
    return notification_service
