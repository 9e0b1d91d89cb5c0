from typing import Dict, List, Optional, Sequence

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from config import ApplicationConfig
from src.adapter.services.stock_lock import InProcessStockLock
from src.api.app import create_app
from src.app.repositories.product_repository import ProductRepository
from src.app.repositories.sale_repository import SaleRepository
from src.depends import (
    get_notification_service,
    get_product_repository,
    get_sale_repository,
    get_stock_lock,
)
from src.domain.product import Product
from src.domain.sale import ReturnRequest, Sale


class InMemoryProductRepository(ProductRepository):
    def __init__(self, products: Sequence[Product]):
        self.products: Dict[int, Product] = {p.product_id: p for p in products}

    async def get_by_id(self, product_id: int) -> Optional[Product]:
        return self.products.get(product_id)

    async def search(self, term: str) -> List[Product]:
        return [p for p in self.products.values() if term.lower() in p.name.lower()]

    async def set_stock(self, product_id: int, stock_quantity: int) -> None:
        self.products[product_id] = self.products[product_id].model_copy(
            update={"stock_quantity": stock_quantity}
        )


class InMemorySaleRepository(SaleRepository):
    def __init__(self):
        self.sales: Dict[int, Sale] = {}
        self.returns: List[ReturnRequest] = []
        self.next_id = 1001

    async def get_by_id(self, sale_id: int) -> Optional[Sale]:
        return self.sales.get(sale_id)

    async def create(self, sale: Sale) -> Sale:
        created = sale.model_copy(update={"id": self.next_id})
        self.sales[created.id] = created
        self.next_id += 1
        return created

    async def update(self, sale: Sale) -> Sale:
        self.sales[sale.id] = sale
        return sale

    async def record_return(self, sale: Sale, requests: Sequence[ReturnRequest]) -> Sale:
        self.sales[sale.id] = sale
        self.returns.extend(requests)
        return sale

    async def record_payment(self, sale_id: int, payment_amount: int) -> None:
        sale = self.sales[sale_id]
        self.sales[sale_id] = sale.model_copy(update={"paid_amount": sale.paid_amount + payment_amount})

    async def list_pending(self) -> List[Sale]:
        return [sale for sale in self.sales.values() if sale.balance > 0]


@pytest.fixture
def product_repo():
    return InMemoryProductRepository(
        [
            Product(product_id=1, name="Claw hammer", stock_quantity=10, selling_price=50000, buying_price=30000),
            Product(product_id=2, name="Nails 2in (kg)", stock_quantity=4, selling_price=10000, buying_price=9000),
            Product(product_id=3, name="Wheelbarrow", stock_quantity=0, selling_price=650000, buying_price=500000),
        ]
    )


@pytest.fixture
def sale_repo():
    return InMemorySaleRepository()


@pytest_asyncio.fixture
async def client(product_repo, sale_repo):
    """Create test client with upstream repositories replaced by in-memory fakes"""
    app = create_app(ApplicationConfig)

    stock_lock = InProcessStockLock()
    app.dependency_overrides[get_product_repository] = lambda: product_repo
    app.dependency_overrides[get_sale_repository] = lambda: sale_repo
    app.dependency_overrides[get_stock_lock] = lambda: stock_lock
    app.dependency_overrides[get_notification_service] = lambda: None

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
