import pytest
from unittest.mock import AsyncMock, MagicMock

from src.adapter.services.stock_lock import InProcessStockLock
from src.domain.product import Product


@pytest.fixture
def inventory():
    """Persisted stock keyed by product id"""
    return {
        1: Product(product_id=1, name="Claw hammer", stock_quantity=10, selling_price=50000, buying_price=30000),
        2: Product(product_id=2, name="Nails 2in (kg)", stock_quantity=7, selling_price=10000, buying_price=9000),
        3: Product(product_id=3, name="Wheelbarrow", stock_quantity=0, selling_price=650000, buying_price=500000),
    }


@pytest.fixture
def mock_product_repo(inventory):
    """Product repository backed by the inventory fixture"""
    repo = MagicMock()

    async def get_by_id(product_id):
        return inventory.get(product_id)

    async def set_stock(product_id, stock_quantity):
        inventory[product_id] = inventory[product_id].model_copy(update={"stock_quantity": stock_quantity})
        return inventory[product_id]

    repo.get_by_id = AsyncMock(side_effect=get_by_id)
    repo.set_stock = AsyncMock(side_effect=set_stock)
    return repo


@pytest.fixture
def mock_sale_repo():
    """Mock sale repository"""
    return MagicMock()


@pytest.fixture
def stock_lock():
    return InProcessStockLock()


@pytest.fixture
def mock_notifier():
    notifier = MagicMock()
    notifier.send_low_stock_alert = AsyncMock(return_value=True)
    return notifier
