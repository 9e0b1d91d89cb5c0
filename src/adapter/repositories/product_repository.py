"""HTTP implementation of ProductRepository

Reads and writes item stock through the inventory backend's REST API.
"""

from typing import List, Optional
import httpx
from src.app.repositories.product_repository import ProductRepository
from src.domain.product import Product
from .wire import ItemWire


class HttpProductRepository(ProductRepository):
    """
    httpx implementation of ProductRepository

    Endpoints:
    - GET /items/{id}
    - GET /items?search=
    - PATCH /items/{id}/stock?stockQuantity=
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def get_by_id(self, product_id: int) -> Optional[Product]:
        response = await self.client.get(f"/items/{product_id}")
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return ItemWire.model_validate(response.json()).to_domain()

    async def search(self, term: str) -> List[Product]:
        response = await self.client.get("/items", params={"search": term})
        response.raise_for_status()
        return [ItemWire.model_validate(item).to_domain() for item in response.json()]

    async def set_stock(self, product_id: int, stock_quantity: int) -> None:
        response = await self.client.patch(
            f"/items/{product_id}/stock",
            params={"stockQuantity": stock_quantity},
        )
        response.raise_for_status()
