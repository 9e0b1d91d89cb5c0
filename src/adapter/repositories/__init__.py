from .product_repository import HttpProductRepository
from .sale_repository import HttpSaleRepository

__all__ = [
    "HttpProductRepository",
    "HttpSaleRepository",
]
