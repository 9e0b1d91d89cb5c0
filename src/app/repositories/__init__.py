from .product_repository import ProductRepository
from .sale_repository import SaleRepository

__all__ = [
    "ProductRepository",
    "SaleRepository",
]
