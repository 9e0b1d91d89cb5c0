"""SearchProducts Use Case

Looks up products for the till with their stock level.
"""

import logging
from libs.result import Result, Return, Error
from src.app.repositories.product_repository import ProductRepository
from src.domain.ledger import stock_level
from .dtos import ProductDTO, SearchProductsResponseDTO

logger = logging.getLogger(__name__)


class SearchProducts:
    """
    Use Case: Search products at the till

    Each product is tagged REORDER, LOW or OK from its persisted stock.
    """

    def __init__(self, product_repo: ProductRepository, reorder_level: int = 5, low_stock_level: int = 15):
        self.product_repo = product_repo
        self.reorder_level = reorder_level
        self.low_stock_level = low_stock_level

    async def execute(self, term: str) -> Result[SearchProductsResponseDTO]:
        try:
            products = await self.product_repo.search(term.strip())
        except Exception as e:
            logger.error(f"Product search for {term!r} failed: {e}")
            return Return.err(
                Error(
                    code="SEARCH_PRODUCTS_FAILED",
                    message="Failed to search products",
                    reason=str(e),
                )
            )

        return Return.ok(
            SearchProductsResponseDTO(
                products=[
                    ProductDTO.from_domain(
                        product,
                        stock_level(product.stock_quantity, self.reorder_level, self.low_stock_level),
                    )
                    for product in products
                ]
            )
        )
