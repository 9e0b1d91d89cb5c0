"""AddCartLine Use Case

Adds a product to a till cart or changes its quantity, checked against a
fresh stock snapshot. Stock is not reserved.
"""

import logging
from libs.result import Result, Return, Error
from src.app.repositories.product_repository import ProductRepository
from src.domain.ledger import add_or_update_line
from .dtos import AddCartLineCommandDTO, CartResponseDTO

logger = logging.getLogger(__name__)


class AddCartLine:
    """
    Use Case: Set a product's quantity in the cart

    Business Rules:
    1. Requested quantity may not exceed persisted stock
    2. An out-of-stock product cannot be added
    3. Existing discounts are kept when the quantity changes
    4. Quantity <= 0 removes the line
    """

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    async def execute(self, command: AddCartLineCommandDTO) -> Result[CartResponseDTO]:
        """
        Execute cart update

        Args:
            command: AddCartLineCommandDTO with the current cart and requested quantity

        Returns:
            Result[CartResponseDTO]: Updated cart with totals or error
        """
        try:
            product = await self.product_repo.get_by_id(command.product_id)
        except Exception as e:
            logger.error(f"Failed to load product {command.product_id}: {e}")
            return Return.err(
                Error(
                    code="ADD_CART_LINE_FAILED",
                    message="Failed to load product",
                    reason=str(e),
                )
            )

        if not product:
            return Return.err(
                Error(
                    code="PRODUCT_NOT_FOUND",
                    message=f"Product {command.product_id} not found",
                )
            )

        cart = [item.to_domain() for item in command.items]
        result = add_or_update_line(cart, product, command.quantity)
        if result.is_err():
            return Return.err(result.error)

        return Return.ok(CartResponseDTO.from_domain(result.value))
