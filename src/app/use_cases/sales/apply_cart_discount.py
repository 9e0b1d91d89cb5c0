"""ApplyCartDiscount Use Case

Discounts a cart line, clamped to the line's gross margin.
"""

from libs.result import Result, Return
from src.domain.ledger import apply_discount
from src.domain.money import to_cents
from .dtos import ApplyDiscountCommandDTO, CartResponseDTO


class ApplyCartDiscount:
    """
    Use Case: Apply an absolute discount to a cart line

    The discount never takes a line below cost; larger requests are clamped
    without an error.
    """

    async def execute(self, command: ApplyDiscountCommandDTO) -> Result[CartResponseDTO]:
        cart = [item.to_domain() for item in command.items]
        result = apply_discount(cart, command.product_id, to_cents(command.discount_amount))
        if result.is_err():
            return Return.err(result.error)
        return Return.ok(CartResponseDTO.from_domain(result.value))
