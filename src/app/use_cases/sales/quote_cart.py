"""QuoteCart Use Case

Prices a cart against a payment and runs checkout validation without
persisting anything.
"""

from libs.result import Result, Return
from src.domain.ledger import validate_checkout
from .dtos import CheckoutSummaryDTO, QuoteCartCommandDTO


class QuoteCart:
    """
    Use Case: Quote a cart at the till

    Returns totals, balance, change and payment status, or the first
    checkout rule the payment breaks.
    """

    async def execute(self, command: QuoteCartCommandDTO) -> Result[CheckoutSummaryDTO]:
        cart = [item.to_domain() for item in command.items]
        result = validate_checkout(cart, command.payment.to_domain())
        if result.is_err():
            return Return.err(result.error)
        return Return.ok(CheckoutSummaryDTO.from_domain(result.value))
