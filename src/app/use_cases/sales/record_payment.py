"""RecordPayment Use Case

Records a debtor's payment against a sale. Payments accumulate.
"""

import logging
from libs.result import Result, Return, Error
from src.app.repositories.sale_repository import SaleRepository
from src.domain.ledger import apply_payment
from src.domain.money import format_kes, to_cents
from .dtos import RecordPaymentCommandDTO, SaleResponseDTO

logger = logging.getLogger(__name__)


class RecordPayment:
    """
    Use Case: Record a payment on an existing sale

    Business Rules:
    1. Payment amount must be > 0
    2. paid_amount += payment_amount, never overwritten
    3. Balance and payment status are re-derived
    """

    def __init__(self, sale_repo: SaleRepository):
        self.sale_repo = sale_repo

    async def execute(self, command: RecordPaymentCommandDTO) -> Result[SaleResponseDTO]:
        """
        Execute payment

        Args:
            command: RecordPaymentCommandDTO with sale_id and payment_amount

        Returns:
            Result[SaleResponseDTO]: Sale after the payment or error
        """
        try:
            sale = await self.sale_repo.get_by_id(command.sale_id)
            if not sale:
                return Return.err(
                    Error(
                        code="SALE_NOT_FOUND",
                        message=f"Sale {command.sale_id} not found",
                    )
                )

            payment_amount = to_cents(command.payment_amount)
            result = apply_payment(sale, payment_amount)
            if result.is_err():
                return Return.err(result.error)
            updated_sale = result.value

            await self.sale_repo.record_payment(command.sale_id, payment_amount)

            logger.info(
                f"Payment of {format_kes(payment_amount)} recorded on sale {command.sale_id}: "
                f"balance={format_kes(updated_sale.balance)}, status={updated_sale.payment_status.value}"
            )

            return Return.ok(SaleResponseDTO.from_domain(updated_sale))

        except Exception as e:
            logger.error(f"Payment for sale {command.sale_id} failed: {e}")
            return Return.err(
                Error(
                    code="RECORD_PAYMENT_FAILED",
                    message="Failed to record payment",
                    reason=str(e),
                )
            )
