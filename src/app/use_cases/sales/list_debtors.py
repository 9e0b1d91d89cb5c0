"""ListDebtors Use Case

Summarises customers with outstanding balances.
"""

from libs.result import Result, Return, Error
from src.app.repositories.sale_repository import SaleRepository
from src.domain.debtor import summarize_debtors
from src.domain.money import from_cents
from .dtos import DebtorDTO, ListDebtorsResponseDTO


class ListDebtors:
    """
    Use Case: List debtors

    Groups pending sales by customer phone, largest debt first.
    """

    def __init__(self, sale_repo: SaleRepository):
        self.sale_repo = sale_repo

    async def execute(self) -> Result[ListDebtorsResponseDTO]:
        try:
            sales = await self.sale_repo.list_pending()
        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_DEBTORS_FAILED",
                    message="Failed to load pending sales",
                    reason=str(e),
                )
            )

        debtors = summarize_debtors(sales)
        return Return.ok(
            ListDebtorsResponseDTO(
                debtors=[DebtorDTO.from_domain(d) for d in debtors],
                total_receivable=from_cents(sum(d.total_debt for d in debtors)),
                debtor_count=len(debtors),
            )
        )
