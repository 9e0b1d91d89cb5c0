"""HTTP implementation of SaleRepository

Persists sales through the sales backend's REST API. The ledger's computed
sale is authoritative; backend responses only contribute the sale id.
"""

from datetime import datetime
from typing import List, Optional, Sequence
import httpx
from src.app.repositories.sale_repository import SaleRepository
from src.domain.money import from_cents
from src.domain.sale import ReturnRequest, Sale
from .wire import SaleWire, return_payload, sale_payload


class HttpSaleRepository(SaleRepository):
    """
    httpx implementation of SaleRepository

    Endpoints:
    - GET /sales/{id}
    - POST /sales
    - PUT /sales/{id}/edit
    - POST /sales/{id}/return
    - POST /sales/payment/{id}
    - GET /sales/pending
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def get_by_id(self, sale_id: int) -> Optional[Sale]:
        response = await self.client.get(f"/sales/{sale_id}")
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return SaleWire.model_validate(response.json()).to_domain()

    async def create(self, sale: Sale) -> Sale:
        response = await self.client.post("/sales", json=sale_payload(sale))
        response.raise_for_status()
        body = response.json()
        return sale.model_copy(
            update={
                "id": body["id"],
                "sale_date": sale.sale_date or datetime.utcnow(),
            }
        )

    async def update(self, sale: Sale) -> Sale:
        response = await self.client.put(f"/sales/{sale.id}/edit", json=sale_payload(sale))
        response.raise_for_status()
        return sale

    async def record_return(self, sale: Sale, requests: Sequence[ReturnRequest]) -> Sale:
        response = await self.client.post(
            f"/sales/{sale.id}/return",
            json=return_payload(sale, requests),
        )
        response.raise_for_status()
        return sale

    async def record_payment(self, sale_id: int, payment_amount: int) -> None:
        response = await self.client.post(
            f"/sales/payment/{sale_id}",
            json={"paymentAmount": str(from_cents(payment_amount))},
        )
        response.raise_for_status()

    async def list_pending(self) -> List[Sale]:
        response = await self.client.get("/sales/pending")
        response.raise_for_status()
        return [SaleWire.model_validate(sale).to_domain() for sale in response.json()]
