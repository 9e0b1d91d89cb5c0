"""Sales API Routes

Checkout, edits, returns and debtor payments.
"""

from typing import Optional
from fastapi import APIRouter, Depends, status

from config import ApplicationConfig
from src.api.error import error_for
from src.api.schemas.sale_request import (
    CheckoutRequestSchema,
    EditSaleRequestSchema,
    PaymentRequestSchema,
    ReturnRequestSchema,
)
from src.app.repositories.product_repository import ProductRepository
from src.app.repositories.sale_repository import SaleRepository
from src.app.services.notification_service import NotificationService
from src.app.services.stock_lock import StockLock
from src.app.use_cases.sales import (
    CheckoutSale,
    EditSale,
    ListDebtors,
    RecordPayment,
    ReturnSale,
    CheckoutCommandDTO,
    CheckoutResponseDTO,
    EditSaleCommandDTO,
    EditSaleResponseDTO,
    ListDebtorsResponseDTO,
    RecordPaymentCommandDTO,
    ReturnSaleCommandDTO,
    ReturnSaleResponseDTO,
    SaleResponseDTO,
)
from src.depends import (
    get_notification_service,
    get_product_repository,
    get_sale_repository,
    get_stock_lock,
)

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.post(
    "/checkout",
    response_model=CheckoutResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {
            "description": "Not enough stock",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_STOCK",
                            "message": "Only 2 items available in stock"
                        }
                    }
                }
            }
        },
        422: {
            "description": "Checkout validation failed",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "MISSING_CUSTOMER_INFO",
                            "message": "Customer name is required if balance is due"
                        }
                    }
                }
            }
        }
    }
)
async def checkout(
    request: CheckoutRequestSchema,
    product_repo: ProductRepository = Depends(get_product_repository),
    sale_repo: SaleRepository = Depends(get_sale_repository),
    stock_lock: StockLock = Depends(get_stock_lock),
    notifier: Optional[NotificationService] = Depends(get_notification_service),
):
    """
    Process a sale.

    Prices and stock are re-read from inventory while the products are
    locked. The sale is persisted first, then stock is consumed.

    **Example request:**
    ```json
    {
      "items": [{"product_id": 42, "quantity": 3, "unit_price": "500.00"}],
      "payment": {"method": "cash", "amount_paid": "1500.00"}
    }
    ```

    **Returns:**
    - 201: Sale processed
    - 404: Product not found
    - 409: Not enough stock
    - 422: Payment or customer validation failed
    """
    command = CheckoutCommandDTO(
        items=request.items,
        payment=request.payment,
        note=request.note,
    )

    use_case = CheckoutSale(
        product_repo,
        sale_repo,
        stock_lock,
        notifier=notifier,
        reorder_level=ApplicationConfig.REORDER_LEVEL,
        low_stock_level=ApplicationConfig.LOW_STOCK_LEVEL,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise error_for(result.error)

    return result.value


@router.get("/debtors", response_model=ListDebtorsResponseDTO, status_code=status.HTTP_200_OK)
async def list_debtors(sale_repo: SaleRepository = Depends(get_sale_repository)):
    """
    List customers with outstanding balances, largest debt first.
    """
    result = await ListDebtors(sale_repo).execute()
    if result.is_err():
        raise error_for(result.error)
    return result.value


@router.put("/{sale_id}", response_model=EditSaleResponseDTO, status_code=status.HTTP_200_OK)
async def edit_sale(
    sale_id: int,
    request: EditSaleRequestSchema,
    product_repo: ProductRepository = Depends(get_product_repository),
    sale_repo: SaleRepository = Depends(get_sale_repository),
    stock_lock: StockLock = Depends(get_stock_lock),
    notifier: Optional[NotificationService] = Depends(get_notification_service),
):
    """
    Edit a processed sale.

    Send the complete item list. Stock changes are measured against the
    persisted sale, so repeating the same edit does not move stock twice.

    **Returns:**
    - 200: Sale updated
    - 404: Sale not found
    - 409: Not enough stock for an increased line
    """
    command = EditSaleCommandDTO(
        sale_id=sale_id,
        items=request.items,
        paid_amount=request.paid_amount,
    )

    use_case = EditSale(
        product_repo,
        sale_repo,
        stock_lock,
        notifier=notifier,
        reorder_level=ApplicationConfig.REORDER_LEVEL,
        low_stock_level=ApplicationConfig.LOW_STOCK_LEVEL,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise error_for(result.error)

    return result.value


@router.post("/{sale_id}/returns", response_model=ReturnSaleResponseDTO, status_code=status.HTTP_200_OK)
async def return_items(
    sale_id: int,
    request: ReturnRequestSchema,
    product_repo: ProductRepository = Depends(get_product_repository),
    sale_repo: SaleRepository = Depends(get_sale_repository),
    stock_lock: StockLock = Depends(get_stock_lock),
):
    """
    Return items from a processed sale.

    GOOD items are restocked. DAMAGED items are written off unless
    RESTOCK_DAMAGED_RETURNS is set. A resulting OVERPAID status means a
    refund is owed.

    **Returns:**
    - 200: Return processed
    - 404: Sale or line not found
    - 422: Return quantity exceeds sold quantity
    """
    command = ReturnSaleCommandDTO(sale_id=sale_id, items=request.items)

    use_case = ReturnSale(
        product_repo,
        sale_repo,
        stock_lock,
        restock_damaged=ApplicationConfig.RESTOCK_DAMAGED_RETURNS,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise error_for(result.error)

    return result.value


@router.post("/{sale_id}/payments", response_model=SaleResponseDTO, status_code=status.HTTP_200_OK)
async def record_payment(
    sale_id: int,
    request: PaymentRequestSchema,
    sale_repo: SaleRepository = Depends(get_sale_repository),
):
    """
    Record a payment against a sale's balance.

    Payments accumulate: paying 300 then 700 on a 1000 sale leaves it PAID.

    **Returns:**
    - 200: Payment recorded
    - 404: Sale not found
    - 422: Payment amount not greater than 0
    """
    command = RecordPaymentCommandDTO(sale_id=sale_id, payment_amount=request.payment_amount)

    result = await RecordPayment(sale_repo).execute(command)

    if result.is_err():
        raise error_for(result.error)

    return result.value
