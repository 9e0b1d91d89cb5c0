"""Cart API Routes

Stateless till operations: the client holds the cart and sends it with
every request.
"""

from fastapi import APIRouter, Depends, Query, status

from config import ApplicationConfig
from src.app.repositories.product_repository import ProductRepository
from src.app.use_cases.sales import (
    AddCartLine,
    ApplyCartDiscount,
    QuoteCart,
    SearchProducts,
    AddCartLineCommandDTO,
    ApplyDiscountCommandDTO,
    QuoteCartCommandDTO,
    CartResponseDTO,
    CheckoutSummaryDTO,
    SearchProductsResponseDTO,
)
from src.depends import get_product_repository
from src.api.error import error_for

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.post(
    "/lines",
    response_model=CartResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        409: {
            "description": "Not enough stock",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_STOCK",
                            "message": "Only 4 items available in stock"
                        }
                    }
                }
            }
        }
    }
)
async def set_cart_line(
    command: AddCartLineCommandDTO,
    product_repo: ProductRepository = Depends(get_product_repository),
):
    """
    Add a product to the cart or change its quantity.

    The product's stock is read fresh from inventory. Stock is not reserved
    until checkout. A quantity of 0 removes the line.

    **Returns:**
    - 200: Updated cart with totals
    - 404: Product not found
    - 409: Out of stock or not enough stock
    """
    result = await AddCartLine(product_repo).execute(command)
    if result.is_err():
        raise error_for(result.error)
    return result.value


@router.post("/discount", response_model=CartResponseDTO, status_code=status.HTTP_200_OK)
async def discount_cart_line(command: ApplyDiscountCommandDTO):
    """
    Discount a cart line.

    Discounts larger than the line's margin are clamped so nothing sells
    below cost.
    """
    result = await ApplyCartDiscount().execute(command)
    if result.is_err():
        raise error_for(result.error)
    return result.value


@router.post("/quote", response_model=CheckoutSummaryDTO, status_code=status.HTTP_200_OK)
async def quote_cart(command: QuoteCartCommandDTO):
    """
    Price the cart against a payment and run checkout validation.

    **Returns:**
    - 200: Totals, balance, change, payment status and document type
    - 422: Missing payment reference or customer details
    """
    result = await QuoteCart().execute(command)
    if result.is_err():
        raise error_for(result.error)
    return result.value


@router.get("/products", response_model=SearchProductsResponseDTO, status_code=status.HTTP_200_OK)
async def search_products(
    search: str = Query("", description="Name or code to search for"),
    product_repo: ProductRepository = Depends(get_product_repository),
):
    """
    Search products for the till, tagged with their stock level.
    """
    use_case = SearchProducts(
        product_repo,
        reorder_level=ApplicationConfig.REORDER_LEVEL,
        low_stock_level=ApplicationConfig.LOW_STOCK_LEVEL,
    )
    result = await use_case.execute(search)
    if result.is_err():
        raise error_for(result.error)
    return result.value
