"""Sales use cases"""
from .add_cart_line import AddCartLine
from .apply_cart_discount import ApplyCartDiscount
from .quote_cart import QuoteCart
from .checkout_sale import CheckoutSale
from .edit_sale import EditSale
from .return_sale import ReturnSale
from .record_payment import RecordPayment
from .list_debtors import ListDebtors
from .search_products import SearchProducts
from .dtos import (
    LineItemDTO,
    LineItemResponseDTO,
    PaymentDTO,
    AddCartLineCommandDTO,
    ApplyDiscountCommandDTO,
    QuoteCartCommandDTO,
    CartResponseDTO,
    CheckoutSummaryDTO,
    CheckoutCommandDTO,
    CheckoutResponseDTO,
    SaleResponseDTO,
    StockAdjustmentDTO,
    EditSaleCommandDTO,
    EditSaleResponseDTO,
    ReturnItemDTO,
    ReturnSaleCommandDTO,
    ReturnSaleResponseDTO,
    WriteOffDTO,
    RecordPaymentCommandDTO,
    DebtorDTO,
    ListDebtorsResponseDTO,
    ProductDTO,
    SearchProductsResponseDTO,
)

__all__ = [
    "AddCartLine",
    "ApplyCartDiscount",
    "QuoteCart",
    "CheckoutSale",
    "EditSale",
    "ReturnSale",
    "RecordPayment",
    "ListDebtors",
    "SearchProducts",
    "LineItemDTO",
    "LineItemResponseDTO",
    "PaymentDTO",
    "AddCartLineCommandDTO",
    "ApplyDiscountCommandDTO",
    "QuoteCartCommandDTO",
    "CartResponseDTO",
    "CheckoutSummaryDTO",
    "CheckoutCommandDTO",
    "CheckoutResponseDTO",
    "SaleResponseDTO",
    "StockAdjustmentDTO",
    "EditSaleCommandDTO",
    "EditSaleResponseDTO",
    "ReturnItemDTO",
    "ReturnSaleCommandDTO",
    "ReturnSaleResponseDTO",
    "WriteOffDTO",
    "RecordPaymentCommandDTO",
    "DebtorDTO",
    "ListDebtorsResponseDTO",
    "ProductDTO",
    "SearchProductsResponseDTO",
]
