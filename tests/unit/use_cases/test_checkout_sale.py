"""Unit tests for CheckoutSale use case

Tests cover:
- Pricing from fresh product snapshots
- Stock consumption after the sale is persisted
- Checkout validation failures
- Reorder alerts
"""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from src.app.use_cases.sales.checkout_sale import CheckoutSale
from src.app.use_cases.sales.dtos import CheckoutCommandDTO, LineItemDTO, PaymentDTO
from src.domain.sale import DocumentType, PaymentMethod, PaymentStatus


def _created(sale):
    return sale.model_copy(update={"id": 1001})


@pytest.fixture
def checkout_use_case(mock_product_repo, mock_sale_repo, stock_lock, mock_notifier):
    mock_sale_repo.create = AsyncMock(side_effect=_created)
    return CheckoutSale(
        product_repo=mock_product_repo,
        sale_repo=mock_sale_repo,
        stock_lock=stock_lock,
        notifier=mock_notifier,
    )


def _command(*items, **payment):
    return CheckoutCommandDTO(
        items=[
            LineItemDTO(product_id=pid, quantity=qty, unit_price=Decimal("1.00"), discount_amount=discount)
            for pid, qty, discount in items
        ],
        payment=PaymentDTO(**payment),
    )


@pytest.mark.asyncio
class TestCheckoutSaleSuccess:
    """Test successful checkout"""

    async def test_cash_sale_paid_in_full(self, checkout_use_case, mock_sale_repo, inventory):
        """
        Given: 3 hammers at 500 with 10 in stock
        When: Paid 1500 in cash
        Then: Sale is PAID, a receipt, and stock drops to 7
        """
        # Act
        result = await checkout_use_case.execute(_command((1, 3, Decimal("0")), amount_paid=Decimal("1500")))

        # Assert
        assert result.is_ok()
        response = result.value
        assert response.sale.sale_id == 1001
        assert response.sale.total_amount == Decimal("1500.00")
        assert response.sale.profit == Decimal("600.00")
        assert response.sale.payment_status == PaymentStatus.PAID
        assert response.sale.document_type == DocumentType.RECEIPT
        assert [(a.product_id, a.delta, a.stock_after) for a in response.stock_adjustments] == [(1, -3, 7)]
        assert inventory[1].stock_quantity == 7
        mock_sale_repo.create.assert_awaited_once()

    async def test_prices_come_from_product_snapshot(self, checkout_use_case):
        result = await checkout_use_case.execute(_command((2, 2, Decimal("0")), amount_paid=Decimal("200")))

        item = result.value.sale.items[0]
        assert item.unit_price == Decimal("100.00")
        assert item.buying_price == Decimal("90.00")

    async def test_discount_reclamped_to_margin(self, checkout_use_case):
        """2 x 100 at cost 90 with a 50 discount request sells for 180"""
        result = await checkout_use_case.execute(_command((2, 2, Decimal("50")), amount_paid=Decimal("180")))

        assert result.is_ok()
        assert result.value.sale.items[0].discount_amount == Decimal("20.00")
        assert result.value.sale.total_amount == Decimal("180.00")
        assert result.value.sale.profit == Decimal("0.00")

    async def test_duplicate_lines_merged(self, checkout_use_case, inventory):
        result = await checkout_use_case.execute(
            _command((1, 2, Decimal("0")), (1, 1, Decimal("0")), amount_paid=Decimal("1500"))
        )

        assert result.is_ok()
        assert len(result.value.sale.items) == 1
        assert result.value.sale.items[0].quantity == 3
        assert inventory[1].stock_quantity == 7

    async def test_overpaid_sale_reports_change(self, checkout_use_case):
        result = await checkout_use_case.execute(_command((1, 1, Decimal("0")), amount_paid=Decimal("1000")))

        assert result.value.sale.change_amount == Decimal("500.00")
        assert result.value.sale.payment_status == PaymentStatus.OVERPAID

    async def test_credit_sale_becomes_invoice(self, checkout_use_case):
        result = await checkout_use_case.execute(
            _command(
                (1, 4, Decimal("0")),
                method=PaymentMethod.MPESA,
                amount_paid=Decimal("1000"),
                reference="QGH7K2LMN4",
                customer_name="Jane Wanjiku",
                customer_phone="0712345678",
            )
        )

        assert result.is_ok()
        assert result.value.sale.balance == Decimal("1000.00")
        assert result.value.sale.payment_status == PaymentStatus.PARTIAL
        assert result.value.sale.document_type == DocumentType.INVOICE

    async def test_reorder_alert_sent(self, checkout_use_case, mock_notifier):
        """Hammer stock falls from 10 to 5, the reorder level"""
        await checkout_use_case.execute(_command((1, 5, Decimal("0")), amount_paid=Decimal("2500")))

        mock_notifier.send_low_stock_alert.assert_awaited_once()
        product, _ = mock_notifier.send_low_stock_alert.call_args.args
        assert product.product_id == 1
        assert product.stock_quantity == 5

    async def test_failed_alert_does_not_fail_sale(self, checkout_use_case, mock_notifier):
        mock_notifier.send_low_stock_alert = AsyncMock(side_effect=RuntimeError("webhook down"))

        result = await checkout_use_case.execute(_command((1, 6, Decimal("0")), amount_paid=Decimal("3000")))

        assert result.is_ok()

    async def test_concurrent_sales_cannot_oversell(self, checkout_use_case, inventory):
        """Two tills selling 6 of 10 hammers: exactly one succeeds"""
        results = await asyncio.gather(
            checkout_use_case.execute(_command((1, 6, Decimal("0")), amount_paid=Decimal("3000"))),
            checkout_use_case.execute(_command((1, 6, Decimal("0")), amount_paid=Decimal("3000"))),
        )

        assert sorted(r.is_ok() for r in results) == [False, True]
        failed = next(r for r in results if r.is_err())
        assert failed.error.code == "INSUFFICIENT_STOCK"
        assert inventory[1].stock_quantity == 4


@pytest.mark.asyncio
class TestCheckoutSaleFailures:
    """Test rejected checkouts leave stock untouched"""

    async def test_insufficient_stock(self, checkout_use_case, mock_sale_repo, mock_product_repo):
        result = await checkout_use_case.execute(_command((2, 8, Decimal("0")), amount_paid=Decimal("800")))

        assert result.is_err()
        assert result.error.code == "INSUFFICIENT_STOCK"
        mock_sale_repo.create.assert_not_called()
        mock_product_repo.set_stock.assert_not_called()

    async def test_out_of_stock(self, checkout_use_case):
        result = await checkout_use_case.execute(_command((3, 1, Decimal("0")), amount_paid=Decimal("6500")))

        assert result.is_err()
        assert result.error.code == "OUT_OF_STOCK"

    async def test_unknown_product(self, checkout_use_case):
        result = await checkout_use_case.execute(_command((99, 1, Decimal("0")), amount_paid=Decimal("1")))

        assert result.is_err()
        assert result.error.code == "PRODUCT_NOT_FOUND"

    async def test_underpaid_without_customer(self, checkout_use_case, mock_sale_repo, inventory):
        """
        Given: Cart total 2000 paid 1000 in cash
        When: No customer name is captured
        Then: MISSING_CUSTOMER_INFO and nothing is persisted
        """
        result = await checkout_use_case.execute(_command((1, 4, Decimal("0")), amount_paid=Decimal("1000")))

        assert result.is_err()
        assert result.error.code == "MISSING_CUSTOMER_INFO"
        mock_sale_repo.create.assert_not_called()
        assert inventory[1].stock_quantity == 10

    async def test_mpesa_without_reference(self, checkout_use_case):
        result = await checkout_use_case.execute(
            _command((1, 1, Decimal("0")), method=PaymentMethod.MPESA, amount_paid=Decimal("500"))
        )

        assert result.error.code == "MISSING_PAYMENT_REFERENCE"

    async def test_repository_error_wrapped(self, checkout_use_case, mock_sale_repo, inventory):
        mock_sale_repo.create = AsyncMock(side_effect=ConnectionError("backend unreachable"))

        result = await checkout_use_case.execute(_command((1, 1, Decimal("0")), amount_paid=Decimal("500")))

        assert result.is_err()
        assert result.error.code == "CHECKOUT_FAILED"
        assert "backend unreachable" in result.error.reason
        assert inventory[1].stock_quantity == 10

    async def test_stock_failure_after_save_names_sale(self, checkout_use_case, mock_product_repo, mock_sale_repo):
        """
        Given: The sale is persisted as 1001
        When: Writing back hammer stock fails
        Then: The failure reason names sale 1001 so it can be reconciled
        """
        mock_product_repo.set_stock = AsyncMock(side_effect=ConnectionError("stock service down"))

        result = await checkout_use_case.execute(_command((1, 1, Decimal("0")), amount_paid=Decimal("500")))

        assert result.is_err()
        assert result.error.code == "CHECKOUT_FAILED"
        assert "Sale 1001 was saved" in result.error.reason
        assert "stock service down" in result.error.reason
        mock_sale_repo.create.assert_awaited_once()
