"""Unit tests for returns against a processed sale"""

import pytest
from src.domain.errors import LedgerErrorCode
from src.domain.ledger import apply_return
from src.domain.sale import ItemCondition, LineItem, PaymentStatus, ReturnRequest, Sale


@pytest.fixture
def sale():
    """3 x 500 at cost 300, paid in full"""
    return Sale(
        id=21,
        items=[LineItem(product_id=1, quantity=3, unit_price=50000, buying_price=30000)],
        paid_amount=150000,
    )


class TestApplyReturn:
    """Test return processing"""

    def test_damaged_return_is_written_off(self, sale):
        """
        Given: 3 units sold at 500, paid 1500
        When: 1 unit returned damaged
        Then: No restock, one write-off, totals drop by 500 and the sale is overpaid
        """
        request = ReturnRequest(product_id=1, return_quantity=1, reason="cracked", condition=ItemCondition.DAMAGED)

        result = apply_return(sale, [request])

        assert result.is_ok()
        outcome = result.value
        assert outcome.stock_adjustments == []
        assert len(outcome.write_offs) == 1
        assert outcome.write_offs[0].quantity == 1
        assert outcome.write_offs[0].reason == "cracked"
        assert outcome.sale.items[0].quantity == 2
        assert outcome.sale.total_amount == 100000
        assert outcome.sale.profit == 40000
        assert outcome.returned_amount == 50000
        assert outcome.sale.paid_amount == 150000
        assert outcome.sale.payment_status == PaymentStatus.OVERPAID

    def test_good_return_restocks(self, sale):
        result = apply_return(sale, [ReturnRequest(product_id=1, return_quantity=2)])

        outcome = result.value
        assert [(a.product_id, a.delta) for a in outcome.stock_adjustments] == [(1, 2)]
        assert outcome.write_offs == []

    def test_restock_damaged_policy(self, sale):
        request = ReturnRequest(product_id=1, return_quantity=1, condition=ItemCondition.DAMAGED)

        outcome = apply_return(sale, [request], restock_damaged=True).value

        assert [(a.product_id, a.delta) for a in outcome.stock_adjustments] == [(1, 1)]
        assert outcome.write_offs == []

    def test_full_return_removes_line(self, sale):
        outcome = apply_return(sale, [ReturnRequest(product_id=1, return_quantity=3)]).value

        assert outcome.sale.items == []
        assert outcome.sale.total_amount == 0
        assert outcome.returned_amount == 150000

    def test_excessive_return_rejected(self, sale):
        result = apply_return(sale, [ReturnRequest(product_id=1, return_quantity=4)])

        assert result.is_err()
        assert result.error.code == LedgerErrorCode.EXCESSIVE_RETURN_QUANTITY.value

    def test_excessive_across_requests(self, sale):
        requests = [
            ReturnRequest(product_id=1, return_quantity=2),
            ReturnRequest(product_id=1, return_quantity=2, condition=ItemCondition.DAMAGED),
        ]

        result = apply_return(sale, requests)

        assert result.is_err()
        assert result.error.code == LedgerErrorCode.EXCESSIVE_RETURN_QUANTITY.value

    def test_mixed_conditions_for_same_product(self, sale):
        requests = [
            ReturnRequest(product_id=1, return_quantity=1),
            ReturnRequest(product_id=1, return_quantity=1, condition=ItemCondition.DAMAGED),
        ]

        outcome = apply_return(sale, requests).value

        assert [(a.product_id, a.delta) for a in outcome.stock_adjustments] == [(1, 1)]
        assert len(outcome.write_offs) == 1
        assert outcome.sale.items[0].quantity == 1

    def test_unknown_product_rejected(self, sale):
        result = apply_return(sale, [ReturnRequest(product_id=9, return_quantity=1)])

        assert result.is_err()
        assert result.error.code == LedgerErrorCode.LINE_NOT_FOUND.value

    def test_negative_quantity_rejected(self, sale):
        result = apply_return(sale, [ReturnRequest(product_id=1, return_quantity=-1)])

        assert result.is_err()
        assert result.error.code == LedgerErrorCode.INVALID_QUANTITY.value

    def test_zero_quantity_is_ignored(self, sale):
        outcome = apply_return(sale, [ReturnRequest(product_id=1, return_quantity=0)]).value

        assert outcome.sale.items == sale.items
        assert outcome.returned_amount == 0

    def test_discount_prorated_on_partial_return(self):
        sale = Sale(
            items=[LineItem(product_id=1, quantity=3, unit_price=50000, buying_price=30000, discount_amount=10000)],
            paid_amount=140000,
        )

        outcome = apply_return(sale, [ReturnRequest(product_id=1, return_quantity=1)]).value

        line = outcome.sale.items[0]
        assert line.discount_amount == 6666
        assert line.discount_amount <= line.margin_cap
        assert outcome.sale.total_amount == 100000 - 6666

    def test_duplicate_lines_drain_in_order(self):
        sale = Sale(
            items=[
                LineItem(product_id=1, quantity=2, unit_price=50000, buying_price=30000),
                LineItem(product_id=1, quantity=2, unit_price=45000, buying_price=30000),
            ],
        )

        outcome = apply_return(sale, [ReturnRequest(product_id=1, return_quantity=3)]).value

        assert len(outcome.sale.items) == 1
        assert outcome.sale.items[0].quantity == 1
        assert outcome.sale.items[0].unit_price == 45000
