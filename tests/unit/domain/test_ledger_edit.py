"""Unit tests for editing a processed sale"""

import pytest
from src.domain.errors import LedgerErrorCode
from src.domain.ledger import apply_edit
from src.domain.sale import LineItem, PaymentStatus, Sale


def _line(product_id, quantity, unit_price=10000, buying_price=6000, discount_amount=0):
    return LineItem(
        product_id=product_id,
        quantity=quantity,
        unit_price=unit_price,
        buying_price=buying_price,
        discount_amount=discount_amount,
    )


@pytest.fixture
def original_sale():
    """Sale of 5 x product 1 and 2 x product 2, fully paid"""
    return Sale(id=7, items=[_line(1, 5), _line(2, 2, unit_price=25000, buying_price=20000)], paid_amount=100000)


def _deltas(outcome):
    return {a.product_id: a.delta for a in outcome.stock_adjustments}


class TestApplyEdit:
    """Test stock reconciliation for sale edits"""

    def test_reducing_quantity_returns_stock(self, original_sale):
        result = apply_edit(original_sale, [_line(1, 3), _line(2, 2, 25000, 20000)], None, {1: 0, 2: 0})

        assert result.is_ok()
        assert _deltas(result.value) == {1: 2}

    def test_increasing_quantity_consumes_stock(self, original_sale):
        result = apply_edit(original_sale, [_line(1, 8), _line(2, 2, 25000, 20000)], None, {1: 3, 2: 0})

        assert result.is_ok()
        assert _deltas(result.value) == {1: -3}

    def test_growth_limited_to_stock_plus_held(self, original_sale):
        """
        Given: Sale holds 5 units, 3 remain on the shelf
        When: Line is edited to 9 units
        Then: INSUFFICIENT_STOCK (at most 8)
        """
        result = apply_edit(original_sale, [_line(1, 9), _line(2, 2, 25000, 20000)], None, {1: 3, 2: 0})

        assert result.is_err()
        assert result.error.code == LedgerErrorCode.INSUFFICIENT_STOCK.value
        assert "Only 8" in result.error.message

    def test_removed_line_restocks_full_quantity(self, original_sale):
        result = apply_edit(original_sale, [_line(1, 5)], None, {})

        assert _deltas(result.value) == {2: 2}
        assert [item.product_id for item in result.value.sale.items] == [1]

    def test_zero_quantity_line_counts_as_removed(self, original_sale):
        result = apply_edit(original_sale, [_line(1, 5), _line(2, 0, 25000, 20000)], None, {})

        assert _deltas(result.value) == {2: 2}
        assert [item.product_id for item in result.value.sale.items] == [1]

    def test_added_product_consumes_stock(self, original_sale):
        edited = list(original_sale.items) + [_line(3, 4)]

        result = apply_edit(original_sale, edited, None, {3: 4})

        assert _deltas(result.value) == {3: -4}

    def test_added_product_without_stock_rejected(self, original_sale):
        edited = list(original_sale.items) + [_line(3, 1)]

        result = apply_edit(original_sale, edited, None, {})

        assert result.is_err()
        assert result.error.code == LedgerErrorCode.INSUFFICIENT_STOCK.value

    def test_unchanged_sale_has_no_adjustments(self, original_sale):
        result = apply_edit(original_sale, original_sale.items, None, {})

        assert result.value.stock_adjustments == []
        assert result.value.sale.total_amount == original_sale.total_amount

    def test_quantity_is_conserved(self, original_sale):
        """original - delta == edited for every product touched"""
        edited = [_line(1, 1), _line(3, 2)]

        outcome = apply_edit(original_sale, edited, None, {1: 0, 3: 10}).value

        deltas = _deltas(outcome)
        original = {1: 5, 2: 2}
        final = {1: 1, 3: 2}
        for product_id in set(original) | set(final):
            assert original.get(product_id, 0) - deltas.get(product_id, 0) == final.get(product_id, 0)

    def test_split_lines_are_summed_per_product(self, original_sale):
        edited = [_line(1, 2), _line(1, 3), _line(2, 2, 25000, 20000)]

        result = apply_edit(original_sale, edited, None, {})

        assert result.value.stock_adjustments == []

    def test_totals_and_status_rederived(self, original_sale):
        """Dropping product 2 leaves the sale overpaid by 500"""
        outcome = apply_edit(original_sale, [_line(1, 5)], None, {}).value

        assert outcome.sale.total_amount == 50000
        assert outcome.sale.profit == 20000
        assert outcome.sale.balance == -50000
        assert outcome.sale.payment_status == PaymentStatus.OVERPAID

    def test_new_paid_amount_replaces_paid(self, original_sale):
        outcome = apply_edit(original_sale, original_sale.items, 40000, {}).value

        assert outcome.sale.paid_amount == 40000
        assert outcome.sale.payment_status == PaymentStatus.PARTIAL

    def test_paid_amount_kept_when_not_given(self, original_sale):
        outcome = apply_edit(original_sale, original_sale.items, None, {}).value

        assert outcome.sale.paid_amount == 100000
        assert outcome.sale.id == 7

    def test_negative_paid_amount_rejected(self, original_sale):
        result = apply_edit(original_sale, original_sale.items, -1, {})

        assert result.is_err()
        assert result.error.code == LedgerErrorCode.INVALID_PAYMENT_AMOUNT.value

    def test_original_sale_unchanged(self, original_sale):
        apply_edit(original_sale, [_line(1, 1)], 0, {})

        assert len(original_sale.items) == 2
        assert original_sale.paid_amount == 100000

    def test_edited_discount_clamped_to_margin(self, original_sale):
        """
        Given: 5 units at 100 with cost 60 (margin 200)
        When: The edit asks for a 300 discount
        Then: Discount is cut to 200 and the line makes no loss
        """
        edited = [_line(1, 5, discount_amount=30000), _line(2, 2, 25000, 20000)]

        outcome = apply_edit(original_sale, edited, None, {1: 0, 2: 0}).value

        line = outcome.sale.find_line(1)
        assert line.discount_amount == 20000
        assert line.line_total == 30000
        assert line.line_profit == 0

    def test_edited_discount_on_line_below_cost_dropped(self, original_sale):
        edited = [_line(1, 5, unit_price=5000, discount_amount=1000), _line(2, 2, 25000, 20000)]

        outcome = apply_edit(original_sale, edited, None, {1: 0, 2: 0}).value

        assert outcome.sale.find_line(1).discount_amount == 0
