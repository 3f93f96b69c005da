"""Tests for sign convention and money arithmetic."""

from decimal import Decimal

import pytest

from bookkeep.domain.entities import TransactionType
from bookkeep.domain.normalization import (
    aggregate_lines,
    amounts_equal,
    balance_invariant_violations,
    calculate_line_amounts,
    normalize_amount,
    normalized_execution_amount,
    remaining_balance,
    signed_amount,
    to_money,
)


class TestSignConvention:
    """Storage and direction signs."""

    def test_expense_amounts_are_stored_negated(self):
        assert normalize_amount(TransactionType.EXPENSE, "300") == Decimal("-300")
        assert normalize_amount(TransactionType.EXPENSE, Decimal("-300")) == Decimal("-300")

    @pytest.mark.parametrize(
        "txn_type",
        [TransactionType.SALE, TransactionType.INCOME, TransactionType.PURCHASE],
    )
    def test_other_types_store_magnitudes(self, txn_type):
        assert normalize_amount(txn_type, "-45.5") == Decimal("45.5")

    def test_signed_amount_follows_money_direction(self):
        assert signed_amount(TransactionType.INCOMING_PAYMENT, 500) == Decimal("500")
        assert signed_amount(TransactionType.OUTGOING_PAYMENT, 500) == Decimal("-500")
        assert signed_amount(TransactionType.EXPENSE, Decimal("-300")) == Decimal("-300")
        assert signed_amount(TransactionType.SALE, 100) == Decimal("100")

    def test_execution_amount_uses_absolute_value_for_expense_concepts(self):
        assert normalized_execution_amount(Decimal("-300"), is_expense_concept=True) == Decimal("300")
        assert normalized_execution_amount(Decimal("-300"), is_expense_concept=False) == Decimal("-300")


class TestLineAmounts:
    """Line and aggregate computations."""

    def test_line_with_tax_and_discount(self):
        line = calculate_line_amounts(
            quantity=2, price="50", tax_percentage="16", discount_percentage="10"
        )
        assert line.net == Decimal("100.00")
        assert line.tax == Decimal("16.00")
        assert line.discount == Decimal("10.00")
        assert line.total == Decimal("106.00")

    def test_line_rounds_to_cents(self):
        line = calculate_line_amounts(quantity=3, price="0.333", tax_percentage="16")
        assert line.net == Decimal("1.00")
        assert line.total == Decimal("1.16")

    def test_aggregate_sums_every_field(self):
        totals = aggregate_lines(
            [
                calculate_line_amounts(1, "100", additional_charges="5"),
                calculate_line_amounts(2, "10", tax_percentage="16"),
            ]
        )
        assert totals.net == Decimal("120.00")
        assert totals.tax == Decimal("3.20")
        assert totals.additional_charges == Decimal("5.00")
        assert totals.total == Decimal("128.20")


class TestBalanceInvariant:
    """Consistency of total, payments and balance."""

    def test_settled_and_credit_rows_are_consistent(self):
        assert balance_invariant_violations(100, 100, 0) == []
        assert balance_invariant_violations(100, 0, 100) == []
        assert balance_invariant_violations(100, 60, 40) == []
        assert balance_invariant_violations(Decimal("-300"), Decimal("-300"), 0) == []

    def test_rounding_epsilon_is_tolerated(self):
        assert balance_invariant_violations(Decimal("100"), Decimal("59.995"), Decimal("40")) == []

    def test_balance_above_total_is_reported(self):
        reasons = balance_invariant_violations(100, -20, 120)
        assert "balance exceeds total" in reasons

    def test_negative_balance_is_reported(self):
        reasons = balance_invariant_violations(100, 110, -10)
        assert "balance is negative" in reasons

    def test_mismatched_sum_is_reported(self):
        assert balance_invariant_violations(100, 50, 40) == [
            "payments + balance does not equal total"
        ]

    def test_remaining_balance_floors_at_zero(self):
        assert remaining_balance(100, 60) == Decimal("40")
        assert remaining_balance(100, 120) == Decimal("0")

    def test_helpers(self):
        assert to_money("10.005") == Decimal("10.01")
        assert amounts_equal("10.00", "10.01")
        assert not amounts_equal("10.00", "10.02")
