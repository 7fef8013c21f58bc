"""Unit tests for period and month aggregation"""

import pytest
from datetime import date
from decimal import Decimal
from gaston_budget.domain.aggregation import (
    aggregate_month,
    aggregate_period,
    category_totals,
    daily_allowance,
    entity_overview,
    filter_months,
    month_trend,
    planned_totals,
)
from gaston_budget.domain.exceptions import InvalidInputError
from gaston_budget.domain.models import Expense, Income, MonthlyLedger, Period


def test_empty_period_is_all_zero():
    """Test empty lists yield zero sums"""
    summary = aggregate_period(Period())

    assert summary.total_income == 0
    assert summary.total_paid_expenses == 0
    assert summary.available == 0


def test_unpaid_expenses_excluded_from_available(sample_ledger: MonthlyLedger):
    """Test available reflects realized cash flow only"""
    summary = aggregate_period(sample_ledger.period1)

    assert summary.total_income == Decimal("1000000")
    assert summary.total_paid_expenses == Decimal("400000")  # Mercado is unpaid
    assert summary.available == summary.total_income - summary.total_paid_expenses


def test_aggregate_month(sample_ledger: MonthlyLedger):
    """Test monthly rollup of both periods"""
    summary = aggregate_month(sample_ledger)

    assert summary.total_income == Decimal("2000000")
    assert summary.total_expenses == Decimal("850000")
    assert summary.total_paid_expenses == Decimal("700000")
    assert summary.pending_debt == Decimal("150000")
    assert summary.total_savings_set_aside == Decimal("100000")
    # income - paid - savings
    assert summary.final_total == Decimal("1200000")


def test_aggregate_month_empty_ledger():
    summary = aggregate_month(MonthlyLedger())

    assert summary.final_total == 0
    assert summary.pending_debt == 0


def test_category_totals_sorted_and_limited(sample_ledger: MonthlyLedger):
    """Test categories ranked by total, largest first"""
    totals = category_totals(sample_ledger)

    assert totals[0] == ("vivienda", Decimal("400000"))
    assert ("alimentacion", Decimal("250000")) in totals
    assert len(category_totals(sample_ledger, limit=1)) == 1


def test_category_totals_uses_fallback_for_blank_category():
    ledger = MonthlyLedger(
        period1=Period(expenses=[Expense(id="x", description="?", amount=Decimal("10"), category="")])
    )

    assert category_totals(ledger) == [("otro", Decimal("10"))]


def test_month_trend_counts_debt_payments(sample_ledger: MonthlyLedger):
    """Test debt_paid sums the reserved debt category"""
    trend = month_trend(sample_ledger)

    assert trend.income == Decimal("2000000")
    assert trend.expenses == Decimal("850000")
    assert trend.savings == Decimal("100000")
    assert trend.debt_paid == Decimal("200000")


def test_planned_totals(sample_config):
    planned_income, planned_expenses = planned_totals(sample_config)

    assert planned_income == Decimal("2000000")
    assert planned_expenses == Decimal("1090000")


def test_entity_overview(sample_config):
    overview = entity_overview(sample_config)

    assert overview.total_debt_remaining == Decimal("900000")
    assert overview.total_saved == Decimal("100000")


def test_daily_allowance():
    """Test surplus of the month spread over 30 days"""
    ledger = MonthlyLedger(
        period1=Period(
            incomes=[Income(id="i", description="Salario", amount=Decimal("3000000"))],
            expenses=[Expense(id="e", description="Arriendo", amount=Decimal("1500000"), category="vivienda")],
        )
    )

    assert daily_allowance(ledger) == Decimal("50000")
    assert daily_allowance(ledger, days=0) == 0


KEYS = ["2023-11", "2024-01", "2023-12", "2024-02", "2024-03", "2024-04", "2024-05", "2024-06"]


def test_filter_months_six_most_recent():
    result = filter_months(KEYS, "6m", date(2024, 6, 10))

    assert result == ["2024-01", "2024-02", "2024-03", "2024-04", "2024-05", "2024-06"]


def test_filter_months_by_year():
    today = date(2024, 6, 10)

    assert filter_months(KEYS, "year", today)[0] == "2024-01"
    assert filter_months(KEYS, "last_year", today) == ["2023-11", "2023-12"]
    assert len(filter_months(KEYS, "all", today)) == len(KEYS)


def test_filter_months_unknown_filter():
    with pytest.raises(InvalidInputError):
        filter_months(KEYS, "decade", date(2024, 6, 10))
