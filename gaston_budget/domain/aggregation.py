"""Period and month aggregation - totals shown on the ledger and dashboard views"""

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from gaston_budget.domain.exceptions import InvalidInputError
from gaston_budget.domain.models import (
    DEBT_PAYMENT_CATEGORY,
    FALLBACK_CATEGORY,
    Config,
    EntityOverview,
    Expense,
    MonthlyLedger,
    MonthSummary,
    MonthTrend,
    Period,
    PeriodSummary,
)
from gaston_budget.utils.date_utils import parse_year_month, sort_year_months

ZERO = Decimal("0")

TIME_FILTERS = ("6m", "year", "last_year", "all")


def _total(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)


def aggregate_period(period: Period) -> PeriodSummary:
    """
    Reduce a half-month period to its cash-flow totals.

    Requirements:
    - Unpaid expenses are excluded: "available" reflects realized cash flow
    - Empty lists yield zero sums
    """
    total_income = _total(i.amount for i in period.incomes)
    total_paid = _total(e.amount for e in period.expenses if e.paid)

    return PeriodSummary(
        total_income=total_income,
        total_paid_expenses=total_paid,
        available=total_income - total_paid,
    )


def aggregate_month(ledger: MonthlyLedger) -> MonthSummary:
    """
    Roll both periods of a month into the monthly summary.

    pending_debt = all expenses - paid expenses
    final_total = income - paid expenses - savings set aside
    """
    periods = (ledger.period1, ledger.period2)
    summaries = [aggregate_period(p) for p in periods]

    total_income = _total(s.total_income for s in summaries)
    total_paid = _total(s.total_paid_expenses for s in summaries)
    total_expenses = _total(e.amount for p in periods for e in p.expenses)
    savings = _total(p.savings_set_aside for p in periods)

    return MonthSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        total_paid_expenses=total_paid,
        pending_debt=total_expenses - total_paid,
        total_savings_set_aside=savings,
        final_total=total_income - total_paid - savings,
    )


def _all_expenses(ledger: MonthlyLedger) -> List[Expense]:
    return [*ledger.period1.expenses, *ledger.period2.expenses]


def category_totals(ledger: MonthlyLedger, limit: int = 6) -> List[Tuple[str, Decimal]]:
    """Expense totals per category, largest first, truncated to `limit`"""
    totals: Dict[str, Decimal] = {}
    for expense in _all_expenses(ledger):
        category = expense.category or FALLBACK_CATEGORY
        totals[category] = totals.get(category, ZERO) + expense.amount

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return ranked[:limit]


def month_trend(ledger: MonthlyLedger) -> MonthTrend:
    expenses = _all_expenses(ledger)
    return MonthTrend(
        income=_total(i.amount for p in (ledger.period1, ledger.period2) for i in p.incomes),
        expenses=_total(e.amount for e in expenses),
        savings=ledger.period1.savings_set_aside + ledger.period2.savings_set_aside,
        debt_paid=_total(e.amount for e in expenses if e.category == DEBT_PAYMENT_CATEGORY),
    )


def planned_totals(config: Config) -> Tuple[Decimal, Decimal]:
    """Planned (budgeted) monthly income and expenses from the recurring items"""
    return (
        _total(b.total_amount for b in config.budget_incomes),
        _total(b.total_amount for b in config.budget_expenses),
    )


def entity_overview(config: Config) -> EntityOverview:
    return EntityOverview(
        total_debt_remaining=_total(d.remaining for d in config.debts),
        total_saved=_total(g.current_amount for g in config.financial_goals),
    )


def daily_allowance(ledger: MonthlyLedger, days: int = 30) -> Decimal:
    """Budgeted surplus of the month spread over `days` days"""
    if days <= 0:
        return ZERO
    trend = month_trend(ledger)
    return (trend.income - trend.expenses) / days


def filter_months(keys: Iterable[str], time_filter: str, today: date) -> List[str]:
    """
    Select the YYYY-MM keys shown for a dashboard time filter.

    - 6m: the six most recent keys
    - year: keys from January of the current year onwards
    - last_year: keys in the previous calendar year
    - all: every key
    """
    if time_filter not in TIME_FILTERS:
        raise InvalidInputError(f"Unknown time filter: {time_filter!r}")

    ordered = sort_year_months(list(keys))
    if time_filter == "6m":
        return ordered[-6:]
    if time_filter == "year":
        return [k for k in ordered if parse_year_month(k).year >= today.year]
    if time_filter == "last_year":
        return [k for k in ordered if parse_year_month(k).year == today.year - 1]
    return ordered
