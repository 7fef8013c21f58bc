"""Budget materialization and immutable ledger edits"""

import uuid
from dataclasses import fields, replace
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from gaston_budget.domain.exceptions import DocumentNotFoundError, InvalidInputError, UnknownCategoryError
from gaston_budget.domain.models import (
    DEBT_PAYMENT_CATEGORY,
    GOAL_CONTRIBUTION_CATEGORY,
    BudgetExpense,
    BudgetIncome,
    Config,
    Expense,
    Income,
    MonthlyLedger,
    PayFrequency,
    Period,
)
from gaston_budget.utils.date_utils import day_in_month, period_for_day, to_year_month

# Namespace for ids of materialized entries, stable across runs
_BUDGET_NAMESPACE = uuid.UUID("6f1c2a4e-8d0b-4f55-9a51-2b7c0e3d9a10")

RESERVED_CATEGORIES = (DEBT_PAYMENT_CATEGORY, GOAL_CONTRIBUTION_CATEGORY)

PERIOD_TWO_FIRST_DAY = 16

# Entry fields an edit may change but never clear
_REQUIRED_FIELDS = ("description", "amount", "category", "paid")


def blank_ledger() -> MonthlyLedger:
    return MonthlyLedger(period1=Period(), period2=Period())


def new_entry_id() -> str:
    return str(uuid.uuid4())


def is_single_period(pay_frequency: PayFrequency) -> bool:
    """Monthly earners keep the whole month in period 1"""
    return pay_frequency == PayFrequency.MONTHLY


def period_for(pay_frequency: PayFrequency, on: Optional[date], default: int = 1) -> int:
    """Period an entry dated `on` belongs to under the entity's pay frequency"""
    if is_single_period(pay_frequency):
        return 1
    if on is None:
        return default
    return period_for_day(on.day)


def get_period(ledger: MonthlyLedger, number: int) -> Period:
    if number == 1:
        return ledger.period1
    if number == 2:
        return ledger.period2
    raise ValueError(f"Period must be 1 or 2, got {number}")


def with_period(ledger: MonthlyLedger, number: int, period: Period) -> MonthlyLedger:
    get_period(ledger, number)
    field_name = "period1" if number == 1 else "period2"
    return replace(ledger, **{field_name: period})


def validate_category(categories: Iterable[str], category: str) -> None:
    """Expense categories must be configured for the entity or reserved"""
    if category in RESERVED_CATEGORIES:
        return
    if category not in set(categories):
        raise UnknownCategoryError(f"Category {category!r} is not configured")


def _materialized_id(item_id: str, month_key: str, period: int) -> str:
    return str(uuid.uuid5(_BUDGET_NAMESPACE, f"{item_id}:{month_key}:{period}"))


def materialize_budget(
    config: Config,
    pay_frequency: PayFrequency,
    reference_date: date,
) -> MonthlyLedger:
    """
    Build a fresh month ledger from the recurring budget items.

    Requirements:
    - Monthly: every amount whole into period 1
    - Otherwise: every amount halved, one half per period
    - Expense dates follow the tentative payment day when it falls in the period
    - Never looks at existing ledger state; callers replace the month wholesale
    - Deterministic: entry ids derive from item id, month and period

    Example:
        Rent 1,000,000 on day 20, biweekly
        → period 1: 500,000 dated day 1, period 2: 500,000 dated day 20
    """
    month_key = to_year_month(reference_date)
    single = is_single_period(pay_frequency)

    p1_incomes: List[Income] = []
    p2_incomes: List[Income] = []
    p1_expenses: List[Expense] = []
    p2_expenses: List[Expense] = []

    for item in config.budget_incomes:
        amount = item.total_amount if single else item.total_amount / 2
        p1_incomes.append(
            Income(
                id=_materialized_id(item.id, month_key, 1),
                description=item.name,
                amount=amount,
                date=day_in_month(reference_date, 1),
            )
        )
        if not single:
            p2_incomes.append(
                Income(
                    id=_materialized_id(item.id, month_key, 2),
                    description=item.name,
                    amount=amount,
                    date=day_in_month(reference_date, PERIOD_TWO_FIRST_DAY),
                )
            )

    for item in config.budget_expenses:
        day = item.tentative_payment_day
        if single:
            p1_expenses.append(
                Expense(
                    id=_materialized_id(item.id, month_key, 1),
                    description=item.name,
                    amount=item.total_amount,
                    category=item.category,
                    date=day_in_month(reference_date, day or 1),
                )
            )
            continue

        half = item.total_amount / 2
        p1_day = day if day and period_for_day(day) == 1 else 1
        p2_day = day if day and period_for_day(day) == 2 else PERIOD_TWO_FIRST_DAY
        p1_expenses.append(
            Expense(
                id=_materialized_id(item.id, month_key, 1),
                description=item.name,
                amount=half,
                category=item.category,
                date=day_in_month(reference_date, p1_day),
            )
        )
        p2_expenses.append(
            Expense(
                id=_materialized_id(item.id, month_key, 2),
                description=item.name,
                amount=half,
                category=item.category,
                date=day_in_month(reference_date, p2_day),
            )
        )

    return MonthlyLedger(
        period1=Period(incomes=p1_incomes, expenses=p1_expenses),
        period2=Period(incomes=p2_incomes, expenses=p2_expenses),
    )


def add_income(
    ledger: MonthlyLedger,
    income: Income,
    pay_frequency: PayFrequency,
    period: int = 1,
) -> MonthlyLedger:
    """Append an income; dated entries are routed by day, undated ones go to `period`"""
    number = period_for(pay_frequency, income.date, default=period)
    target = get_period(ledger, number)
    return with_period(ledger, number, replace(target, incomes=[*target.incomes, income]))


def add_expense(
    ledger: MonthlyLedger,
    expense: Expense,
    config: Config,
    period: int = 1,
) -> MonthlyLedger:
    """Append an expense after checking its category against the entity's set"""
    validate_category(config.categories, expense.category)
    number = period_for(config.pay_frequency, expense.date, default=period)
    target = get_period(ledger, number)
    return with_period(ledger, number, replace(target, expenses=[*target.expenses, expense]))


def add_budget_item(
    ledger: MonthlyLedger,
    item: Union[BudgetIncome, BudgetExpense],
    split: bool,
    period: int,
    on: Optional[date] = None,
) -> MonthlyLedger:
    """
    Add a single recurring item to an existing month.

    split=True puts half of the amount in each period; otherwise the whole
    amount goes to `period`.
    """
    amount = item.total_amount / 2 if split else item.total_amount
    targets = [1, 2] if split else [period]

    for number in targets:
        target = get_period(ledger, number)
        if isinstance(item, BudgetExpense):
            entry = Expense(
                id=new_entry_id(),
                description=item.name,
                amount=amount,
                category=item.category,
                date=on,
            )
            target = replace(target, expenses=[*target.expenses, entry])
        else:
            entry = Income(id=new_entry_id(), description=item.name, amount=amount, date=on)
            target = replace(target, incomes=[*target.incomes, entry])
        ledger = with_period(ledger, number, target)

    return ledger


def find_entry(ledger: MonthlyLedger, entry_id: str) -> Tuple[int, Union[Income, Expense]]:
    """Period number and entry for `entry_id`, searching incomes then expenses"""
    for number in (1, 2):
        target = get_period(ledger, number)
        for entry in [*target.incomes, *target.expenses]:
            if entry.id == entry_id:
                return number, entry

    raise DocumentNotFoundError(f"Entry {entry_id} not found")


def update_entry(
    ledger: MonthlyLedger,
    entry_id: str,
    changes: Dict[str, Any],
    config: Config,
) -> MonthlyLedger:
    """
    Edit an income or expense in place.

    Any field except `id` can change. A new category is checked against the
    entity's set, and a new date that crosses day 15 moves the entry to the
    other period (it keeps its position otherwise).

    Raises:
        DocumentNotFoundError: no entry with that id
        InvalidInputError: unknown field, `id`, or a required field set to None
        UnknownCategoryError: category not configured
    """
    number, entry = find_entry(ledger, entry_id)

    editable = {f.name for f in fields(entry)} - {"id"}
    unknown = set(changes) - editable
    if unknown:
        raise InvalidInputError(f"Cannot change {', '.join(sorted(unknown))} on {type(entry).__name__}")
    for name in _REQUIRED_FIELDS:
        if name in changes and changes[name] is None:
            raise InvalidInputError(f"{name} cannot be empty")

    if "category" in changes:
        validate_category(config.categories, changes["category"])

    updated = replace(entry, **changes)
    new_number = period_for(config.pay_frequency, updated.date, default=number)
    kind = "incomes" if isinstance(entry, Income) else "expenses"

    source = get_period(ledger, number)
    if new_number == number:
        entries = [updated if e.id == entry_id else e for e in getattr(source, kind)]
        return with_period(ledger, number, replace(source, **{kind: entries}))

    source = replace(source, **{kind: [e for e in getattr(source, kind) if e.id != entry_id]})
    ledger = with_period(ledger, number, source)
    target = get_period(ledger, new_number)
    return with_period(ledger, new_number, replace(target, **{kind: [*getattr(target, kind), updated]}))


def set_expense_paid(ledger: MonthlyLedger, entry_id: str, paid: bool) -> MonthlyLedger:
    for number in (1, 2):
        target = get_period(ledger, number)
        if any(e.id == entry_id for e in target.expenses):
            expenses = [replace(e, paid=paid) if e.id == entry_id else e for e in target.expenses]
            return with_period(ledger, number, replace(target, expenses=expenses))

    raise DocumentNotFoundError(f"Expense {entry_id} not found")


def remove_entry(ledger: MonthlyLedger, entry_id: str) -> MonthlyLedger:
    """Delete an income or expense by id. Linked debts and goals are left untouched"""
    for number in (1, 2):
        target = get_period(ledger, number)
        incomes = [i for i in target.incomes if i.id != entry_id]
        expenses = [e for e in target.expenses if e.id != entry_id]
        if len(incomes) != len(target.incomes) or len(expenses) != len(target.expenses):
            return with_period(ledger, number, replace(target, incomes=incomes, expenses=expenses))

    raise DocumentNotFoundError(f"Entry {entry_id} not found")


def set_savings(ledger: MonthlyLedger, period: int, amount: Decimal) -> MonthlyLedger:
    target = get_period(ledger, period)
    return with_period(ledger, period, replace(target, savings_set_aside=amount))


def clear_period(ledger: MonthlyLedger, period: int) -> MonthlyLedger:
    return with_period(ledger, period, Period())


def _fresh_copy(period: Period, savings: Decimal) -> Period:
    return Period(
        incomes=[replace(i, id=new_entry_id()) for i in period.incomes],
        expenses=[replace(e, id=new_entry_id(), paid=False) for e in period.expenses],
        savings_set_aside=savings,
    )


def copy_period_one_to_two(ledger: MonthlyLedger) -> MonthlyLedger:
    """Overwrite period 2 with period 1's entries (new ids, expenses unpaid)"""
    copied = _fresh_copy(ledger.period1, ledger.period2.savings_set_aside)
    return with_period(ledger, 2, copied)


def copy_month_template(ledger: MonthlyLedger) -> MonthlyLedger:
    """Template of a month for reuse in other months: new ids, nothing paid"""
    return MonthlyLedger(
        period1=_fresh_copy(ledger.period1, ledger.period1.savings_set_aside),
        period2=_fresh_copy(ledger.period2, ledger.period2.savings_set_aside),
    )
