"""Unit tests for budget materialization and ledger edits"""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal
from gaston_budget.domain.budget import (
    add_budget_item,
    add_expense,
    add_income,
    blank_ledger,
    clear_period,
    copy_month_template,
    copy_period_one_to_two,
    materialize_budget,
    remove_entry,
    set_expense_paid,
    set_savings,
    update_entry,
    validate_category,
)
from gaston_budget.domain.exceptions import DocumentNotFoundError, InvalidInputError, UnknownCategoryError
from gaston_budget.domain.models import BudgetExpense, Config, Expense, Income, MonthlyLedger, PayFrequency

MARCH = date(2024, 3, 1)


def test_materialize_biweekly_splits_in_half(sample_config: Config):
    """Test every amount is halved, one half per period"""
    ledger = materialize_budget(sample_config, PayFrequency.BIWEEKLY, MARCH)

    assert [i.amount for i in ledger.period1.incomes] == [Decimal("1000000")]
    assert [i.amount for i in ledger.period2.incomes] == [Decimal("1000000")]
    assert ledger.period1.incomes[0].date == date(2024, 3, 1)
    assert ledger.period2.incomes[0].date == date(2024, 3, 16)

    rent_p1, internet_p1 = ledger.period1.expenses
    rent_p2, internet_p2 = ledger.period2.expenses
    assert rent_p1.amount == rent_p2.amount == Decimal("500000")
    assert internet_p1.amount == internet_p2.amount == Decimal("45000")


def test_materialize_biweekly_dates_follow_payment_day(sample_config: Config):
    """Test tentative day is kept in the period it falls in"""
    ledger = materialize_budget(sample_config, PayFrequency.BIWEEKLY, MARCH)
    rent_p1, internet_p1 = ledger.period1.expenses
    rent_p2, internet_p2 = ledger.period2.expenses

    # Rent is due on the 20th: period 2 keeps the day, period 1 uses the 1st
    assert rent_p1.date == date(2024, 3, 1)
    assert rent_p2.date == date(2024, 3, 20)
    # Internet is due on the 5th: period 1 keeps it, period 2 starts on the 16th
    assert internet_p1.date == date(2024, 3, 5)
    assert internet_p2.date == date(2024, 3, 16)


def test_materialize_monthly_keeps_whole_amounts(sample_config: Config):
    """Test monthly earners get every item whole in period 1"""
    ledger = materialize_budget(sample_config, PayFrequency.MONTHLY, MARCH)

    assert [i.amount for i in ledger.period1.incomes] == [Decimal("2000000")]
    assert [e.amount for e in ledger.period1.expenses] == [Decimal("1000000"), Decimal("90000")]
    assert ledger.period1.expenses[0].date == date(2024, 3, 20)
    assert ledger.period2.incomes == []
    assert ledger.period2.expenses == []


def test_materialize_is_deterministic(sample_config: Config):
    """Test identical inputs produce identical ledgers"""
    first = materialize_budget(sample_config, PayFrequency.BIWEEKLY, MARCH)
    second = materialize_budget(sample_config, PayFrequency.BIWEEKLY, MARCH)

    assert first == second
    # Ids differ from one month to the next
    april = materialize_budget(sample_config, PayFrequency.BIWEEKLY, date(2024, 4, 1))
    assert april.period1.incomes[0].id != first.period1.incomes[0].id


def test_materialize_clamps_day_to_month_length():
    """Test a day-31 item falls on the last day of February"""
    insurance = BudgetExpense(id="x", name="Seguro", total_amount=Decimal("100"), tentative_payment_day=31)
    config = Config(budget_expenses=[insurance])
    ledger = materialize_budget(config, PayFrequency.MONTHLY, date(2024, 2, 1))

    assert ledger.period1.expenses[0].date == date(2024, 2, 29)


def test_materialize_weekly_routes_like_biweekly(sample_config: Config):
    weekly = materialize_budget(sample_config, PayFrequency.WEEKLY, MARCH)
    biweekly = materialize_budget(sample_config, PayFrequency.BIWEEKLY, MARCH)

    assert weekly == biweekly


def test_add_expense_routes_by_day(sample_config: Config):
    """Test dated entries land in the period their day belongs to"""
    late = Expense(id="e", description="Gas", amount=Decimal("50000"), category="servicios", date=date(2024, 3, 20))
    ledger = add_expense(blank_ledger(), late, sample_config)

    assert ledger.period1.expenses == []
    assert ledger.period2.expenses == [late]


def test_add_expense_monthly_always_period_one(sample_config: Config):
    config = replace(sample_config, pay_frequency=PayFrequency.MONTHLY)
    late = Expense(id="e", description="Gas", amount=Decimal("50000"), category="servicios", date=date(2024, 3, 20))

    ledger = add_expense(blank_ledger(), late, config, period=2)

    assert ledger.period1.expenses == [late]


def test_add_undated_income_uses_requested_period():
    income = Income(id="i", description="Bono", amount=Decimal("10"))

    ledger = add_income(blank_ledger(), income, PayFrequency.BIWEEKLY, period=2)

    assert ledger.period2.incomes == [income]


def test_add_expense_rejects_unknown_category(sample_config: Config):
    expense = Expense(id="e", description="Casino", amount=Decimal("1"), category="apuestas")

    with pytest.raises(UnknownCategoryError):
        add_expense(blank_ledger(), expense, sample_config)


def test_reserved_categories_always_accepted():
    """Test debt payments and goal contributions need no configuration"""
    validate_category([], "deudas")
    validate_category([], "abono_meta")


def test_add_budget_item_split(sample_config: Config):
    """Test split puts half in each period"""
    rent = sample_config.budget_expenses[0]

    ledger = add_budget_item(blank_ledger(), rent, split=True, period=1)

    assert ledger.period1.expenses[0].amount == Decimal("500000")
    assert ledger.period2.expenses[0].amount == Decimal("500000")
    assert ledger.period1.expenses[0].id != ledger.period2.expenses[0].id


def test_add_budget_item_whole(sample_config: Config):
    salary = sample_config.budget_incomes[0]

    ledger = add_budget_item(blank_ledger(), salary, split=False, period=2, on=date(2024, 3, 30))

    assert ledger.period1.incomes == []
    assert ledger.period2.incomes[0].amount == Decimal("2000000")
    assert ledger.period2.incomes[0].date == date(2024, 3, 30)


def test_set_expense_paid(sample_ledger: MonthlyLedger):
    ledger = set_expense_paid(sample_ledger, "e2", True)

    assert ledger.period1.expenses[1].paid is True
    # Original is untouched
    assert sample_ledger.period1.expenses[1].paid is False


def test_set_expense_paid_missing(sample_ledger: MonthlyLedger):
    with pytest.raises(DocumentNotFoundError):
        set_expense_paid(sample_ledger, "nope", True)


def test_update_entry_in_place(sample_ledger: MonthlyLedger, sample_config: Config):
    ledger = update_entry(
        sample_ledger, "e2", {"amount": Decimal("180000"), "description": "Mercado grande"}, sample_config
    )

    assert [e.id for e in ledger.period1.expenses] == ["e1", "e2"]
    edited = ledger.period1.expenses[1]
    assert edited.amount == Decimal("180000")
    assert edited.description == "Mercado grande"
    assert edited.category == "alimentacion"
    assert sample_ledger.period1.expenses[1].amount == Decimal("150000")


def test_update_entry_date_moves_period(sample_ledger: MonthlyLedger, sample_config: Config):
    """Test a new date after day 15 moves the entry to period 2"""
    ledger = update_entry(sample_ledger, "e2", {"date": date(2024, 3, 20)}, sample_config)

    assert [e.id for e in ledger.period1.expenses] == ["e1"]
    assert [e.id for e in ledger.period2.expenses] == ["e3", "e4", "e2"]

    back = update_entry(ledger, "i2", {"date": date(2024, 3, 3)}, sample_config)
    assert [i.id for i in back.period1.incomes] == ["i1", "i2"]
    assert back.period2.incomes == []


def test_update_entry_monthly_stays_in_period_one(sample_ledger: MonthlyLedger, sample_config: Config):
    monthly = replace(sample_config, pay_frequency=PayFrequency.MONTHLY)
    ledger = update_entry(sample_ledger, "e2", {"date": date(2024, 3, 28)}, monthly)
    assert [e.id for e in ledger.period1.expenses] == ["e1", "e2"]


def test_update_entry_rejections(sample_ledger: MonthlyLedger, sample_config: Config):
    with pytest.raises(UnknownCategoryError):
        update_entry(sample_ledger, "e2", {"category": "apuestas"}, sample_config)
    with pytest.raises(InvalidInputError):
        update_entry(sample_ledger, "e2", {"id": "other"}, sample_config)
    with pytest.raises(InvalidInputError):
        update_entry(sample_ledger, "i1", {"category": "vivienda"}, sample_config)
    with pytest.raises(InvalidInputError):
        update_entry(sample_ledger, "e2", {"amount": None}, sample_config)
    with pytest.raises(DocumentNotFoundError):
        update_entry(sample_ledger, "nope", {"amount": Decimal("1")}, sample_config)


def test_remove_entry(sample_ledger: MonthlyLedger):
    ledger = remove_entry(sample_ledger, "i2")
    ledger = remove_entry(ledger, "e1")

    assert ledger.period2.incomes == []
    assert [e.id for e in ledger.period1.expenses] == ["e2"]

    with pytest.raises(DocumentNotFoundError):
        remove_entry(ledger, "e1")


def test_set_savings_and_clear_period(sample_ledger: MonthlyLedger):
    ledger = set_savings(sample_ledger, 2, Decimal("50000"))
    assert ledger.period2.savings_set_aside == Decimal("50000")

    cleared = clear_period(ledger, 1)
    assert cleared.period1.incomes == []
    assert cleared.period1.savings_set_aside == 0
    assert cleared.period2 == ledger.period2


def test_invalid_period_number(sample_ledger: MonthlyLedger):
    with pytest.raises(ValueError):
        clear_period(sample_ledger, 3)


def test_copy_period_one_to_two(sample_ledger: MonthlyLedger):
    """Test period 2 gets fresh, unpaid copies of period 1"""
    ledger = copy_period_one_to_two(sample_ledger)

    assert [e.description for e in ledger.period2.expenses] == ["Arriendo", "Mercado"]
    assert all(not e.paid for e in ledger.period2.expenses)
    assert {e.id for e in ledger.period2.expenses}.isdisjoint({e.id for e in ledger.period1.expenses})
    assert ledger.period1 == sample_ledger.period1


def test_copy_month_template(sample_ledger: MonthlyLedger):
    template = copy_month_template(sample_ledger)

    assert len(template.period2.expenses) == 2
    assert all(not e.paid for p in (template.period1, template.period2) for e in p.expenses)
    assert template.period1.incomes[0].id != "i1"
    assert template.period1.savings_set_aside == Decimal("100000")
