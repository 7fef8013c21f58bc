"""Unit tests for entity config templates and edits"""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal
from gaston_budget.domain.entity_config import (
    BUSINESS_CATEGORIES,
    HOUSEHOLD_CATEGORIES,
    add_category,
    apply_debt_payment,
    find_debt,
    find_goal,
    keep_goal_balances,
    remove_category,
    replace_goal,
    template_config,
    validate_config,
)
from gaston_budget.domain.exceptions import DocumentNotFoundError, InvalidInputError, UnknownCategoryError
from gaston_budget.domain.models import (
    BudgetExpense,
    Config,
    EmploymentType,
    EntityKind,
    FinancialGoal,
    GoalLogEntry,
    PayFrequency,
)


def test_household_template():
    config = template_config(EntityKind.HOUSEHOLD)

    assert config.categories == HOUSEHOLD_CATEGORIES
    assert config.pay_frequency == PayFrequency.MONTHLY
    assert config.debts == []


def test_business_template():
    config = template_config(EntityKind.BUSINESS, currency="USD")

    assert config.categories == BUSINESS_CATEGORIES
    assert config.employment_type == EmploymentType.BUSINESS
    assert config.currency == "USD"


def test_template_categories_are_copies():
    """Test editing one entity's categories never touches the template"""
    config = template_config(EntityKind.HOUSEHOLD)
    config.categories.append("mascotas")

    assert "mascotas" not in HOUSEHOLD_CATEGORIES


def test_add_category_normalizes_name(sample_config: Config):
    config = add_category(sample_config, "  Cuidado Personal ")

    assert config.categories[-1] == "cuidado_personal"
    assert "cuidado_personal" not in sample_config.categories


def test_add_duplicate_category_is_noop(sample_config: Config):
    assert add_category(sample_config, "Vivienda") is sample_config


def test_add_empty_category(sample_config: Config):
    with pytest.raises(InvalidInputError):
        add_category(sample_config, "   ")


def test_remove_category(sample_config: Config):
    config = remove_category(sample_config, "servicios")

    assert "servicios" not in config.categories


def test_remove_reserved_or_missing_category(sample_config: Config):
    with pytest.raises(InvalidInputError):
        remove_category(sample_config, "deudas")
    with pytest.raises(DocumentNotFoundError):
        remove_category(sample_config, "viajes")


def test_find_debt(sample_config: Config):
    assert find_debt(sample_config, "d1").name == "Tarjeta"
    with pytest.raises(DocumentNotFoundError):
        find_debt(sample_config, "missing")


def test_find_and_replace_goal(sample_config: Config):
    goal = find_goal(sample_config, "g1")
    assert find_goal(sample_config, "missing") is None

    updated = replace_goal(sample_config, replace(goal, current_amount=Decimal("400000")))

    assert updated.financial_goals[0].current_amount == Decimal("400000")
    assert sample_config.financial_goals[0].current_amount == Decimal("100000")


def test_apply_debt_payment(sample_config: Config):
    """Test paying and then undoing a payment on a linked debt"""
    paid = apply_debt_payment(sample_config, "d1", Decimal("100000"))
    assert paid.debts[0].paid_amount == Decimal("400000")
    assert paid.debts[0].remaining == Decimal("800000")

    undone = apply_debt_payment(paid, "d1", Decimal("-100000"))
    assert undone.debts[0].paid_amount == Decimal("300000")
    assert sample_config.debts[0].paid_amount == Decimal("300000")


def test_apply_debt_payment_never_negative(sample_config: Config):
    updated = apply_debt_payment(sample_config, "d1", Decimal("-500000"))
    assert updated.debts[0].paid_amount == 0


def test_apply_debt_payment_ignores_dangling_link(sample_config: Config):
    assert apply_debt_payment(sample_config, "gone", Decimal("100000")) is sample_config


def test_validate_config_budget_categories(sample_config: Config):
    validate_config(sample_config)

    bad = replace(
        sample_config,
        budget_expenses=[BudgetExpense(id="x", name="Casino", total_amount=Decimal("1000"), category="apuestas")],
    )
    with pytest.raises(UnknownCategoryError):
        validate_config(bad)

    reserved = replace(
        sample_config,
        budget_expenses=[BudgetExpense(id="y", name="Cuota", total_amount=Decimal("1000"), category="deudas")],
    )
    validate_config(reserved)


def test_keep_goal_balances(sample_config: Config):
    """Test existing goals keep balance and log, edits to name and target apply"""
    log = [GoalLogEntry(id="l1", date=date(2024, 3, 2), amount=Decimal("50000"))]
    stored = replace(
        sample_config,
        financial_goals=[replace(sample_config.financial_goals[0], current_amount=Decimal("150000"), log=log)],
    )
    incoming = replace(
        sample_config,
        financial_goals=[
            FinancialGoal(id="g1", name="Viaje a Cartagena", target_amount=Decimal("800000")),
            FinancialGoal(id="g2", name="Carro", target_amount=Decimal("9000000"), current_amount=Decimal("10")),
        ],
    )

    merged = keep_goal_balances(stored, incoming)

    trip, car = merged.financial_goals
    assert trip.name == "Viaje a Cartagena"
    assert trip.target_amount == Decimal("800000")
    assert trip.current_amount == Decimal("150000")
    assert trip.log == log
    assert car.current_amount == Decimal("10")
