"""Unit tests for goals, projects and trip groups"""

import pytest
from datetime import date
from decimal import Decimal
from gaston_budget.domain.exceptions import InvalidInputError
from gaston_budget.domain.goals import add_funds, goal_progress, project_summary, trip_group_summary
from gaston_budget.domain.models import (
    ExpenseGroup,
    FinancialGoal,
    Participant,
    Project,
    ProjectExpense,
)


@pytest.fixture
def goal() -> FinancialGoal:
    return FinancialGoal(id="g1", name="Viaje", target_amount=Decimal("500000"), current_amount=Decimal("100000"))


def test_add_funds_updates_amount_and_log(goal: FinancialGoal):
    """Test contribution raises current amount and is logged newest first"""
    funded = add_funds(goal, Decimal("50000"), date(2024, 3, 1), note="Prima")
    funded = add_funds(funded, Decimal("25000"), date(2024, 4, 1))

    assert funded.current_amount == Decimal("175000")
    assert [e.amount for e in funded.log] == [Decimal("25000"), Decimal("50000")]
    assert funded.log[1].note == "Prima"
    # Original is untouched
    assert goal.current_amount == Decimal("100000")
    assert goal.log == []


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-10")])
def test_add_funds_rejects_non_positive(goal: FinancialGoal, amount: Decimal):
    with pytest.raises(InvalidInputError):
        add_funds(goal, amount, date(2024, 3, 1))


def test_goal_progress(goal: FinancialGoal):
    assert goal_progress(goal) == Decimal("20")


def test_goal_progress_capped_at_100(goal: FinancialGoal):
    funded = add_funds(goal, Decimal("900000"), date(2024, 3, 1))

    assert goal_progress(funded) == Decimal("100")


def test_goal_progress_without_target():
    goal = FinancialGoal(id="g", name="Libre", target_amount=Decimal("0"), current_amount=Decimal("10"))

    assert goal_progress(goal) == 0


def test_project_summary():
    project = Project(
        id="p1",
        name="Remodelacion",
        contribution=Decimal("1000000"),
        expenses=[
            ProjectExpense(id="x1", description="Pintura", amount=Decimal("300000")),
            ProjectExpense(id="x2", description="Piso", amount=Decimal("900000")),
        ],
    )

    summary = project_summary(project)

    assert summary.total_spent == Decimal("1200000")
    assert summary.balance == Decimal("-200000")


def test_trip_group_summary():
    """Test paid and unpaid shares are totalled separately"""
    group = ExpenseGroup(
        id="t1",
        name="Cabana",
        participants=[
            Participant(id="a", name="Ana", amount=Decimal("200000"), paid=True),
            Participant(id="b", name="Luis", amount=Decimal("200000")),
            Participant(id="c", name="Sofi", amount=Decimal("150000"), paid=True),
        ],
    )

    summary = trip_group_summary(group)

    assert summary.paid_total == Decimal("350000")
    assert summary.unpaid_total == Decimal("200000")
    assert summary.total == Decimal("550000")


def test_trip_group_summary_empty():
    summary = trip_group_summary(ExpenseGroup(id="t", name="Vacio"))

    assert summary.total == 0
