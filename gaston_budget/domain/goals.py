"""Financial goals, projects and shared trip expenses"""

from dataclasses import replace
from datetime import date
from decimal import Decimal

from gaston_budget.domain.budget import new_entry_id
from gaston_budget.domain.exceptions import InvalidInputError
from gaston_budget.domain.models import (
    ExpenseGroup,
    FinancialGoal,
    GoalLogEntry,
    GroupSummary,
    Project,
    ProjectSummary,
)

ZERO = Decimal("0")


def add_funds(goal: FinancialGoal, amount: Decimal, on: date, note: str = "") -> FinancialGoal:
    """
    Record a contribution to a goal.

    The log is append-only with the newest entry first; current_amount is the
    running total kept next to it.

    Raises:
        InvalidInputError: amount is zero or negative
    """
    if amount <= 0:
        raise InvalidInputError(f"Contribution must be positive, got {amount}")

    entry = GoalLogEntry(id=new_entry_id(), date=on, amount=amount, note=note)
    return replace(
        goal,
        current_amount=goal.current_amount + amount,
        log=[entry, *goal.log],
    )


def goal_progress(goal: FinancialGoal) -> Decimal:
    """Percent of target reached, capped at 100"""
    if goal.target_amount <= 0:
        return ZERO
    return min(goal.current_amount / goal.target_amount * 100, Decimal("100"))


def project_summary(project: Project) -> ProjectSummary:
    spent = sum((e.amount for e in project.expenses), ZERO)
    return ProjectSummary(total_spent=spent, balance=project.contribution - spent)


def trip_group_summary(group: ExpenseGroup) -> GroupSummary:
    paid = sum((p.amount for p in group.participants if p.paid), ZERO)
    unpaid = sum((p.amount for p in group.participants if not p.paid), ZERO)
    return GroupSummary(paid_total=paid, unpaid_total=unpaid, total=paid + unpaid)
