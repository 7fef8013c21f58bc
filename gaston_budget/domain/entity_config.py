"""Entity configuration templates and immutable config edits"""

from dataclasses import replace
from decimal import Decimal
from typing import List, Optional

from gaston_budget.domain.budget import RESERVED_CATEGORIES, validate_category
from gaston_budget.domain.exceptions import DocumentNotFoundError, InvalidInputError
from gaston_budget.domain.models import (
    Config,
    Debt,
    EmploymentType,
    EntityKind,
    FinancialGoal,
    PayFrequency,
)

HOUSEHOLD_CATEGORIES = [
    "servicios",
    "mercado",
    "transporte",
    "comida_calle",
    "domicilios",
    "regalos",
    "deudas",
    "otro",
]

BUSINESS_CATEGORIES = [
    "nomina",
    "impuestos",
    "materia_prima",
    "logistica",
    "marketing",
    "alquiler",
    "servicios",
    "otro",
]


def template_config(kind: EntityKind, currency: str = "COP") -> Config:
    """Starting configuration cloned into every new entity of `kind`"""
    if kind == EntityKind.BUSINESS:
        return Config(
            currency=currency,
            employment_type=EmploymentType.BUSINESS,
            pay_frequency=PayFrequency.MONTHLY,
            categories=list(BUSINESS_CATEGORIES),
        )
    return Config(
        currency=currency,
        employment_type=EmploymentType.EMPLOYEE,
        pay_frequency=PayFrequency.MONTHLY,
        categories=list(HOUSEHOLD_CATEGORIES),
    )


def normalize_category(name: str) -> str:
    return "_".join(name.strip().lower().split())


def add_category(config: Config, name: str) -> Config:
    category = normalize_category(name)
    if not category:
        raise InvalidInputError("Category name cannot be empty")
    if category in config.categories:
        return config
    return replace(config, categories=[*config.categories, category])


def remove_category(config: Config, name: str) -> Config:
    """Drop a category. Existing expenses keep their category string"""
    if name in RESERVED_CATEGORIES:
        raise InvalidInputError(f"Category {name!r} is reserved")
    if name not in config.categories:
        raise DocumentNotFoundError(f"Category {name!r} not found")
    return replace(config, categories=[c for c in config.categories if c != name])


def find_debt(config: Config, debt_id: str) -> Debt:
    for debt in config.debts:
        if debt.id == debt_id:
            return debt
    raise DocumentNotFoundError(f"Debt {debt_id} not found")


def find_goal(config: Config, goal_id: str) -> Optional[FinancialGoal]:
    for goal in config.financial_goals:
        if goal.id == goal_id:
            return goal
    return None


def replace_goal(config: Config, goal: FinancialGoal) -> Config:
    goals: List[FinancialGoal] = [goal if g.id == goal.id else g for g in config.financial_goals]
    return replace(config, financial_goals=goals)


def apply_debt_payment(config: Config, debt_id: str, delta: Decimal) -> Config:
    """
    Move a debt's paid amount by `delta` (negative when a payment is undone).

    Unknown debt ids are ignored so stale ledger links never fail a write.
    The paid amount never drops below zero.
    """
    if not any(d.id == debt_id for d in config.debts):
        return config

    debts = [
        replace(d, paid_amount=max(d.paid_amount + delta, Decimal("0"))) if d.id == debt_id else d
        for d in config.debts
    ]
    return replace(config, debts=debts)


def validate_config(config: Config) -> None:
    """Recurring expenses may only use categories the entity has configured"""
    for item in config.budget_expenses:
        validate_category(config.categories, item.category)


def keep_goal_balances(stored: Config, incoming: Config) -> Config:
    """
    Carry stored balances and logs over an incoming config.

    Goals that already exist keep their current amount and contribution log;
    only name, target and notes come from `incoming`. New goals are taken as
    given.
    """
    existing = {g.id: g for g in stored.financial_goals}
    goals = [
        replace(g, current_amount=existing[g.id].current_amount, log=list(existing[g.id].log))
        if g.id in existing
        else g
        for g in incoming.financial_goals
    ]
    return replace(incoming, financial_goals=goals)
