"""Conversion between domain dataclasses and JSON-ready document dicts"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from gaston_budget.domain.models import (
    BudgetExpense,
    BudgetIncome,
    Config,
    Debt,
    EmploymentType,
    ExpenseGroup,
    Expense,
    FinancialGoal,
    GoalLogEntry,
    Income,
    MonthlyLedger,
    Participant,
    PayFrequency,
    Period,
    Project,
    ProjectExpense,
    SavingsGoal,
    TripLedger,
)

# Amounts are stored as strings to keep exact decimal values in JSON


def _money(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


def _day(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


# Ledger


def income_to_dict(income: Income) -> Dict[str, Any]:
    return {
        "id": income.id,
        "description": income.description,
        "amount": str(income.amount),
        "date": _iso(income.date),
        "linked_goal_id": income.linked_goal_id,
    }


def expense_to_dict(expense: Expense) -> Dict[str, Any]:
    return {
        "id": expense.id,
        "description": expense.description,
        "amount": str(expense.amount),
        "category": expense.category,
        "paid": expense.paid,
        "date": _iso(expense.date),
        "linked_debt_id": expense.linked_debt_id,
        "linked_goal_id": expense.linked_goal_id,
    }


def period_to_dict(period: Period) -> Dict[str, Any]:
    return {
        "incomes": [income_to_dict(i) for i in period.incomes],
        "expenses": [expense_to_dict(e) for e in period.expenses],
        "savings_set_aside": str(period.savings_set_aside),
    }


def ledger_to_dict(ledger: MonthlyLedger) -> Dict[str, Any]:
    return {"period1": period_to_dict(ledger.period1), "period2": period_to_dict(ledger.period2)}


def _period_from_dict(data: Optional[Dict[str, Any]]) -> Period:
    data = data or {}
    return Period(
        incomes=[
            Income(
                id=i["id"],
                description=i.get("description", ""),
                amount=_money(i.get("amount")),
                date=_day(i.get("date")),
                linked_goal_id=i.get("linked_goal_id"),
            )
            for i in data.get("incomes", [])
        ],
        expenses=[
            Expense(
                id=e["id"],
                description=e.get("description", ""),
                amount=_money(e.get("amount")),
                category=e.get("category") or "otro",
                paid=bool(e.get("paid", False)),
                date=_day(e.get("date")),
                linked_debt_id=e.get("linked_debt_id"),
                linked_goal_id=e.get("linked_goal_id"),
            )
            for e in data.get("expenses", [])
        ],
        savings_set_aside=_money(data.get("savings_set_aside")),
    )


def ledger_from_dict(data: Dict[str, Any]) -> MonthlyLedger:
    return MonthlyLedger(
        period1=_period_from_dict(data.get("period1")),
        period2=_period_from_dict(data.get("period2")),
    )


# Config


def debt_to_dict(debt: Debt) -> Dict[str, Any]:
    return {
        "id": debt.id,
        "name": debt.name,
        "total_amount": str(debt.total_amount),
        "paid_amount": str(debt.paid_amount),
        "installment_count": debt.installment_count,
        "annual_interest_rate_percent": str(debt.annual_interest_rate_percent),
        "months_in_arrears": debt.months_in_arrears,
        "notes": debt.notes,
        "due_day": debt.due_day,
    }


def goal_to_dict(goal: FinancialGoal) -> Dict[str, Any]:
    return {
        "id": goal.id,
        "name": goal.name,
        "target_amount": str(goal.target_amount),
        "current_amount": str(goal.current_amount),
        "notes": goal.notes,
        "log": [
            {"id": e.id, "date": e.date.isoformat(), "amount": str(e.amount), "note": e.note}
            for e in goal.log
        ],
    }


def config_to_dict(config: Config) -> Dict[str, Any]:
    return {
        "currency": config.currency,
        "employment_type": config.employment_type.value,
        "pay_frequency": config.pay_frequency.value,
        "categories": list(config.categories),
        "savings_goals": [
            {
                "id": g.id,
                "name": g.name,
                "target_amount": str(g.target_amount),
                "current_amount": str(g.current_amount),
            }
            for g in config.savings_goals
        ],
        "budget_incomes": [
            {"id": b.id, "name": b.name, "total_amount": str(b.total_amount)}
            for b in config.budget_incomes
        ],
        "budget_expenses": [
            {
                "id": b.id,
                "name": b.name,
                "total_amount": str(b.total_amount),
                "category": b.category,
                "tentative_payment_day": b.tentative_payment_day,
            }
            for b in config.budget_expenses
        ],
        "financial_goals": [goal_to_dict(g) for g in config.financial_goals],
        "debts": [debt_to_dict(d) for d in config.debts],
        "projects": [
            {
                "id": p.id,
                "name": p.name,
                "contribution": str(p.contribution),
                "expenses": [
                    {"id": e.id, "description": e.description, "amount": str(e.amount)}
                    for e in p.expenses
                ],
            }
            for p in config.projects
        ],
    }


def config_from_dict(data: Dict[str, Any]) -> Config:
    return Config(
        currency=data.get("currency", "COP"),
        employment_type=EmploymentType(data.get("employment_type", EmploymentType.EMPLOYEE.value)),
        pay_frequency=PayFrequency(data.get("pay_frequency", PayFrequency.MONTHLY.value)),
        categories=list(data.get("categories", [])),
        savings_goals=[
            SavingsGoal(
                id=g["id"],
                name=g["name"],
                target_amount=_money(g.get("target_amount")),
                current_amount=_money(g.get("current_amount")),
            )
            for g in data.get("savings_goals", [])
        ],
        budget_incomes=[
            BudgetIncome(id=b["id"], name=b["name"], total_amount=_money(b.get("total_amount")))
            for b in data.get("budget_incomes", [])
        ],
        budget_expenses=[
            BudgetExpense(
                id=b["id"],
                name=b["name"],
                total_amount=_money(b.get("total_amount")),
                category=b.get("category") or "otro",
                tentative_payment_day=b.get("tentative_payment_day"),
            )
            for b in data.get("budget_expenses", [])
        ],
        financial_goals=[
            FinancialGoal(
                id=g["id"],
                name=g["name"],
                target_amount=_money(g.get("target_amount")),
                current_amount=_money(g.get("current_amount")),
                notes=g.get("notes", ""),
                log=[
                    GoalLogEntry(
                        id=e["id"],
                        date=date.fromisoformat(e["date"]),
                        amount=_money(e.get("amount")),
                        note=e.get("note", ""),
                    )
                    for e in g.get("log", [])
                ],
            )
            for g in data.get("financial_goals", [])
        ],
        debts=[
            Debt(
                id=d["id"],
                name=d["name"],
                total_amount=_money(d.get("total_amount")),
                paid_amount=_money(d.get("paid_amount")),
                installment_count=int(d.get("installment_count", 0)),
                annual_interest_rate_percent=_money(d.get("annual_interest_rate_percent")),
                months_in_arrears=int(d.get("months_in_arrears", 0)),
                notes=d.get("notes", ""),
                due_day=d.get("due_day"),
            )
            for d in data.get("debts", [])
        ],
        projects=[
            Project(
                id=p["id"],
                name=p["name"],
                contribution=_money(p.get("contribution")),
                expenses=[
                    ProjectExpense(id=e["id"], description=e.get("description", ""), amount=_money(e.get("amount")))
                    for e in p.get("expenses", [])
                ],
            )
            for p in data.get("projects", [])
        ],
    )


# Trip


def trip_to_dict(trip: TripLedger) -> Dict[str, Any]:
    return {
        "groups": [
            {
                "id": g.id,
                "name": g.name,
                "participants": [
                    {"id": p.id, "name": p.name, "amount": str(p.amount), "paid": p.paid}
                    for p in g.participants
                ],
            }
            for g in trip.groups
        ]
    }


def trip_from_dict(data: Dict[str, Any]) -> TripLedger:
    return TripLedger(
        groups=[
            ExpenseGroup(
                id=g["id"],
                name=g["name"],
                participants=[
                    Participant(
                        id=p["id"],
                        name=p["name"],
                        amount=_money(p.get("amount")),
                        paid=bool(p.get("paid", False)),
                    )
                    for p in g.get("participants", [])
                ],
            )
            for g in data.get("groups", [])
        ]
    )
