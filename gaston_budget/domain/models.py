"""Domain models - pure Python dataclasses representing budgeting entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class PayFrequency(str, Enum):
    """How often the entity receives income"""

    MONTHLY = "monthly"
    BIWEEKLY = "biweekly"
    WEEKLY = "weekly"
    IRREGULAR = "irregular"


class EmploymentType(str, Enum):
    EMPLOYEE = "employee"
    INDEPENDENT = "independent"
    BUSINESS = "business"


class EntityKind(str, Enum):
    """Kind of financial space an owner can create"""

    HOUSEHOLD = "household"
    BUSINESS = "business"
    TRIP = "trip"


class PriorityTier(str, Enum):
    """Debt priority tiers, highest first"""

    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Reserved expense categories, always accepted regardless of entity config
DEBT_PAYMENT_CATEGORY = "deudas"
GOAL_CONTRIBUTION_CATEGORY = "abono_meta"
FALLBACK_CATEGORY = "otro"


@dataclass(frozen=True)
class Income:
    """Money received within a period"""

    id: str
    description: str
    amount: Decimal
    date: Optional[date] = None
    linked_goal_id: Optional[str] = None


@dataclass(frozen=True)
class Expense:
    """Money spent (or planned to be spent) within a period"""

    id: str
    description: str
    amount: Decimal
    category: str
    paid: bool = False
    date: Optional[date] = None
    linked_debt_id: Optional[str] = None
    linked_goal_id: Optional[str] = None


@dataclass(frozen=True)
class Period:
    """Half-month bucket ("quincena") of a monthly ledger"""

    incomes: List[Income] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)
    savings_set_aside: Decimal = Decimal("0")


@dataclass(frozen=True)
class MonthlyLedger:
    """Both periods of one calendar month, keyed externally by YYYY-MM"""

    period1: Period = field(default_factory=Period)
    period2: Period = field(default_factory=Period)


@dataclass(frozen=True)
class Debt:
    id: str
    name: str
    total_amount: Decimal
    paid_amount: Decimal = Decimal("0")
    installment_count: int = 0
    annual_interest_rate_percent: Decimal = Decimal("0")
    months_in_arrears: int = 0
    notes: str = ""
    due_day: Optional[int] = None

    @property
    def remaining(self) -> Decimal:
        return self.total_amount - self.paid_amount

    @property
    def estimated_installment(self) -> Decimal:
        if self.installment_count <= 0:
            return Decimal("0")
        return self.total_amount / self.installment_count

    @property
    def progress_percent(self) -> Decimal:
        if self.total_amount <= 0:
            return Decimal("0")
        return self.paid_amount / self.total_amount * 100


@dataclass(frozen=True)
class BudgetIncome:
    """Recurring income template"""

    id: str
    name: str
    total_amount: Decimal


@dataclass(frozen=True)
class BudgetExpense:
    """Recurring expense template with optional tentative payment day (1-31)"""

    id: str
    name: str
    total_amount: Decimal
    category: str = FALLBACK_CATEGORY
    tentative_payment_day: Optional[int] = None


@dataclass(frozen=True)
class GoalLogEntry:
    id: str
    date: date
    amount: Decimal
    note: str = ""


@dataclass(frozen=True)
class FinancialGoal:
    """Savings target with an append-only contribution log (newest first)"""

    id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal = Decimal("0")
    notes: str = ""
    log: List[GoalLogEntry] = field(default_factory=list)


@dataclass(frozen=True)
class SavingsGoal:
    id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal = Decimal("0")


@dataclass(frozen=True)
class ProjectExpense:
    id: str
    description: str
    amount: Decimal


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    contribution: Decimal = Decimal("0")
    expenses: List[ProjectExpense] = field(default_factory=list)


@dataclass(frozen=True)
class Config:
    """Per-entity configuration, also used as the template for new entities"""

    currency: str = "COP"
    employment_type: EmploymentType = EmploymentType.EMPLOYEE
    pay_frequency: PayFrequency = PayFrequency.MONTHLY
    categories: List[str] = field(default_factory=list)
    savings_goals: List[SavingsGoal] = field(default_factory=list)
    budget_incomes: List[BudgetIncome] = field(default_factory=list)
    budget_expenses: List[BudgetExpense] = field(default_factory=list)
    financial_goals: List[FinancialGoal] = field(default_factory=list)
    debts: List[Debt] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)


@dataclass(frozen=True)
class Participant:
    id: str
    name: str
    amount: Decimal
    paid: bool = False


@dataclass(frozen=True)
class ExpenseGroup:
    """Shared trip expense split among participants"""

    id: str
    name: str
    participants: List[Participant] = field(default_factory=list)


@dataclass(frozen=True)
class TripLedger:
    groups: List[ExpenseGroup] = field(default_factory=list)


# Derived values


@dataclass(frozen=True)
class PeriodSummary:
    total_income: Decimal
    total_paid_expenses: Decimal
    available: Decimal


@dataclass(frozen=True)
class MonthSummary:
    total_income: Decimal
    total_expenses: Decimal
    total_paid_expenses: Decimal
    pending_debt: Decimal
    total_savings_set_aside: Decimal
    final_total: Decimal


@dataclass(frozen=True)
class MonthTrend:
    """Per-month figures plotted on the dashboard trend charts"""

    income: Decimal
    expenses: Decimal
    savings: Decimal
    debt_paid: Decimal


@dataclass(frozen=True)
class EntityOverview:
    total_debt_remaining: Decimal
    total_saved: Decimal


@dataclass(frozen=True)
class ScheduleRow:
    month: int
    payment: Decimal
    interest: Decimal
    principal_portion: Decimal
    balance: Decimal


@dataclass(frozen=True)
class AmortizationResult:
    schedule: List[ScheduleRow]
    base_payment: Decimal
    total_interest: Decimal
    total_cost: Decimal
    months_to_payoff: int
    months_saved: int
    converged: bool


@dataclass(frozen=True)
class DebtPriority:
    tier: PriorityTier
    message: str


@dataclass(frozen=True)
class ProjectSummary:
    total_spent: Decimal
    balance: Decimal


@dataclass(frozen=True)
class GroupSummary:
    paid_total: Decimal
    unpaid_total: Decimal
    total: Decimal


@dataclass(frozen=True)
class Entity:
    id: str
    name: str
    kind: EntityKind
    owner_id: str
