"""Pydantic schemas for API request/response validation"""

import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from gaston_budget.domain.models import (
    BudgetExpense,
    BudgetIncome,
    Config,
    Debt,
    EmploymentType,
    EntityKind,
    ExpenseGroup,
    FinancialGoal,
    GoalLogEntry,
    Participant,
    PayFrequency,
    PriorityTier,
    Project,
    ProjectExpense,
    SavingsGoal,
    TripLedger,
)

YEAR_MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class DomainView(BaseModel):
    """Base for schemas read straight from domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


# Ledger


class IncomeSchema(DomainView):
    id: str
    description: str
    amount: Decimal
    date: Optional[datetime.date] = None
    linked_goal_id: Optional[str] = None


class ExpenseSchema(DomainView):
    id: str
    description: str
    amount: Decimal
    category: str
    paid: bool = False
    date: Optional[datetime.date] = None
    linked_debt_id: Optional[str] = None
    linked_goal_id: Optional[str] = None


class PeriodSchema(DomainView):
    incomes: List[IncomeSchema]
    expenses: List[ExpenseSchema]
    savings_set_aside: Decimal


class LedgerSchema(DomainView):
    period1: PeriodSchema
    period2: PeriodSchema


class PeriodSummarySchema(DomainView):
    total_income: Decimal
    total_paid_expenses: Decimal
    available: Decimal


class MonthSummarySchema(DomainView):
    total_income: Decimal
    total_expenses: Decimal
    total_paid_expenses: Decimal
    pending_debt: Decimal
    total_savings_set_aside: Decimal
    final_total: Decimal


class LedgerResponse(BaseModel):
    """Month ledger with the totals shown next to each period"""

    entity_id: str
    year_month: str
    revision: int
    ledger: LedgerSchema
    period1_summary: PeriodSummarySchema
    period2_summary: PeriodSummarySchema
    month_summary: MonthSummarySchema


class EntryCreate(BaseModel):
    """Request body for adding an income or expense to a month"""

    kind: Literal["income", "expense"]
    description: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    date: Optional[datetime.date] = None
    category: str = "otro"
    period: int = Field(1, ge=1, le=2, description="Used when no date is given")
    linked_debt_id: Optional[str] = None
    linked_goal_id: Optional[str] = None


class QuickAddRequest(BaseModel):
    """Expense added from anywhere; the month is taken from its date"""

    description: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    date: datetime.date
    category: str = "otro"
    linked_debt_id: Optional[str] = None
    linked_goal_id: Optional[str] = None


class EntryUpdate(BaseModel):
    """
    Fields to change on an existing entry; omitted fields stay as they are.

    The paid flag is changed through the /paid endpoint so linked debts stay
    in step.
    """

    description: Optional[str] = Field(None, min_length=1)
    amount: Optional[Decimal] = Field(None, gt=0)
    date: Optional[datetime.date] = None
    category: Optional[str] = None
    linked_debt_id: Optional[str] = None
    linked_goal_id: Optional[str] = None


class BudgetItemAdd(BaseModel):
    item_id: str
    split: bool = False
    period: int = Field(1, ge=1, le=2)
    date: Optional[datetime.date] = None


class PaidUpdate(BaseModel):
    paid: bool


class SavingsUpdate(BaseModel):
    amount: Decimal = Field(..., ge=0)


class CopyMonthRequest(BaseModel):
    target_months: List[str] = Field(..., min_length=1)


class CopyMonthResponse(BaseModel):
    copied_to: List[str]


# Config


class SavingsGoalSchema(DomainView):
    id: str
    name: str
    target_amount: Decimal = Field(..., ge=0)
    current_amount: Decimal = Field(Decimal("0"), ge=0)

    def to_domain(self) -> SavingsGoal:
        return SavingsGoal(**self.model_dump())


class BudgetIncomeSchema(DomainView):
    id: str
    name: str
    total_amount: Decimal = Field(..., ge=0)

    def to_domain(self) -> BudgetIncome:
        return BudgetIncome(**self.model_dump())


class BudgetExpenseSchema(DomainView):
    id: str
    name: str
    total_amount: Decimal = Field(..., ge=0)
    category: str = "otro"
    tentative_payment_day: Optional[int] = Field(None, ge=1, le=31)

    def to_domain(self) -> BudgetExpense:
        return BudgetExpense(**self.model_dump())


class GoalLogSchema(DomainView):
    id: str
    date: datetime.date
    amount: Decimal
    note: str = ""


class FinancialGoalSchema(DomainView):
    id: str
    name: str
    target_amount: Decimal = Field(..., ge=0)
    current_amount: Decimal = Field(Decimal("0"), ge=0)
    notes: str = ""
    log: List[GoalLogSchema] = []

    def to_domain(self) -> FinancialGoal:
        return FinancialGoal(
            id=self.id,
            name=self.name,
            target_amount=self.target_amount,
            current_amount=self.current_amount,
            notes=self.notes,
            log=[GoalLogEntry(**entry.model_dump()) for entry in self.log],
        )


class DebtSchema(DomainView):
    id: str
    name: str
    total_amount: Decimal = Field(..., ge=0)
    paid_amount: Decimal = Field(Decimal("0"), ge=0)
    installment_count: int = Field(0, ge=0)
    annual_interest_rate_percent: Decimal = Field(Decimal("0"), ge=0)
    months_in_arrears: int = Field(0, ge=0)
    notes: str = ""
    due_day: Optional[int] = Field(None, ge=1, le=31)

    def to_domain(self) -> Debt:
        return Debt(**self.model_dump())


class ProjectExpenseSchema(DomainView):
    id: str
    description: str
    amount: Decimal = Field(..., ge=0)


class ProjectSchema(DomainView):
    id: str
    name: str
    contribution: Decimal = Decimal("0")
    expenses: List[ProjectExpenseSchema] = []

    def to_domain(self) -> Project:
        return Project(
            id=self.id,
            name=self.name,
            contribution=self.contribution,
            expenses=[ProjectExpense(**e.model_dump()) for e in self.expenses],
        )


class ConfigSchema(DomainView):
    currency: str = "COP"
    employment_type: EmploymentType = EmploymentType.EMPLOYEE
    pay_frequency: PayFrequency = PayFrequency.MONTHLY
    categories: List[str] = []
    savings_goals: List[SavingsGoalSchema] = []
    budget_incomes: List[BudgetIncomeSchema] = []
    budget_expenses: List[BudgetExpenseSchema] = []
    financial_goals: List[FinancialGoalSchema] = []
    debts: List[DebtSchema] = []
    projects: List[ProjectSchema] = []

    def to_domain(self) -> Config:
        return Config(
            currency=self.currency,
            employment_type=self.employment_type,
            pay_frequency=self.pay_frequency,
            categories=list(self.categories),
            savings_goals=[g.to_domain() for g in self.savings_goals],
            budget_incomes=[b.to_domain() for b in self.budget_incomes],
            budget_expenses=[b.to_domain() for b in self.budget_expenses],
            financial_goals=[g.to_domain() for g in self.financial_goals],
            debts=[d.to_domain() for d in self.debts],
            projects=[p.to_domain() for p in self.projects],
        )


class ConfigResponse(BaseModel):
    entity_id: str
    revision: int
    config: ConfigSchema


class ConfigUpdate(BaseModel):
    """Whole-config replacement guarded by the revision the client last read"""

    config: ConfigSchema
    expected_revision: int = Field(..., ge=0)


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)


# Entities


class EntityCreate(BaseModel):
    name: str = Field(..., min_length=1)
    kind: EntityKind = EntityKind.HOUSEHOLD
    owner_id: str = Field(..., min_length=1)


class EntityResponse(DomainView):
    id: str
    name: str
    kind: EntityKind
    owner_id: str


class EntityListResponse(BaseModel):
    owner_id: str
    entities: List[EntityResponse]


# Debts and calculators


class DebtView(DebtSchema):
    remaining: Decimal
    estimated_installment: Decimal
    progress_percent: Decimal
    priority: PriorityTier
    recommendation: str


class DebtListResponse(BaseModel):
    entity_id: str
    total_remaining: Decimal
    debts: List[DebtView]


class AmortizationRequest(BaseModel):
    principal: Decimal = Field(..., gt=0)
    annual_rate_percent: Decimal = Field(..., ge=0)
    term_months: int = Field(..., gt=0, le=1200)
    extra_monthly_payment: Decimal = Field(Decimal("0"), ge=0)


class ScheduleRowSchema(DomainView):
    month: int
    payment: Decimal
    interest: Decimal
    principal_portion: Decimal
    balance: Decimal


class AmortizationResponse(DomainView):
    schedule: List[ScheduleRowSchema]
    base_payment: Decimal
    total_interest: Decimal
    total_cost: Decimal
    months_to_payoff: int
    months_saved: int
    converged: bool


# Goals


class FundsRequest(BaseModel):
    amount: Decimal = Field(..., gt=0)
    date: Optional[datetime.date] = None
    note: str = ""


class GoalResponse(BaseModel):
    entity_id: str
    revision: int
    goal: FinancialGoalSchema
    progress_percent: Decimal


# Dashboard


class HistoryItem(BaseModel):
    """Actual vs planned figures for one month"""

    year_month: str
    income: Decimal
    expenses: Decimal
    savings: Decimal
    debt_paid: Decimal
    planned_income: Decimal
    planned_expenses: Decimal


class HistoryResponse(BaseModel):
    entity_id: str
    time_filter: str
    months: List[HistoryItem]


class CategoryTotal(BaseModel):
    category: str
    total: Decimal


class GoalProgress(BaseModel):
    id: str
    name: str
    current_amount: Decimal
    target_amount: Decimal
    progress_percent: Decimal


class OverviewResponse(BaseModel):
    entity_id: str
    year_month: str
    total_debt_remaining: Decimal
    total_saved: Decimal
    daily_allowance: Decimal
    month_summary: MonthSummarySchema
    top_categories: List[CategoryTotal]
    goals: List[GoalProgress]


# Trip


class ParticipantSchema(DomainView):
    id: str
    name: str
    amount: Decimal = Field(..., ge=0)
    paid: bool = False


class ExpenseGroupSchema(DomainView):
    id: str
    name: str
    participants: List[ParticipantSchema] = []


class TripSchema(DomainView):
    groups: List[ExpenseGroupSchema] = []

    def to_domain(self) -> TripLedger:
        return TripLedger(
            groups=[
                ExpenseGroup(
                    id=g.id,
                    name=g.name,
                    participants=[Participant(**p.model_dump()) for p in g.participants],
                )
                for g in self.groups
            ]
        )


class TripUpdate(BaseModel):
    trip: TripSchema
    expected_revision: int = Field(..., ge=0)


class GroupSummarySchema(DomainView):
    paid_total: Decimal
    unpaid_total: Decimal
    total: Decimal


class TripGroupView(BaseModel):
    id: str
    name: str
    summary: GroupSummarySchema


class TripResponse(BaseModel):
    entity_id: str
    revision: int
    trip: TripSchema
    groups: List[TripGroupView]


# Projects


class ProjectView(ProjectSchema):
    total_spent: Decimal
    balance: Decimal


class ProjectListResponse(BaseModel):
    entity_id: str
    projects: List[ProjectView]
