"""/v1/entities/{entity_id}/ledgers/{year_month} - monthly income and expense ledger"""

from datetime import date

from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy.orm import Session

from gaston_budget.api.dependencies import get_document_store, get_entity, get_request_id
from gaston_budget.api.documents import load_config, load_ledger, save_config, save_ledger
from gaston_budget.api.v1.schemas import (
    YEAR_MONTH_PATTERN,
    BudgetItemAdd,
    CopyMonthRequest,
    CopyMonthResponse,
    EntryCreate,
    EntryUpdate,
    LedgerResponse,
    LedgerSchema,
    MonthSummarySchema,
    PaidUpdate,
    PeriodSummarySchema,
    QuickAddRequest,
    SavingsUpdate,
)
from gaston_budget.domain.aggregation import aggregate_month, aggregate_period
from gaston_budget.domain.budget import (
    add_budget_item,
    add_expense,
    add_income,
    blank_ledger,
    clear_period,
    copy_month_template,
    copy_period_one_to_two,
    find_entry,
    materialize_budget,
    new_entry_id,
    remove_entry,
    set_expense_paid,
    set_savings,
    update_entry,
)
from gaston_budget.domain.entity_config import apply_debt_payment, find_goal, replace_goal
from gaston_budget.domain.exceptions import (
    ConfirmationRequiredError,
    DocumentNotFoundError,
    InvalidInputError,
)
from gaston_budget.domain.goals import add_funds
from gaston_budget.domain.models import (
    DEBT_PAYMENT_CATEGORY,
    GOAL_CONTRIBUTION_CATEGORY,
    Config,
    Entity,
    Expense,
    Income,
    MonthlyLedger,
)
from gaston_budget.domain.ports import DocumentStore
from gaston_budget.infrastructure.database.session import get_db
from gaston_budget.infrastructure.observability.logging import log_budget_applied, log_ledger_write
from gaston_budget.infrastructure.observability.metrics import budget_materialization_counter
from gaston_budget.utils.date_utils import parse_year_month, to_year_month

router = APIRouter()

MONTH_PATH = "/entities/{entity_id}/ledgers/{year_month}"

YearMonth = Path(..., pattern=YEAR_MONTH_PATTERN, description="Ledger month as YYYY-MM")


def _ledger_response(entity_id: str, month_key: str, ledger: MonthlyLedger, revision: int) -> LedgerResponse:
    return LedgerResponse(
        entity_id=entity_id,
        year_month=month_key,
        revision=revision,
        ledger=LedgerSchema.model_validate(ledger),
        period1_summary=PeriodSummarySchema.model_validate(aggregate_period(ledger.period1)),
        period2_summary=PeriodSummarySchema.model_validate(aggregate_period(ledger.period2)),
        month_summary=MonthSummarySchema.model_validate(aggregate_month(ledger)),
    )


def _save(
    store: DocumentStore,
    request: Request,
    entity_id: str,
    month_key: str,
    ledger: MonthlyLedger,
    revision: int,
    operation: str,
) -> int:
    new_revision = save_ledger(store, entity_id, month_key, ledger, revision)
    log_ledger_write(get_request_id(request), entity_id, month_key, operation, new_revision)
    return new_revision


def _contribute_to_goal(
    store: DocumentStore,
    entity_id: str,
    config: Config,
    config_revision: int,
    expense: Expense,
) -> None:
    """Goal contributions recorded in the ledger also fund the linked goal"""
    if expense.category != GOAL_CONTRIBUTION_CATEGORY or not expense.linked_goal_id:
        return

    goal = find_goal(config, expense.linked_goal_id)
    if goal is None:
        # Dangling links are tolerated
        return

    funded = add_funds(
        goal,
        expense.amount,
        expense.date or date.today(),
        note=f"Contribution from ledger: {expense.description}",
    )
    save_config(store, entity_id, replace_goal(config, funded), config_revision, date.today())


def _pay_linked_debt(store: DocumentStore, entity: Entity, expense: Expense, paid: bool) -> None:
    """Marking a debt payment paid (or unpaid) moves the linked debt's paid amount"""
    if expense.category != DEBT_PAYMENT_CATEGORY or not expense.linked_debt_id:
        return

    config, config_revision = load_config(store, entity)
    delta = expense.amount if paid else -expense.amount
    updated = apply_debt_payment(config, expense.linked_debt_id, delta)
    if updated is not config:
        save_config(store, entity.id, updated, config_revision, date.today())


def _check_in_month(on: date | None, expected: str) -> None:
    if on is not None and to_year_month(on) != expected:
        raise InvalidInputError(f"Date {on.isoformat()} is outside {expected}")


@router.get(MONTH_PATH, response_model=LedgerResponse)
def get_ledger(
    year_month: str = YearMonth,
    entity: Entity = Depends(get_entity),
    store: DocumentStore = Depends(get_document_store),
):
    ledger, revision = load_ledger(store, entity.id, year_month)
    return _ledger_response(entity.id, year_month, ledger, revision)


@router.delete(MONTH_PATH, response_model=LedgerResponse)
def clear_month(
    request: Request,
    year_month: str = YearMonth,
    entity: Entity = Depends(get_entity),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    _, revision = load_ledger(store, entity.id, year_month)
    ledger = blank_ledger()
    revision = _save(store, request, entity.id, year_month, ledger, revision, "clear_month")
    db.commit()
    return _ledger_response(entity.id, year_month, ledger, revision)


@router.post(MONTH_PATH + "/entries", response_model=LedgerResponse, status_code=201)
def create_entry(
    request_body: EntryCreate,
    request: Request,
    year_month: str = YearMonth,
    entity: Entity = Depends(get_entity),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    """
    Add an income or expense.

    Dated entries land in the period their day belongs to (day <= 15 is period
    1 for non-monthly earners); undated entries go to `period`.
    """
    _check_in_month(request_body.date, year_month)
    config, config_revision = load_config(store, entity)
    ledger, revision = load_ledger(store, entity.id, year_month)

    if request_body.kind == "income":
        income = Income(
            id=new_entry_id(),
            description=request_body.description,
            amount=request_body.amount,
            date=request_body.date,
            linked_goal_id=request_body.linked_goal_id,
        )
        ledger = add_income(ledger, income, config.pay_frequency, request_body.period)
    else:
        expense = Expense(
            id=new_entry_id(),
            description=request_body.description,
            amount=request_body.amount,
            category=request_body.category,
            date=request_body.date,
            linked_debt_id=request_body.linked_debt_id,
            linked_goal_id=request_body.linked_goal_id,
        )
        ledger = add_expense(ledger, expense, config, request_body.period)
        _contribute_to_goal(store, entity.id, config, config_revision, expense)

    revision = _save(store, request, entity.id, year_month, ledger, revision, "add_entry")
    db.commit()
    return _ledger_response(entity.id, year_month, ledger, revision)


@router.post("/entities/{entity_id}/quick-add", response_model=LedgerResponse, status_code=201)
def quick_add(
    request_body: QuickAddRequest,
    request: Request,
    entity: Entity = Depends(get_entity),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    """Record an unpaid expense in whichever month its date falls in"""
    target_month = to_year_month(request_body.date)
    config, config_revision = load_config(store, entity)
    ledger, revision = load_ledger(store, entity.id, target_month)

    expense = Expense(
        id=new_entry_id(),
        description=request_body.description,
        amount=request_body.amount,
        category=request_body.category,
        date=request_body.date,
        linked_debt_id=request_body.linked_debt_id,
        linked_goal_id=request_body.linked_goal_id,
    )
    ledger = add_expense(ledger, expense, config)
    _contribute_to_goal(store, entity.id, config, config_revision, expense)

    revision = _save(store, request, entity.id, target_month, ledger, revision, "quick_add")
    db.commit()
    return _ledger_response(entity.id, target_month, ledger, revision)


@router.post(MONTH_PATH + "/budget-items", response_model=LedgerResponse, status_code=201)
def add_from_budget(
    request_body: BudgetItemAdd,
    request: Request,
    year_month: str = YearMonth,
    entity: Entity = Depends(get_entity),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    """Add one recurring budget item, whole into a period or split 50/50"""
    _check_in_month(request_body.date, year_month)
    config, _ = load_config(store, entity)
    items = [*config.budget_incomes, *config.budget_expenses]
    item = next((i for i in items if i.id == request_body.item_id), None)
    if item is None:
        raise DocumentNotFoundError(f"Budget item {request_body.item_id} not found")

    ledger, revision = load_ledger(store, entity.id, year_month)
    ledger = add_budget_item(
        ledger, item, request_body.split, request_body.period, request_body.date
    )

    revision = _save(store, request, entity.id, year_month, ledger, revision, "add_budget_item")
    db.commit()
    return _ledger_response(entity.id, year_month, ledger, revision)


@router.patch(MONTH_PATH + "/entries/{entry_id}/paid", response_model=LedgerResponse)
def update_paid(
    entry_id: str,
    request_body: PaidUpdate,
    request: Request,
    year_month: str = YearMonth,
    entity: Entity = Depends(get_entity),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    """Toggle an expense's paid flag; linked debt payments follow the change"""
    current, revision = load_ledger(store, entity.id, year_month)
    ledger = set_expense_paid(current, entry_id, request_body.paid)
    _, expense = find_entry(current, entry_id)

    revision = _save(store, request, entity.id, year_month, ledger, revision, "set_paid")
    if expense.paid != request_body.paid:
        _pay_linked_debt(store, entity, expense, request_body.paid)
    db.commit()
    return _ledger_response(entity.id, year_month, ledger, revision)


@router.put(MONTH_PATH + "/entries/{entry_id}", response_model=LedgerResponse)
def edit_entry(
    entry_id: str,
    request_body: EntryUpdate,
    request: Request,
    year_month: str = YearMonth,
    entity: Entity = Depends(get_entity),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    """
    Change the fields of an income or expense.

    A new date must stay within the month; crossing day 15 moves the entry to
    the other period.
    """
    changes = request_body.model_dump(exclude_unset=True)
    _check_in_month(changes.get("date"), year_month)
    config, _ = load_config(store, entity)

    ledger, revision = load_ledger(store, entity.id, year_month)
    ledger = update_entry(ledger, entry_id, changes, config)
    revision = _save(store, request, entity.id, year_month, ledger, revision, "edit_entry")
    db.commit()
    return _ledger_response(entity.id, year_month, ledger, revision)


@router.delete(MONTH_PATH + "/entries/{entry_id}", response_model=LedgerResponse)
def delete_entry(
    entry_id: str,
    request: Request,
    year_month: str = YearMonth,
    entity: Entity = Depends(get_entity),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    ledger, revision = load_ledger(store, entity.id, year_month)
    ledger = remove_entry(ledger, entry_id)
    revision = _save(store, request, entity.id, year_month, ledger, revision, "remove_entry")
    db.commit()
    return _ledger_response(entity.id, year_month, ledger, revision)


@router.put(MONTH_PATH + "/periods/{period}/savings", response_model=LedgerResponse)
def update_savings(
    request_body: SavingsUpdate,
    request: Request,
    period: int = Path(..., ge=1, le=2),
    year_month: str = YearMonth,
    entity: Entity = Depends(get_entity),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    ledger, revision = load_ledger(store, entity.id, year_month)
    ledger = set_savings(ledger, period, request_body.amount)
    revision = _save(store, request, entity.id, year_month, ledger, revision, "set_savings")
    db.commit()
    return _ledger_response(entity.id, year_month, ledger, revision)


@router.delete(MONTH_PATH + "/periods/{period}", response_model=LedgerResponse)
def clear_one_period(
    request: Request,
    period: int = Path(..., ge=1, le=2),
    year_month: str = YearMonth,
    entity: Entity = Depends(get_entity),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    ledger, revision = load_ledger(store, entity.id, year_month)
    ledger = clear_period(ledger, period)
    revision = _save(store, request, entity.id, year_month, ledger, revision, "clear_period")
    db.commit()
    return _ledger_response(entity.id, year_month, ledger, revision)


@router.post(MONTH_PATH + "/copy-period", response_model=LedgerResponse)
def copy_period(
    request: Request,
    year_month: str = YearMonth,
    entity: Entity = Depends(get_entity),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    """Overwrite period 2 with a copy of period 1 (expenses reset to unpaid)"""
    ledger, revision = load_ledger(store, entity.id, year_month)
    ledger = copy_period_one_to_two(ledger)
    revision = _save(store, request, entity.id, year_month, ledger, revision, "copy_period")
    db.commit()
    return _ledger_response(entity.id, year_month, ledger, revision)


@router.post(MONTH_PATH + "/apply-budget", response_model=LedgerResponse)
def apply_budget(
    request: Request,
    year_month: str = YearMonth,
    confirm: bool = Query(False, description="Must be true: existing entries are replaced"),
    entity: Entity = Depends(get_entity),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    """
    Rebuild the month from the recurring budget.

    Destructive: every existing income and expense of the month is replaced,
    so the caller has to pass confirm=true.
    """
    if not confirm:
        raise ConfirmationRequiredError("Applying the budget replaces the month; pass confirm=true")

    config, _ = load_config(store, entity)
    _, revision = load_ledger(store, entity.id, year_month)
    ledger = materialize_budget(config, config.pay_frequency, parse_year_month(year_month))

    revision = _save(store, request, entity.id, year_month, ledger, revision, "apply_budget")
    db.commit()

    entry_count = sum(
        len(p.incomes) + len(p.expenses) for p in (ledger.period1, ledger.period2)
    )
    budget_materialization_counter.labels(pay_frequency=config.pay_frequency.value).inc()
    log_budget_applied(
        get_request_id(request), entity.id, year_month, config.pay_frequency.value, entry_count
    )
    return _ledger_response(entity.id, year_month, ledger, revision)


@router.post(MONTH_PATH + "/copy-to", response_model=CopyMonthResponse)
def copy_to_months(
    request_body: CopyMonthRequest,
    request: Request,
    year_month: str = YearMonth,
    entity: Entity = Depends(get_entity),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    """Overwrite each target month with a fresh copy of this month's entries"""
    for target in request_body.target_months:
        try:
            parse_year_month(target)
        except ValueError as e:
            raise InvalidInputError(str(e)) from e

    source, _ = load_ledger(store, entity.id, year_month)
    copied = []
    for target in request_body.target_months:
        if target == year_month:
            continue
        _, target_revision = load_ledger(store, entity.id, target)
        _save(store, request, entity.id, target, copy_month_template(source), target_revision, "copy_month")
        copied.append(target)

    db.commit()
    return CopyMonthResponse(copied_to=copied)
