"""GET /v1/entities/{entity_id}/summary - month history and dashboard overview"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from gaston_budget.api.dependencies import get_document_store, get_entity
from gaston_budget.api.documents import load_config, load_config_snapshot, load_ledger
from gaston_budget.api.v1.schemas import (
    YEAR_MONTH_PATTERN,
    CategoryTotal,
    GoalProgress,
    HistoryItem,
    HistoryResponse,
    MonthSummarySchema,
    OverviewResponse,
)
from gaston_budget.domain.aggregation import (
    aggregate_month,
    category_totals,
    daily_allowance,
    entity_overview,
    filter_months,
    month_trend,
    planned_totals,
)
from gaston_budget.domain.goals import goal_progress
from gaston_budget.domain.models import Entity
from gaston_budget.domain.ports import LEDGER_MODULE, DocumentStore
from gaston_budget.utils.date_utils import to_year_month

router = APIRouter()


@router.get("/entities/{entity_id}/summary/history", response_model=HistoryResponse)
def get_month_history(
    time_filter: str = Query("6m", description="6m, year, last_year or all"),
    entity: Entity = Depends(get_entity),
    store: DocumentStore = Depends(get_document_store),
):
    """
    Actual vs planned figures for every stored month in the filter window.

    Planned figures come from the config snapshot taken in that month, or
    the current config when the month has none.
    """
    keys = filter_months(store.list_year_months(entity.id, LEDGER_MODULE), time_filter, date.today())

    current_config, _ = load_config(store, entity)

    months = []
    for key in keys:
        ledger, _ = load_ledger(store, entity.id, key)
        trend = month_trend(ledger)
        planned_income, planned_expenses = planned_totals(
            load_config_snapshot(store, entity.id, key) or current_config
        )
        months.append(
            HistoryItem(
                year_month=key,
                income=trend.income,
                expenses=trend.expenses,
                savings=trend.savings,
                debt_paid=trend.debt_paid,
                planned_income=planned_income,
                planned_expenses=planned_expenses,
            )
        )

    return HistoryResponse(entity_id=entity.id, time_filter=time_filter, months=months)


@router.get("/entities/{entity_id}/summary/overview", response_model=OverviewResponse)
def get_overview(
    year_month: Optional[str] = Query(None, pattern=YEAR_MONTH_PATTERN, description="Defaults to current month"),
    entity: Entity = Depends(get_entity),
    store: DocumentStore = Depends(get_document_store),
):
    """Dashboard cards: debt and savings totals, daily allowance, top categories, goals"""
    month_key = year_month or to_year_month(date.today())
    config, _ = load_config(store, entity)
    ledger, _ = load_ledger(store, entity.id, month_key)
    overview = entity_overview(config)

    return OverviewResponse(
        entity_id=entity.id,
        year_month=month_key,
        total_debt_remaining=overview.total_debt_remaining,
        total_saved=overview.total_saved,
        daily_allowance=daily_allowance(ledger),
        month_summary=MonthSummarySchema.model_validate(aggregate_month(ledger)),
        top_categories=[CategoryTotal(category=c, total=t) for c, t in category_totals(ledger)],
        goals=[
            GoalProgress(
                id=g.id,
                name=g.name,
                current_amount=g.current_amount,
                target_amount=g.target_amount,
                progress_percent=goal_progress(g),
            )
            for g in config.financial_goals
        ],
    )
