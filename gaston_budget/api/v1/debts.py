"""GET /v1/entities/{entity_id}/debts - debt status, priorities and payoff simulation"""

import time
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Request

from gaston_budget.api.dependencies import (
    get_document_store,
    get_entity,
    get_priority_thresholds,
    get_request_id,
)
from gaston_budget.api.documents import load_config
from gaston_budget.api.v1.schemas import AmortizationResponse, DebtListResponse, DebtSchema, DebtView
from gaston_budget.domain.aggregation import entity_overview
from gaston_budget.domain.amortization import remaining_term, simulate_amortization
from gaston_budget.domain.entity_config import find_debt
from gaston_budget.domain.exceptions import InvalidInputError
from gaston_budget.domain.models import Debt, Entity
from gaston_budget.domain.ports import DocumentStore
from gaston_budget.domain.recommendations import PriorityThresholds, classify_debt_priority, rank_debts
from gaston_budget.infrastructure.observability.logging import log_amortization
from gaston_budget.infrastructure.observability.metrics import record_amortization

router = APIRouter()


def _debt_view(debt: Debt, thresholds: PriorityThresholds) -> DebtView:
    priority = classify_debt_priority(debt, thresholds)
    return DebtView(
        **DebtSchema.model_validate(debt).model_dump(),
        remaining=debt.remaining,
        estimated_installment=debt.estimated_installment,
        progress_percent=debt.progress_percent,
        priority=priority.tier,
        recommendation=priority.message,
    )


@router.get("/entities/{entity_id}/debts", response_model=DebtListResponse)
def list_debts(
    entity: Entity = Depends(get_entity),
    store: DocumentStore = Depends(get_document_store),
    thresholds: PriorityThresholds = Depends(get_priority_thresholds),
):
    """
    List debts in payoff order with derived metrics.

    Order: urgent (in arrears) first, then by interest rate, highest first.
    """
    config, _ = load_config(store, entity)
    ranked = rank_debts(config.debts, thresholds)

    return DebtListResponse(
        entity_id=entity.id,
        total_remaining=entity_overview(config).total_debt_remaining,
        debts=[_debt_view(d, thresholds) for d in ranked],
    )


@router.get("/entities/{entity_id}/debts/{debt_id}/amortization", response_model=AmortizationResponse)
def simulate_debt_payoff(
    debt_id: str,
    request: Request,
    extra: Decimal = Query(Decimal("0"), ge=0, description="Extra payment per month"),
    entity: Entity = Depends(get_entity),
    store: DocumentStore = Depends(get_document_store),
):
    """
    Simulate paying off the remaining balance of a stored debt.

    The term is the share of installments still owed, proportional to the
    unpaid fraction of the debt.
    """
    start_time = time.time()
    config, _ = load_config(store, entity)
    debt = find_debt(config, debt_id)

    term = remaining_term(debt.installment_count, debt.total_amount, debt.paid_amount)
    if term == 0:
        raise InvalidInputError(f"Debt {debt_id} has no outstanding balance")

    result = simulate_amortization(
        debt.remaining,
        debt.annual_interest_rate_percent,
        term,
        extra,
    )

    duration_ms = (time.time() - start_time) * 1000
    record_amortization(result.months_to_payoff, result.converged)
    log_amortization(get_request_id(request), result.months_to_payoff, result.converged, duration_ms)

    return AmortizationResponse.model_validate(result)
