"""POST /v1/calculators/amortization - free-form loan calculator"""

import time

from fastapi import APIRouter, Request

from gaston_budget.api.dependencies import get_request_id
from gaston_budget.api.v1.schemas import AmortizationRequest, AmortizationResponse
from gaston_budget.domain.amortization import simulate_amortization
from gaston_budget.infrastructure.observability.logging import log_amortization
from gaston_budget.infrastructure.observability.metrics import record_amortization

router = APIRouter()


@router.post("/calculators/amortization", response_model=AmortizationResponse)
def calculate_amortization(request_body: AmortizationRequest, request: Request):
    """
    Compute a full payment schedule for a loan.

    Returns:
        Schedule rows plus base payment, total interest, total cost and
        months to payoff (and months saved when paying extra)
    """
    start_time = time.time()

    result = simulate_amortization(
        request_body.principal,
        request_body.annual_rate_percent,
        request_body.term_months,
        request_body.extra_monthly_payment,
    )

    duration_ms = (time.time() - start_time) * 1000
    record_amortization(result.months_to_payoff, result.converged)
    log_amortization(get_request_id(request), result.months_to_payoff, result.converged, duration_ms)

    return AmortizationResponse.model_validate(result)
