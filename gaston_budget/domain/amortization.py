"""Loan amortization simulator used by the debt payoff views"""

import warnings
from decimal import ROUND_CEILING, Decimal
from typing import List

from gaston_budget.domain.exceptions import InvalidInputError, NonConvergenceWarning
from gaston_budget.domain.models import AmortizationResult, ScheduleRow

# Remaining balance below this is considered paid off (currency units)
PAYOFF_TOLERANCE = Decimal("0.1")

# Iteration bound as a multiple of the nominal term
MAX_TERM_FACTOR = 2


def monthly_payment(principal: Decimal, monthly_rate: Decimal, term_months: int) -> Decimal:
    """
    Standard amortizing payment (PMT).

    pmt = P * r(1+r)^n / ((1+r)^n - 1), or P / n when r is zero.
    """
    if monthly_rate == 0:
        return principal / term_months

    growth = (1 + monthly_rate) ** term_months
    return principal * (monthly_rate * growth) / (growth - 1)


def _validate(
    principal: Decimal,
    annual_rate_percent: Decimal,
    term_months: int,
    extra_monthly_payment: Decimal,
) -> None:
    if principal <= 0:
        raise InvalidInputError(f"Principal must be positive, got {principal}")
    if term_months <= 0:
        raise InvalidInputError(f"Term must be at least one month, got {term_months}")
    if annual_rate_percent < 0:
        raise InvalidInputError(f"Interest rate cannot be negative, got {annual_rate_percent}")
    if extra_monthly_payment < 0:
        raise InvalidInputError(f"Extra payment cannot be negative, got {extra_monthly_payment}")


def simulate_amortization(
    principal: Decimal,
    annual_rate_percent: Decimal,
    term_months: int,
    extra_monthly_payment: Decimal = Decimal("0"),
) -> AmortizationResult:
    """
    Build a month-by-month payment schedule.

    Requirements:
    - Each month pays base payment + extra, capped at balance + interest
    - Stops once balance <= PAYOFF_TOLERANCE or after 2x the term
    - Hitting the bound emits NonConvergenceWarning and sets converged=False

    Raises:
        InvalidInputError: non-positive principal/term, negative rate or extra
    """
    principal = Decimal(principal)
    annual_rate_percent = Decimal(annual_rate_percent)
    extra_monthly_payment = Decimal(extra_monthly_payment)
    _validate(principal, annual_rate_percent, term_months, extra_monthly_payment)

    monthly_rate = annual_rate_percent / 100 / 12
    base_payment = monthly_payment(principal, monthly_rate, term_months)

    schedule: List[ScheduleRow] = []
    balance = principal
    max_months = term_months * MAX_TERM_FACTOR

    while balance > PAYOFF_TOLERANCE and len(schedule) < max_months:
        interest = balance * monthly_rate
        # Final payment clears the balance exactly, no overshoot
        payment = min(base_payment + extra_monthly_payment, balance + interest)
        principal_portion = payment - interest
        balance -= principal_portion

        schedule.append(
            ScheduleRow(
                month=len(schedule) + 1,
                payment=payment,
                interest=interest,
                principal_portion=principal_portion,
                balance=balance,
            )
        )

    converged = balance <= PAYOFF_TOLERANCE
    if not converged:
        warnings.warn(
            f"Balance {balance:.2f} still outstanding after {max_months} months",
            NonConvergenceWarning,
            stacklevel=2,
        )

    total_interest = sum((row.interest for row in schedule), Decimal("0"))
    months_to_payoff = len(schedule)
    months_saved = term_months - months_to_payoff if extra_monthly_payment > 0 else 0

    return AmortizationResult(
        schedule=schedule,
        base_payment=base_payment,
        total_interest=total_interest,
        total_cost=principal + total_interest,
        months_to_payoff=months_to_payoff,
        months_saved=max(months_saved, 0),
        converged=converged,
    )


def remaining_term(total_installments: int, total_amount: Decimal, paid_amount: Decimal) -> int:
    """
    Installments still owed on a stored debt, proportional to the unpaid share.

    Returns at least 1 while something is owed, 0 once the debt is settled.
    """
    if total_amount <= 0 or paid_amount >= total_amount:
        return 0
    if total_installments <= 0:
        return 1

    unpaid_share = (total_amount - paid_amount) / total_amount
    owed = int((unpaid_share * total_installments).to_integral_value(rounding=ROUND_CEILING))
    return max(owed, 1)
