"""Debt recommendation heuristic - maps a debt's state to a priority tier"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List

from gaston_budget.domain.models import Debt, DebtPriority, PriorityTier


@dataclass(frozen=True)
class PriorityThresholds:
    """Annual interest rates (percent) above which a debt is escalated"""

    high_rate: Decimal = Decimal("20")
    medium_rate: Decimal = Decimal("12")


DEFAULT_THRESHOLDS = PriorityThresholds()

_TIER_ORDER = {
    PriorityTier.URGENT: 0,
    PriorityTier.HIGH: 1,
    PriorityTier.MEDIUM: 2,
    PriorityTier.LOW: 3,
}


def classify_debt_priority(
    debt: Debt,
    thresholds: PriorityThresholds = DEFAULT_THRESHOLDS,
) -> DebtPriority:
    """
    Classify a debt by urgency. First matching rule wins:

    - Any months in arrears: urgent, regardless of rate
    - Rate above high threshold (20%): prioritize extra payments
    - Rate above medium threshold (12%): informational
    - Otherwise: under control
    """
    if debt.months_in_arrears > 0:
        months = "month" if debt.months_in_arrears == 1 else "months"
        return DebtPriority(
            tier=PriorityTier.URGENT,
            message=(
                f"{debt.months_in_arrears} {months} in arrears. "
                "Contact the lender to negotiate before penalties grow."
            ),
        )

    rate = debt.annual_interest_rate_percent
    if rate > thresholds.high_rate:
        return DebtPriority(
            tier=PriorityTier.HIGH,
            message=f"High interest ({rate}% annual). Direct extra payments here first.",
        )
    if rate > thresholds.medium_rate:
        return DebtPriority(
            tier=PriorityTier.MEDIUM,
            message=f"Moderate interest ({rate}% annual). Keep payments on schedule.",
        )
    return DebtPriority(tier=PriorityTier.LOW, message="Under control.")


def rank_debts(
    debts: List[Debt],
    thresholds: PriorityThresholds = DEFAULT_THRESHOLDS,
) -> List[Debt]:
    """Order debts for payoff: by tier, then highest rate first (avalanche)"""
    return sorted(
        debts,
        key=lambda d: (
            _TIER_ORDER[classify_debt_priority(d, thresholds).tier],
            -d.annual_interest_rate_percent,
        ),
    )
