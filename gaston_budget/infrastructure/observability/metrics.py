"""Prometheus metrics for document writes, budget runs and calculator usage"""

from prometheus_client import Counter, Histogram

# Document store metrics
document_write_counter = Counter(
    "gaston_document_writes_total",
    "Documents written to the store",
    ["module"],  # config | ledger | trip
)

document_conflict_counter = Counter(
    "gaston_document_conflicts_total",
    "Writes rejected because the document revision moved on",
    ["module"],
)

# Engine metrics
budget_materialization_counter = Counter(
    "gaston_budget_materializations_total",
    "Months rebuilt from the recurring budget",
    ["pay_frequency"],
)

amortization_counter = Counter(
    "gaston_amortization_simulations_total",
    "Amortization schedules computed",
    ["outcome"],  # converged | bounded
)

amortization_months_histogram = Histogram(
    "gaston_amortization_months_to_payoff",
    "Simulated months until payoff",
    buckets=[1, 6, 12, 24, 36, 60, 120, 240, 360],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_amortization(months_to_payoff: int, converged: bool) -> None:
    """Record simulator usage and how long simulated payoffs take"""
    outcome = "converged" if converged else "bounded"
    amortization_counter.labels(outcome=outcome).inc()
    amortization_months_histogram.observe(months_to_payoff)
