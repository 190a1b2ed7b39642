"""Prometheus metrics for monitoring detection output and payoff simulations"""

from prometheus_client import Counter, Histogram

# Detection metrics
patterns_detected_counter = Counter(
    "cashflow_patterns_detected_total",
    "Recurring patterns emitted by the detector",
    ["kind"],  # expense | income
)

# Payoff metrics
payoff_simulation_counter = Counter(
    "cashflow_payoff_simulations_total",
    "Payoff simulations run",
    ["strategy", "outcome"],  # outcome: paid_off | safety_cap
)

payoff_months_histogram = Histogram(
    "cashflow_payoff_months",
    "Simulated months until payoff",
    buckets=[6, 12, 24, 36, 60, 120, 240, 360, 600],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_detection(expense_count: int, income_count: int) -> None:
    """Record how many patterns one detection call produced"""
    patterns_detected_counter.labels(kind="expense").inc(expense_count)
    patterns_detected_counter.labels(kind="income").inc(income_count)


def record_payoff_plan(strategy: str, months_to_payoff: int, paid_off: bool) -> None:
    """Record simulation outcome; safety-cap hits are the ones worth alerting on"""
    outcome = "paid_off" if paid_off else "safety_cap"
    payoff_simulation_counter.labels(strategy=strategy, outcome=outcome).inc()
    payoff_months_histogram.observe(months_to_payoff)
