"""Prometheus metrics for calculations, contract flow and ledger calls"""

from prometheus_client import Counter, Histogram

# Calculation metrics
calculation_counter = Counter(
    "murabaha_calculation_total",
    "Amortization calculations requested",
    ["outcome"],  # ok | rejected
)

# Contract metrics
contract_created_counter = Counter(
    "murabaha_contract_created_total",
    "Contracts persisted",
    ["notarized"],  # yes | no
)

status_transition_counter = Counter(
    "murabaha_status_transition_total",
    "Contract status changes",
    ["status"],
)

# Notary metrics
notary_latency_histogram = Histogram(
    "notary_latency_seconds",
    "Notary endpoint response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

notary_failure_counter = Counter(
    "notary_failures_total",
    "Failed notarization attempts",
)

# Horizon metrics
horizon_failures_counter = Counter(
    "horizon_failures_total",
    "Failed Horizon API calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_calculation(accepted: bool) -> None:
    calculation_counter.labels(outcome="ok" if accepted else "rejected").inc()


def record_contract_created(notarized: bool) -> None:
    contract_created_counter.labels(notarized="yes" if notarized else "no").inc()
