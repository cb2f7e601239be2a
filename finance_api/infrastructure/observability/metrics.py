"""Prometheus metrics for transaction volume, envelope payments and auth outcomes"""

from prometheus_client import Counter, Histogram

# Transaction metrics
transactions_created_counter = Counter(
    "finance_transactions_created_total",
    "Transactions persisted",
    ["mode"],  # single | installment
)

installments_generated_counter = Counter(
    "finance_installments_generated_total",
    "Installment batches generated",
    ["policy"],  # divide | repeat
)

# Envelope metrics
envelope_payments_counter = Counter(
    "finance_envelope_payments_total",
    "Envelope installment payments recorded",
)

# Auth metrics
auth_attempts_counter = Counter(
    "finance_auth_attempts_total",
    "Register and login attempts",
    ["action", "outcome"],  # register|login, success|failure
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_transactions(mode: str, count: int = 1) -> None:
    transactions_created_counter.labels(mode=mode).inc(count)


def record_installment_batch(policy: str, count: int) -> None:
    """Record one generated batch and the slices it persisted"""
    installments_generated_counter.labels(policy=policy).inc()
    record_transactions("installment", count)


def record_auth_attempt(action: str, success: bool) -> None:
    auth_attempts_counter.labels(action=action, outcome="success" if success else "failure").inc()
