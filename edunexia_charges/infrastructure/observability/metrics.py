"""Prometheus metrics for charge submissions, validation and gateway performance"""

from prometheus_client import Counter, Histogram

# Charge metrics
charge_submission_counter = Counter(
    "edunexia_charge_submissions_total",
    "Charge submissions sent to the gateway",
    ["outcome"],  # submitted | failed
)

charge_installments_counter = Counter(
    "edunexia_charge_installments",
    "Submitted charges by installment count bucket",
    ["bucket"],  # 1x, 2-6x, 7x+
)

validation_failure_counter = Counter(
    "edunexia_charge_validation_failures_total",
    "Charges rejected before submission",
    ["field"],
)

# Gateway metrics
gateway_latency_histogram = Histogram(
    "gateway_latency_seconds",
    "Payment gateway response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

gateway_failure_counter = Counter(
    "gateway_failures_total",
    "Failed payment gateway calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_submission(submitted: bool, installment_count: int) -> None:
    """Record submission outcome and installment distribution"""
    outcome = "submitted" if submitted else "failed"
    charge_submission_counter.labels(outcome=outcome).inc()
    if not submitted:
        return

    if installment_count <= 1:
        bucket = "1x"
    elif installment_count <= 6:
        bucket = "2-6x"
    else:
        bucket = "7x+"

    charge_installments_counter.labels(bucket=bucket).inc()


def record_validation_failure(field: str) -> None:
    validation_failure_counter.labels(field=field).inc()
