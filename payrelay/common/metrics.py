"""Prometheus metric definitions for the relay."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


payment_requests_total = Counter(
    "payment_requests_total",
    "Total payment relay requests",
    ["service", "operation"],
)
payment_success_total = Counter(
    "payment_success_total",
    "Payment relay requests that succeeded",
    ["service", "operation"],
)
payment_failure_total = Counter(
    "payment_failure_total",
    "Payment relay requests that failed",
    ["service", "operation", "error_type"],
)
paystack_call_seconds = Histogram(
    "paystack_call_seconds",
    "Outbound Paystack call duration seconds",
    ["service", "endpoint"],
)
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status_code"],
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration seconds",
    ["service", "route", "method"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")
