"""
Shared Prometheus metrics for the native auth service.

Metric objects are module level so that building several apps in one
process (tests, workers) never registers the same series twice.
"""

from typing import Optional

from prometheus_client import Counter, Histogram

HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "method", "endpoint", "status_code"]
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["service", "method", "endpoint"]
)

HEALTH_CHECK_TOTAL = Counter(
    "health_check_total",
    "Total health check requests",
    ["service", "status"]
)

TOKEN_VALIDATIONS_TOTAL = Counter(
    "native_auth_validations_total",
    "Total token validations by outcome",
    ["result"]
)

TOKEN_VALIDATION_DURATION_SECONDS = Histogram(
    "native_auth_validation_duration_seconds",
    "Token validation duration in seconds"
)

ORACLE_REQUESTS_TOTAL = Counter(
    "native_auth_oracle_requests_total",
    "Block timestamp API requests",
    ["endpoint", "outcome"]
)


class MetricsCollector:
    """Records the service-level metrics above with the service label bound."""

    def __init__(self, service_name: str):
        self.service_name = service_name

    def record_http_request(self, method: str, endpoint: str, status_code: int, duration: float):
        HTTP_REQUESTS_TOTAL.labels(
            service=self.service_name,
            method=method,
            endpoint=endpoint,
            status_code=str(status_code)
        ).inc()
        HTTP_REQUEST_DURATION_SECONDS.labels(
            service=self.service_name,
            method=method,
            endpoint=endpoint
        ).observe(duration)

    def record_health_check(self, status: str):
        HEALTH_CHECK_TOTAL.labels(service=self.service_name, status=status).inc()


def record_validation(result: str, duration: Optional[float] = None):
    """Count a validation outcome ("valid" or an error code)."""
    TOKEN_VALIDATIONS_TOTAL.labels(result=result).inc()
    if duration is not None:
        TOKEN_VALIDATION_DURATION_SECONDS.observe(duration)


def record_oracle_request(endpoint: str, outcome: str):
    ORACLE_REQUESTS_TOTAL.labels(endpoint=endpoint, outcome=outcome).inc()


def get_metrics_collector(service_name: str) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name)
