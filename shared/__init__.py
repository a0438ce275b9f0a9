"""
Shared utilities for the native auth service.

This package aggregates the cross-cutting building blocks used by the
validator service:

- config: Service settings via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- circuit_breaker: Resilient external call protection
- base_service: FastAPI scaffold (health, metrics, error handlers)

Do not import from service packages into shared/.
"""
