"""
Shared utilities for the Galaxy gateway.

This package aggregates common building blocks:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation and redaction
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- cancellation: Cancel backend work when the client disconnects
- base_service: FastAPI app scaffolding shared by services

Do not import from service packages into shared/.
"""
