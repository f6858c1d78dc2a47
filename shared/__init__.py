"""
Shared utilities for the Field Management service.

This package aggregates common building blocks consumed by services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request/user correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and the uniform error response
- base_service: FastAPI app scaffolding (middleware, health, error handlers)

Do not import from service_* packages into shared/.
"""
