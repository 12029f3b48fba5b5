"""
Telloom Server Package.

This package contains the web server implementation for the Telloom backend.
It includes the API definition, the request dependencies, the domain service
layer and configuration.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Server configuration and constants.
    services: Business logic, request dependencies and access checks.
    exception_handlers: Mapping of domain and integration errors to responses.
    middleware: Request tracing and timing.
"""
