"""
Middleware modules for the Telloom server.

This package contains custom middleware for request/response timing and
tracing.
"""

from .logfire_middleware import LogfireMiddleware

__all__ = ["LogfireMiddleware"]
