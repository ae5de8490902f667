"""Middleware package."""
from cedoi.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
