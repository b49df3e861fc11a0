"""Middleware for the short code web app."""

from .logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
