"""
Middleware modules for the Joke API server.

This package contains custom middleware for request timing and logging.
"""

from .logfire_middleware import LogfireMiddleware

__all__ = ["LogfireMiddleware"]
