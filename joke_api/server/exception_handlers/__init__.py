"""
Exception handlers for the Joke API server.

This package contains the exception handlers for client input errors and
unhandled faults, and a setup function to register them with the FastAPI
application.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
