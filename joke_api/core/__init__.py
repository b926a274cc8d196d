"""
Core utilities for the Joke API.

This package provides logging configuration, telemetry bootstrap, span
scoping and the GenAI span attribute schema.
"""

from joke_api.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
