"""Errors raised by the HTTP layer itself, before any agent platform call."""


class ClientInputError(Exception):
    """Raised when a caller omits required input; nothing remote has been touched."""
