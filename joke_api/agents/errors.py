"""Error types raised while talking to the agent platform.

Purpose:
- Give the orchestrator and the HTTP layer typed failures to map onto
  responses and span status.
- Keep HTTP context (status code, response body) for diagnosis.

A run that ends in the ``failed`` status is not an error here; it is a normal
result of ``RunExecutor.start_and_await``.
"""

from __future__ import annotations

from typing import Any, Optional


class AgentPlatformError(Exception):
    """Base error for agent platform failures.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code associated with the failure.
        details: Optional structured payload from the platform (e.g., JSON body).
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class RemoteUnavailable(AgentPlatformError):
    """The platform could not be reached or rejected the call (transport, auth or server fault)."""


class InvalidThread(RemoteUnavailable):
    """Raised when a thread id is unknown to the platform (HTTP 404).

    Args:
        thread_id: The thread identifier that was not found.
    """

    def __init__(self, thread_id: str, *, details: Optional[Any] = None) -> None:
        super().__init__(f"Thread not found: {thread_id}", status_code=404, details=details)
        self.thread_id = thread_id


class NoAssistantReply(AgentPlatformError):
    """No assistant-authored text was found in the scanned page of messages."""

    def __init__(self, thread_id: str) -> None:
        super().__init__("No assistant response was found for this thread")
        self.thread_id = thread_id
