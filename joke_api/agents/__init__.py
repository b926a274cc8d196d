"""
Agent platform access for the Joke API.

This package wraps the remote agent platform behind small building blocks:
threads, run execution and reply extraction, all sharing one ``AgentsClient``.
"""

from .client import AgentsClient
from .errors import (
    AgentPlatformError,
    InvalidThread,
    NoAssistantReply,
    RemoteUnavailable,
)
from .replies import REPLY_PAGE_SIZE, ReplyExtractor
from .runs import RunExecutor
from .threads import ConversationThread

__all__ = [
    "AgentsClient",
    "AgentPlatformError",
    "ConversationThread",
    "InvalidThread",
    "NoAssistantReply",
    "REPLY_PAGE_SIZE",
    "RemoteUnavailable",
    "ReplyExtractor",
    "RunExecutor",
]
