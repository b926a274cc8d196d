from __future__ import annotations

from joke_api.core.logging_config import get_logger

from .client import AgentsClient
from .models import MessageRole, ThreadHandle, ThreadMessage

logger = get_logger(__name__)


class ConversationThread:
    """Remote dialogue contexts. Every call is a direct round trip; nothing is kept locally."""

    def __init__(self, client: AgentsClient) -> None:
        self.client = client

    async def create(self) -> ThreadHandle:
        thread = await self.client.create_thread()
        logger.info(f"Created thread {thread.id}")
        return thread

    async def append_message(self, thread_id: str, role: MessageRole | str, text: str) -> ThreadMessage:
        role_value = role.value if isinstance(role, MessageRole) else role
        message = await self.client.create_message(thread_id, role_value, text)
        logger.debug(f"Appended {role_value} message to thread {thread_id}")
        return message
