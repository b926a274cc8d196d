from __future__ import annotations

from joke_api.core.logging_config import get_logger

from .client import AgentsClient
from .errors import NoAssistantReply

logger = get_logger(__name__)

# Only the newest page is scanned; an assistant reply older than this is reported as missing.
REPLY_PAGE_SIZE = 20


class ReplyExtractor:
    """Finds the most recent assistant-authored text on a thread."""

    def __init__(self, client: AgentsClient, page_size: int = REPLY_PAGE_SIZE) -> None:
        self.client = client
        self.page_size = page_size

    async def latest_assistant_text(self, thread_id: str) -> str:
        """
        Return the first text block of the newest assistant message.

        Messages are read newest-first, one page of ``page_size``.

        Raises:
            NoAssistantReply: No assistant message with text content is on the page.
        """
        page = await self.client.list_messages(thread_id, order="desc", limit=self.page_size)
        for message in page.data:
            if not message.is_assistant:
                continue
            for block in message.content:
                text = block.text_value
                if text:
                    return text
        logger.warning(f"No assistant reply among the {len(page.data)} newest messages of thread {thread_id}")
        raise NoAssistantReply(thread_id)
