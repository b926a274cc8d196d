from __future__ import annotations

from joke_api.core.logging_config import get_logger

from .client import AgentsClient
from .models import AgentRunRecord

logger = get_logger(__name__)


class RunExecutor:
    """Starts an agent run on a thread and waits for it to reach a terminal status."""

    def __init__(self, client: AgentsClient) -> None:
        self.client = client

    async def start_and_await(self, thread_id: str, agent_id: str) -> AgentRunRecord:
        """
        Start a run of ``agent_id`` against ``thread_id`` and poll it to completion.

        A ``failed`` run is returned like any other terminal run, with its
        ``last_error`` populated. Only communication faults raise.

        Raises:
            RemoteUnavailable: The start or poll round trip failed.
        """
        run = await self.client.create_run(thread_id, agent_id)
        logger.info(f"Started run {run.id} of agent {agent_id} on thread {thread_id}")
        run = await self.client.poll_run_until_done(thread_id, run)
        logger.info(f"Run {run.id} finished with status {run.status}")
        return run
