from __future__ import annotations

from typing import Optional, Union

from fastapi import Request
from opentelemetry.trace import Span, SpanKind, Tracer

from joke_api.agents import AgentsClient, ConversationThread, ReplyExtractor, RunExecutor
from joke_api.agents.models import AgentRunRecord, MessageRole
from joke_api.core import telemetry_schema
from joke_api.core.logging_config import get_logger
from joke_api.core.tracing import with_span
from joke_api.server.core.config import Settings
from joke_api.server.schemas import JokeReply, RunFailed

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a standup comedian, return back only one joke. The user will either like or dislike the joke"
)
FEEDBACK_PROMPT = "The result of the joke was: {reaction}, return another joke based on this information"

TurnOutcome = Union[JokeReply, RunFailed]


class AgentRunOrchestrator:
    """
    Drives one conversational turn against the agent platform.

    Each operation runs inside its own span: the thread and agent ids, the run
    id and token usage are recorded as attributes, the injected prompt and the
    extracted reply as events. A run that ends ``failed`` is returned as a
    ``RunFailed`` outcome and leaves the span status OK; exceptions mark the
    span ERROR and propagate.
    """

    def __init__(self, client: AgentsClient, settings: Settings, tracer: Optional[Tracer] = None) -> None:
        self.client = client
        self.settings = settings
        self.tracer = tracer
        self.threads = ConversationThread(client)
        self.runs = RunExecutor(client)
        self.replies = ReplyExtractor(client)

    @with_span("joke.run", kind=SpanKind.SERVER)
    async def new_joke(self, *, span: Span) -> TurnOutcome:
        """Start a fresh thread, prime it with the comedian prompt and return the first joke."""
        agent = await self.client.get_agent(self.settings.agent_id)
        thread = await self.threads.create()

        telemetry_schema.record_conversation(span, thread.id, agent.id)
        telemetry_schema.record_system_message(span, thread.id, SYSTEM_PROMPT)

        await self.threads.append_message(thread.id, MessageRole.user, SYSTEM_PROMPT)
        return await self._run_turn(span, thread.id, agent.id)

    @with_span("feedback.run", kind=SpanKind.SERVER)
    async def submit_feedback(self, reaction: str, thread_id: str, *, span: Span) -> TurnOutcome:
        """Tell the agent how the last joke landed on ``thread_id`` and return a new joke."""
        await self.threads.append_message(thread_id, MessageRole.user, FEEDBACK_PROMPT.format(reaction=reaction))
        agent = await self.client.get_agent(self.settings.feedback_agent_id or self.settings.agent_id)

        telemetry_schema.record_conversation(span, thread_id, agent.id)
        return await self._run_turn(span, thread_id, agent.id)

    async def _run_turn(self, span: Span, thread_id: str, agent_id: str) -> TurnOutcome:
        run: AgentRunRecord = await self.runs.start_and_await(thread_id, agent_id)
        telemetry_schema.record_run(span, thread_id, run)

        if run.failed:
            logger.error(f"Run failed: run={run.id} thread={thread_id} last_error={run.last_error}")
            return RunFailed(thread_id=thread_id, run_id=run.id, last_error=run.last_error)

        message_text = await self.replies.latest_assistant_text(thread_id)
        telemetry_schema.record_choice(span, thread_id, run.id, message_text)
        return JokeReply(message=message_text, thread_id=thread_id)


def get_orchestrator(request: Request) -> AgentRunOrchestrator:
    """Return the orchestrator built during application startup."""
    return request.app.state.orchestrator
