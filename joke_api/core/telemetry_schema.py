"""
GenAI span attribute and event schema.

Attribute keys, event names and event payload shapes recorded on the
orchestration spans. Downstream trace consumers key on these names, so they
must not change.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from opentelemetry.trace import Span

from joke_api.agents.models import AgentRunRecord, RunUsage

# Attribute values
GEN_AI_SYSTEM_VALUE = "azure_ai_projects"
GEN_AI_PROVIDER_NAME_VALUE = "azure_ai_projects_agents"

# Attribute keys
GEN_AI_SYSTEM = "gen_ai.system"
GEN_AI_PROVIDER_NAME = "gen_ai.provider.name"
GEN_AI_THREAD_ID = "gen_ai.thread.id"
GEN_AI_AGENT_ID = "gen_ai.agent.id"
GEN_AI_THREAD_RUN_ID = "gen_ai.thread.run.id"
GEN_AI_RESPONSE_ID = "gen_ai.response.id"
GEN_AI_USAGE_INPUT_TOKENS = "gen_ai.usage.input_tokens"
GEN_AI_USAGE_OUTPUT_TOKENS = "gen_ai.usage.output_tokens"

# Events
GEN_AI_SYSTEM_MESSAGE_EVENT = "gen_ai.system.message"
GEN_AI_CHOICE_EVENT = "gen_ai.choice"
GEN_AI_EVENT_CONTENT = "gen_ai.event.content"


def response_id(thread_id: str, run_id: Optional[str]) -> str:
    """Composite response id ``<thread id>/<run id>``."""
    return f"{thread_id}/{run_id or ''}"


def event_content(message: str, role: str) -> str:
    """JSON-encoded ``{message, role}`` event payload."""
    return json.dumps({"message": message, "role": role})


def usage_attributes(usage: Optional[RunUsage]) -> Dict[str, int]:
    """Token usage attributes; counters that are absent are left out."""
    if usage is None:
        return {}
    attributes: Dict[str, int] = {}
    if usage.input_tokens is not None:
        attributes[GEN_AI_USAGE_INPUT_TOKENS] = usage.input_tokens
    if usage.output_tokens is not None:
        attributes[GEN_AI_USAGE_OUTPUT_TOKENS] = usage.output_tokens
    return attributes


def record_conversation(span: Span, thread_id: str, agent_id: str) -> None:
    span.set_attribute(GEN_AI_SYSTEM, GEN_AI_SYSTEM_VALUE)
    span.set_attribute(GEN_AI_PROVIDER_NAME, GEN_AI_PROVIDER_NAME_VALUE)
    span.set_attribute(GEN_AI_THREAD_ID, thread_id)
    span.set_attribute(GEN_AI_AGENT_ID, agent_id)


def record_system_message(span: Span, thread_id: str, message: str) -> None:
    span.add_event(
        GEN_AI_SYSTEM_MESSAGE_EVENT,
        {
            GEN_AI_EVENT_CONTENT: event_content(message, "system"),
            GEN_AI_THREAD_ID: thread_id,
        },
    )


def record_run(span: Span, thread_id: str, run: AgentRunRecord) -> None:
    """Record run identity and token usage of a finished run."""
    if run.id:
        span.set_attribute(GEN_AI_THREAD_RUN_ID, run.id)
        span.set_attribute(GEN_AI_RESPONSE_ID, response_id(thread_id, run.id))
    for key, value in usage_attributes(run.usage).items():
        span.set_attribute(key, value)


def record_choice(span: Span, thread_id: str, run_id: Optional[str], message: str) -> None:
    attributes: Dict[str, Any] = {
        GEN_AI_EVENT_CONTENT: event_content(message, "assistant"),
        GEN_AI_THREAD_ID: thread_id,
        GEN_AI_THREAD_RUN_ID: run_id or "",
        GEN_AI_RESPONSE_ID: response_id(thread_id, run_id),
    }
    span.add_event(GEN_AI_CHOICE_EVENT, attributes)
