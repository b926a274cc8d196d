"""Domain models for agent platform payloads.

Payloads arrive as loosely typed JSON. They are validated here, once, at the
client boundary so the rest of the service only sees these models.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PlatformModel(BaseModel):
    """
    Base model for platform payloads.

    - ``populate_by_name=True``: allow initialization by alias or field name.
    - ``extra="ignore"``: the platform adds fields over time; unknown ones are dropped.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def _first_present(payload: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


class MessageRole(str, Enum):
    user = "user"
    assistant = "assistant"


class RunStatus(str, Enum):
    queued = "queued"
    in_progress = "in_progress"
    requires_action = "requires_action"
    cancelling = "cancelling"
    cancelled = "cancelled"
    failed = "failed"
    completed = "completed"
    expired = "expired"
    incomplete = "incomplete"

    @property
    def is_terminal(self) -> bool:
        return self.value not in ACTIVE_RUN_STATUSES


# A run in any other status, including ones added to the platform later, is done.
ACTIVE_RUN_STATUSES = frozenset(
    {
        RunStatus.queued.value,
        RunStatus.in_progress.value,
        RunStatus.requires_action.value,
        RunStatus.cancelling.value,
    }
)


class AgentDescriptor(PlatformModel):
    id: str
    name: Optional[str] = None
    model: Optional[str] = None


class ThreadHandle(PlatformModel):
    id: str
    created_at: Optional[datetime] = None


class TextValue(PlatformModel):
    value: Optional[str] = None


class MessageContent(PlatformModel):
    """One content block of a message, tagged by ``type`` (``text``, ``image_file``, ...)."""

    type: str
    text: Optional[TextValue] = None

    @property
    def text_value(self) -> Optional[str]:
        if self.type != "text" or self.text is None or not self.text.value:
            return None
        return self.text.value


class ThreadMessage(PlatformModel):
    id: Optional[str] = None
    thread_id: Optional[str] = None
    role: str
    content: List[MessageContent] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_content(cls, data: Any) -> Any:
        # Non-list content carries no blocks we can read.
        if isinstance(data, dict) and not isinstance(data.get("content"), list):
            data = {**data, "content": []}
        return data

    @property
    def is_assistant(self) -> bool:
        return self.role == MessageRole.assistant.value


class MessagePage(PlatformModel):
    data: List[ThreadMessage] = Field(default_factory=list)
    first_id: Optional[str] = None
    last_id: Optional[str] = None
    has_more: bool = False


class RunUsage(PlatformModel):
    """
    Token counters of a run.

    Both camelCase and snake_case spellings are accepted and the camelCase one
    wins when both are present. The platform-native ``prompt_tokens`` /
    ``completion_tokens`` are used only when neither spelling is present.
    """

    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _resolve_aliases(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            "input_tokens": _first_present(data, "inputTokens", "input_tokens", "promptTokens", "prompt_tokens"),
            "output_tokens": _first_present(
                data, "outputTokens", "output_tokens", "completionTokens", "completion_tokens"
            ),
            "total_tokens": _first_present(data, "totalTokens", "total_tokens"),
        }


class AgentRunRecord(PlatformModel):
    id: str
    thread_id: Optional[str] = None
    agent_id: Optional[str] = Field(default=None, alias="assistant_id")
    status: str
    usage: Optional[RunUsage] = None
    last_error: Optional[Dict[str, Any]] = None

    @model_validator(mode="before")
    @classmethod
    def _resolve_aliases(cls, data: Any) -> Any:
        if isinstance(data, dict) and "last_error" not in data and "lastError" in data:
            data = {**data, "last_error": data["lastError"]}
        return data

    @property
    def failed(self) -> bool:
        return self.status == RunStatus.failed.value

    @property
    def is_terminal(self) -> bool:
        return self.status not in ACTIVE_RUN_STATUSES
