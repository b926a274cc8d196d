"""
API Schemas.

This module contains Pydantic models used for API responses and for the
outcomes the orchestrator hands back to the routes.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class JokeReply(BaseModel):
    """
    Outcome of a successful conversational turn.

    Serialized with camelCase keys, e.g. ``{"message": "...", "threadId": "..."}``.
    """

    message: str = Field(..., description="The assistant reply text.", examples=["Why did the chicken..."])
    thread_id: str = Field(
        ...,
        alias="threadId",
        description="Thread to pass back to /feedback to continue the conversation.",
        examples=["thread_abc123"],
    )

    model_config = ConfigDict(populate_by_name=True)


class RunFailed(BaseModel):
    """Outcome of a turn whose agent run reached the ``failed`` status."""

    thread_id: str
    run_id: Optional[str] = None
    last_error: Optional[Any] = None


class RunFailedResponse(BaseModel):
    error: str = Field(default="The agent run failed")
    details: Optional[Any] = Field(default=None, description="Error detail reported by the agent platform.")


class ClientErrorResponse(BaseModel):
    error: str = Field(..., examples=["Both 'reaction' and 'threadId' query params are required"])


class InternalErrorResponse(BaseModel):
    error: str = Field(default="Internal Server Error")
    msg: str = Field(..., description="Message of the unhandled exception.")
