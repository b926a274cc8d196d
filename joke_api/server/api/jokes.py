"""
Joke Endpoints.

This module exposes the two conversational operations:
- ``GET /joke`` starts a new thread and returns the agent's first joke
- ``GET /feedback`` reports how a joke landed and returns a new one on the same thread

Both reply with ``{"message", "threadId"}``. A run that fails on the agent
platform is reported as HTTP 500 with the platform's error detail.
"""

from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from joke_api.server.errors import ClientInputError
from joke_api.core.logging_config import get_logger
from joke_api.server.schemas import (
    ClientErrorResponse,
    JokeReply,
    RunFailed,
    RunFailedResponse,
)
from joke_api.server.services.deps import OrchestratorDep
from joke_api.server.services.orchestrator import TurnOutcome

logger = get_logger(__name__)
router = APIRouter()

MISSING_FEEDBACK_PARAMS = "Both 'reaction' and 'threadId' query params are required"

_ERROR_RESPONSES = {
    400: {"model": ClientErrorResponse, "description": "Missing query parameters."},
    500: {"model": RunFailedResponse, "description": "The agent run failed on the platform."},
}


def _to_response(outcome: TurnOutcome) -> JSONResponse:
    if isinstance(outcome, RunFailed):
        body = RunFailedResponse(details=outcome.last_error)
        return JSONResponse(status_code=500, content=body.model_dump())
    return JSONResponse(status_code=200, content=outcome.model_dump(by_alias=True))


@router.get(
    "/joke",
    response_model=JokeReply,
    responses=_ERROR_RESPONSES,
    summary="Tell a Joke",
    description="Creates a new conversation thread and asks the agent for one joke.",
    response_description="The joke and the thread it was told on.",
)
async def get_joke(orchestrator: OrchestratorDep):
    """
    Get a new joke.

    Returns the joke text together with the ``threadId`` needed to send feedback.
    """
    logger.info("Requesting a new joke")
    outcome = await orchestrator.new_joke()
    return _to_response(outcome)


@router.get(
    "/feedback",
    response_model=JokeReply,
    responses=_ERROR_RESPONSES,
    summary="Send Feedback",
    description="Reports the reaction to the previous joke on a thread and asks for another one.",
    response_description="The new joke and the thread it was told on.",
)
async def submit_feedback(
    orchestrator: OrchestratorDep,
    reaction: Optional[str] = None,
    thread_id: Optional[str] = Query(default=None, alias="threadId"),
):
    """
    Send a reaction (for example ``like`` or ``dislike``) for the last joke on ``threadId``.

    - **reaction**: How the previous joke was received.
    - **threadId**: Thread returned by ``/joke``.
    """
    if not reaction or not thread_id:
        raise ClientInputError(MISSING_FEEDBACK_PARAMS)

    logger.info(f"Submitting feedback '{reaction}' on thread {thread_id}")
    outcome = await orchestrator.submit_feedback(reaction, thread_id)
    return _to_response(outcome)
