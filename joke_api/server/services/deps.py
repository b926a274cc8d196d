"""
Orchestrator Dependency.

Provides the application's AgentRunOrchestrator to API endpoints.
"""

from typing import Annotated

from fastapi import Depends

from joke_api.server.services.orchestrator import (
    AgentRunOrchestrator,
    get_orchestrator,
)

OrchestratorDep = Annotated[AgentRunOrchestrator, Depends(get_orchestrator)]
