from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from joke_api.server.core.config import Settings
from joke_api.server.services.orchestrator import AgentRunOrchestrator


@pytest.fixture
def test_settings() -> Settings:
    return Settings(agent_id="agent_id", feedback_agent_id="feedback_agent", run_poll_interval=0)


@pytest.fixture
def orchestrator(agents_client, test_settings, tracer) -> AgentRunOrchestrator:
    return AgentRunOrchestrator(agents_client, test_settings, tracer=tracer)


@pytest_asyncio.fixture(name="client")
async def client_fixture(orchestrator: AgentRunOrchestrator) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app, with the orchestrator bound to the fake platform."""
    from joke_api.server.main import app
    from joke_api.server.services.orchestrator import get_orchestrator

    app.dependency_overrides[get_orchestrator] = lambda: orchestrator

    # Unhandled errors are rendered by the global handler instead of surfacing in the test.
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()
