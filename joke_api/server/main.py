"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request timing), registers exception handlers and includes the API routers.
The shared agent platform client and the orchestrator are built once in the
application lifespan.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from joke_api import __version__
from joke_api.agents import AgentsClient
from joke_api.core.logging_config import get_logger, setup_logging
from joke_api.core.monitoring import initialize_telemetry

from .api import health, jokes
from .core.config import Settings, settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware
from .services.orchestrator import AgentRunOrchestrator

setup_logging()
logger = get_logger(__name__)


def build_client(config: Settings) -> AgentsClient:
    return AgentsClient(
        config.project_endpoint,
        api_key=config.project_api_key,
        api_version=config.api_version,
        timeout=config.request_timeout,
        poll_interval=config.run_poll_interval,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Startup builds the shared platform client and the orchestrator.
    Shutdown closes the client's connection pool.
    """
    logger.info("Starting up Joke API Server...")
    client = build_client(settings)
    app.state.orchestrator = AgentRunOrchestrator(client, settings)

    yield

    logger.info("Shutting down Joke API Server...")
    await client.aclose()


app = FastAPI(
    title="Joke API",
    description="""
    Joke API Server

    Tells jokes through a remote conversational agent and takes like/dislike
    feedback on the same conversation thread. Every turn is traced.
    """,
    version=__version__,
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)

app.include_router(health.router, tags=["health"])
app.include_router(jokes.router, tags=["jokes"])

# A telemetry failure is logged and the server starts with no-op spans.
initialize_telemetry(app)
