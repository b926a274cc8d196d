"""
Joke API Server Package.

Subpackages:
    api: FastAPI route definitions.
    core: Configuration settings.
    exception_handlers: Mapping of exceptions onto JSON error responses.
    middleware: Request timing and logging.
    services: The traced agent-run orchestrator and its dependency.
"""
