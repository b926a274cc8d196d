"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(default=True, description="Allow credentials in CORS requests")
    allow_methods: list[str] = Field(default=["*"], description="Allowed HTTP methods")
    allow_headers: list[str] = Field(default=["*"], description="Allowed HTTP headers")


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Server Configuration
    # =====================================================================
    server_host: str = Field(default="0.0.0.0", alias="HOST", description="Host address to bind to")
    server_port: int = Field(default=8000, alias="PORT", description="Port number to listen on")
    cors_origins: str = Field(
        default="*",
        alias="CORS_ORIGINS",
        description="Allowed CORS origins: '*' or a comma-separated list",
    )

    # =====================================================================
    # Agent Platform Configuration
    # =====================================================================
    project_endpoint: str = Field(
        default="project_endpoint",
        alias="PROJECT_ENDPOINT",
        description="Base URL of the AI project hosting the agents",
    )
    project_api_key: Optional[str] = Field(
        default=None,
        alias="PROJECT_API_KEY",
        description="Bearer token used to authenticate against the agent platform",
    )
    api_version: str = Field(default="v1", alias="AGENTS_API_VERSION", description="Agents REST API version")
    agent_id: str = Field(default="agent_id", alias="AGENT_ID", description="Agent that tells new jokes")
    feedback_agent_id: Optional[str] = Field(
        default=None,
        alias="FEEDBACK_AGENT_ID",
        description="Agent that reacts to feedback (defaults to AGENT_ID)",
    )
    run_poll_interval: float = Field(
        default=1.0,
        alias="RUN_POLL_INTERVAL",
        description="Seconds to wait between run status polls",
    )
    request_timeout: float = Field(
        default=30.0,
        alias="REQUEST_TIMEOUT",
        description="Timeout in seconds for a single request to the agent platform",
    )

    # =====================================================================
    # Logging Configuration
    # =====================================================================
    log_level: str = Field(
        default="INFO",
        alias="JOKE_API_LOG_LEVEL",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(default="detailed", alias="LOG_FORMAT", description="simple, detailed or json")
    log_file_dir: str = Field(default="logs", alias="LOG_FILE_DIR", description="Directory for log files")
    enable_file_logging: bool = Field(default=False, alias="ENABLE_FILE_LOGGING")

    # =====================================================================
    # Telemetry Configuration
    # =====================================================================
    logfire_enabled: bool = Field(default=False, alias="LOGFIRE_ENABLED", description="Export spans to Logfire")
    logfire_token: Optional[str] = Field(default=None, alias="LOGFIRE_TOKEN", description="Logfire write token")
    logfire_environment: str = Field(default="development", alias="LOGFIRE_ENVIRONMENT")
    logfire_service_name: str = Field(default="joke-api", alias="LOGFIRE_SERVICE_NAME")
    logfire_service_version: str = Field(default="1.0.0", alias="LOGFIRE_SERVICE_VERSION")
    logfire_trace_httpx: bool = Field(default=True, alias="LOGFIRE_TRACE_HTTPX")
    logfire_trace_fastapi: bool = Field(default=True, alias="LOGFIRE_TRACE_FASTAPI")
    logfire_capture_httpx_content: bool = Field(default=True, alias="LOGFIRE_CAPTURE_HTTPX_CONTENT")

    @model_validator(mode="after")
    def _default_feedback_agent(self) -> "Settings":
        if not self.feedback_agent_id:
            self.feedback_agent_id = self.agent_id
        return self

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration parsed from CORS_ORIGINS."""
        raw = self.cors_origins.strip()
        if raw == "*":
            return CORSConfig(origins=["*"])
        origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
        return CORSConfig(origins=origins)


settings = Settings()
