"""Configuration for the REST server.

The server reads everything the engine reads (log level, store backend, state
path) plus HTTP-specific settings.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from workflow_engine.engine.config import EngineSettings


class ServerSettings(EngineSettings):
    """Settings for the REST API."""

    host: str = Field(default="127.0.0.1", validation_alias="WORKFLOW_HOST")
    port: int = Field(default=8000, validation_alias="WORKFLOW_PORT", ge=1, le=65535)

    # Dev-friendly CORS. Override via WORKFLOW_CORS_ORIGINS=...
    cors_origins: str = Field(
        default="*",
        validation_alias="WORKFLOW_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins ('*' allows any).",
    )

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
