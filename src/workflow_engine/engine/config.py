"""Configuration for the workflow engine.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The engine itself needs very little: a log level and where to keep
definitions and instances.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from workflow_engine.engine.workflow.repository import (
    InMemoryWorkflowRepository,
    JsonFileWorkflowRepository,
    WorkflowRepository,
)

StoreBackend = Literal["memory", "json"]


class EngineSettings(BaseSettings):
    """Settings for the workflow engine.

    Environment variables:
    - LOG_LEVEL               (optional)
    - WORKFLOW_STORE_BACKEND  (optional; `memory` or `json`)
    - WORKFLOW_STATE_PATH     (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `EngineSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    store_backend: StoreBackend = Field(
        default="memory",
        validation_alias="WORKFLOW_STORE_BACKEND",
        description=(
            "Where definitions and instances live. `memory` is process-local and starts "
            "empty on every run; `json` persists to WORKFLOW_STATE_PATH."
        ),
    )

    state_path: Path = Field(
        default=Path("workflow_state"),
        validation_alias="WORKFLOW_STATE_PATH",
        description="Directory where the JSON store keeps definitions.json and instances.json",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    def build_repository(self) -> WorkflowRepository:
        if self.store_backend == "json":
            return JsonFileWorkflowRepository(self.state_path)
        return InMemoryWorkflowRepository()
