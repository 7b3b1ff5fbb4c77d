"""Unit tests for configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from workflow_engine.engine.config import EngineSettings
from workflow_engine.engine.workflow.repository import (
    InMemoryWorkflowRepository,
    JsonFileWorkflowRepository,
)
from workflow_engine.server.config import ServerSettings


def test_engine_settings_defaults() -> None:
    settings = EngineSettings()

    assert settings.log_level == "INFO"
    assert settings.store_backend == "memory"
    assert settings.state_path == Path("workflow_state")
    assert isinstance(settings.build_repository(), InMemoryWorkflowRepository)


def test_engine_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("WORKFLOW_STORE_BACKEND", "json")
    monkeypatch.setenv("WORKFLOW_STATE_PATH", str(tmp_path / "state"))

    settings = EngineSettings()

    assert settings.log_level == "debug"
    repo = settings.build_repository()
    assert isinstance(repo, JsonFileWorkflowRepository)
    assert repo.definitions_file == tmp_path / "state" / "definitions.json"


def test_engine_settings_reads_env_file(tmp_path: Path) -> None:
    env_file = tmp_path / "custom.env"
    env_file.write_text("WORKFLOW_STORE_BACKEND=json\n", encoding="utf-8")

    settings = EngineSettings(_env_file=env_file)

    assert settings.store_backend == "json"


def test_engine_settings_rejects_unknown_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WORKFLOW_STORE_BACKEND", "postgres")
    with pytest.raises(ValidationError):
        EngineSettings()


def test_server_settings_cors_parsing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WORKFLOW_CORS_ORIGINS", "http://a.test, ,http://b.test")

    settings = ServerSettings()

    assert settings.parsed_cors_origins() == ["http://a.test", "http://b.test"]
    assert settings.port == 8000
    assert settings.store_backend == "memory"
