"""Unit tests for the argparse CLI.

The CLI is exercised against the JSON backend so state carries across calls,
and results are checked through the repository rather than stdout (stdout also
carries the JSON log lines).
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from workflow_engine.engine.main import EXIT_WORKFLOW_ERROR, build_parser, main
from workflow_engine.engine.workflow.repository import JsonFileWorkflowRepository

DEFINITION = {
    "name": "Tickets",
    "states": [
        {"id": "open", "name": "Open", "isInitial": True},
        {"id": "closed", "name": "Closed", "isFinal": True},
    ],
    "actions": [{"id": "close", "name": "Close", "fromStates": ["open"], "toState": "closed"}],
}


@pytest.fixture
def state_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    path = tmp_path / "state"
    monkeypatch.setenv("WORKFLOW_STORE_BACKEND", "json")
    monkeypatch.setenv("WORKFLOW_STATE_PATH", str(path))
    return path


def _write_definition(tmp_path: Path, payload: dict[str, object]) -> Path:
    path = tmp_path / "definition.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_cli_end_to_end(state_dir: Path, tmp_path: Path) -> None:
    assert main(["create-definition", "--file", str(_write_definition(tmp_path, DEFINITION))]) == 0

    repo = JsonFileWorkflowRepository(state_dir)
    [definition] = repo.list_definitions()

    assert main(["create-instance", "--definition-id", definition.id, "--name", "T-1"]) == 0
    [instance] = repo.list_instances()
    assert instance.name == "T-1"
    assert instance.current_state_id == "open"

    assert main(["execute", "--instance-id", instance.id, "--action-id", "close"]) == 0
    updated = repo.get_instance(instance.id)
    assert updated is not None
    assert updated.current_state_id == "closed"

    assert main(["list-definitions"]) == 0
    assert main(["list-instances", "--definition-id", definition.id]) == 0
    assert main(["show-definition", "--id", definition.id]) == 0
    assert main(["show-instance", "--id", instance.id]) == 0


def test_cli_reports_rejected_definition(
    state_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    dangling = {"id": "x", "name": "X", "fromStates": ["open"], "toState": "nonexistent"}
    bad = {**DEFINITION, "actions": [dangling]}

    code = main(["create-definition", "--file", str(_write_definition(tmp_path, bad))])

    assert code == EXIT_WORKFLOW_ERROR
    assert "UnknownToState" in capsys.readouterr().err
    assert JsonFileWorkflowRepository(state_dir).list_definitions() == []


def test_cli_reports_invalid_transition(
    state_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    main(["create-definition", "--file", str(_write_definition(tmp_path, DEFINITION))])
    repo = JsonFileWorkflowRepository(state_dir)
    [definition] = repo.list_definitions()
    main(["create-instance", "--definition-id", definition.id])
    [instance] = repo.list_instances()
    main(["execute", "--instance-id", instance.id, "--action-id", "close"])
    capsys.readouterr()

    code = main(["execute", "--instance-id", instance.id, "--action-id", "close"])

    assert code == EXIT_WORKFLOW_ERROR
    assert "FinalStateViolation" in capsys.readouterr().err


def test_cli_missing_instance(state_dir: Path) -> None:
    assert main(["show-instance", "--id", "nope"]) == EXIT_WORKFLOW_ERROR
    assert main(["execute", "--instance-id", "nope", "--action-id", "x"]) == EXIT_WORKFLOW_ERROR


def test_cli_rejects_malformed_file(state_dir: Path, tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text('{"states": "not a list"}', encoding="utf-8")
    assert main(["create-definition", "--file", str(path)]) == EXIT_WORKFLOW_ERROR


def test_cli_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WORKFLOW_STORE_BACKEND", "bogus")
    assert main(["list-definitions"]) == 2
