"""Test configuration and fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from workflow_engine.engine.logging import JsonFormatter
from workflow_engine.engine.workflow.models import Action, State, WorkflowDefinitionDraft
from workflow_engine.engine.workflow.repository import InMemoryWorkflowRepository
from workflow_engine.engine.workflow.service import WorkflowService


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep a developer's .env / environment out of the tests."""
    monkeypatch.chdir(tmp_path)
    for var in (
        "LOG_LEVEL",
        "WORKFLOW_STORE_BACKEND",
        "WORKFLOW_STATE_PATH",
        "WORKFLOW_CORS_ORIGINS",
        "WORKFLOW_HOST",
        "WORKFLOW_PORT",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    """configure_logging() rewires the root logger; undo it after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, JsonFormatter):
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def approval_draft() -> WorkflowDefinitionDraft:
    """Provide the draft -> review -> approved/rejected document workflow."""
    return WorkflowDefinitionDraft(
        name="Document Approval",
        description="Simple document approval workflow",
        states=[
            State(id="draft", name="Draft", is_initial=True),
            State(id="review", name="Under Review"),
            State(id="approved", name="Approved", is_final=True),
            State(id="rejected", name="Rejected", is_final=True),
        ],
        actions=[
            Action(
                id="submit", name="Submit for Review", from_states=["draft"], to_state="review"
            ),
            Action(id="approve", name="Approve", from_states=["review"], to_state="approved"),
            Action(id="reject", name="Reject", from_states=["review"], to_state="rejected"),
        ],
    )


@pytest.fixture
def repository() -> InMemoryWorkflowRepository:
    return InMemoryWorkflowRepository()


@pytest.fixture
def service(repository: InMemoryWorkflowRepository) -> WorkflowService:
    return WorkflowService(repository=repository)
