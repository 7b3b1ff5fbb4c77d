#!/usr/bin/env python3
"""Programmatic workflow example.

This demonstrates using the engine components directly:

* load settings from `.env`
* create a document-approval workflow definition
* start an instance and walk it to a final state
* show the typed error returned for an action that cannot fire
"""

from __future__ import annotations

import argparse
from typing import Sequence

from workflow_engine.engine.config import EngineSettings
from workflow_engine.engine.logging import configure_logging
from workflow_engine.engine.workflow import (
    Action,
    State,
    WorkflowDefinitionDraft,
    WorkflowError,
    WorkflowService,
)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Walk a document through an approval workflow.")
    parser.add_argument(
        "--outcome",
        choices=["approve", "reject"],
        default="approve",
        help="Which action to take after review",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = EngineSettings()
    configure_logging(settings.log_level)

    service = WorkflowService(repository=settings.build_repository())
    definition = service.create_definition(
        WorkflowDefinitionDraft(
            name="Document Approval",
            states=[
                State(id="draft", name="Draft", is_initial=True),
                State(id="review", name="Under Review"),
                State(id="approved", name="Approved", is_final=True),
                State(id="rejected", name="Rejected", is_final=True),
            ],
            actions=[
                Action(id="submit", name="Submit", from_states=["draft"], to_state="review"),
                Action(id="approve", name="Approve", from_states=["review"], to_state="approved"),
                Action(id="reject", name="Reject", from_states=["review"], to_state="rejected"),
            ],
        )
    )
    if isinstance(definition, WorkflowError):
        print(f"Definition rejected: {definition}")
        return 1

    instance = service.create_instance(definition.id, name="example")
    if isinstance(instance, WorkflowError):
        print(f"Could not start instance: {instance}")
        return 1

    for action_id in ("submit", args.outcome, "submit"):
        result = service.execute_action(instance.id, action_id)
        if isinstance(result, WorkflowError):
            print(f"{action_id}: {result.kind}: {result}")
            continue
        print(f"{action_id}: now in '{result.current_state_id}' ({len(result.history)} steps)")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
