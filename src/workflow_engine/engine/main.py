"""CLI entrypoint for the workflow engine.

Storage follows `WORKFLOW_STORE_BACKEND`. With the default `memory` backend
every invocation starts empty, so set `WORKFLOW_STORE_BACKEND=json` to carry
definitions and instances between commands.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from workflow_engine import __version__
from workflow_engine.engine.config import EngineSettings
from workflow_engine.engine.logging import configure_logging
from workflow_engine.engine.workflow.errors import WorkflowError
from workflow_engine.engine.workflow.models import WorkflowDefinitionDraft
from workflow_engine.engine.workflow.service import WorkflowService

logger = logging.getLogger(__name__)

EXIT_CONFIG_ERROR = 2
EXIT_WORKFLOW_ERROR = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-engine",
        description="Define finite state machine workflows and drive their instances",
    )
    parser.add_argument("--version", action="version", version=f"workflow-engine {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    create_definition = subparsers.add_parser(
        "create-definition", help="Validate and store a workflow definition"
    )
    create_definition.add_argument(
        "--file",
        required=True,
        type=Path,
        help="JSON file with name, description, states and actions (camelCase keys)",
    )

    subparsers.add_parser("list-definitions", help="List stored workflow definitions")

    show_definition = subparsers.add_parser("show-definition", help="Show one definition")
    show_definition.add_argument("--id", dest="definition_id", required=True)

    create_instance = subparsers.add_parser(
        "create-instance", help="Start a new instance at the definition's initial state"
    )
    create_instance.add_argument("--definition-id", required=True)
    create_instance.add_argument("--name", default="", help="Optional display name")

    list_instances = subparsers.add_parser("list-instances", help="List workflow instances")
    list_instances.add_argument(
        "--definition-id", default=None, help="Only list instances of this definition"
    )

    show_instance = subparsers.add_parser("show-instance", help="Show one instance")
    show_instance.add_argument("--id", dest="instance_id", required=True)

    execute = subparsers.add_parser("execute", help="Execute an action on an instance")
    execute.add_argument("--instance-id", required=True)
    execute.add_argument("--action-id", required=True)

    serve = subparsers.add_parser("serve", help="Run the REST API with uvicorn")
    serve.add_argument("--host", default=None, help="Bind address (default: WORKFLOW_HOST)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: WORKFLOW_PORT)")

    return parser


def _dump(value: BaseModel | Sequence[BaseModel]) -> str:
    if isinstance(value, BaseModel):
        return value.model_dump_json(by_alias=True, indent=2)
    payload = [item.model_dump(mode="json", by_alias=True) for item in value]
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _report(error: WorkflowError) -> int:
    logger.warning(error.message, extra={"kind": error.kind})
    print(f"{error.kind}: {error.message}", file=sys.stderr)
    return EXIT_WORKFLOW_ERROR


def _serve(host: str | None, port: int | None) -> int:
    import uvicorn

    from workflow_engine.server.config import ServerSettings

    settings = ServerSettings()
    uvicorn.run(
        "workflow_engine.server.app:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        log_config=None,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = EngineSettings()
    except PydanticValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_CONFIG_ERROR

    configure_logging(settings.log_level)

    try:
        if args.command == "serve":
            return _serve(args.host, args.port)

        service = WorkflowService(repository=settings.build_repository())

        if args.command == "create-definition":
            try:
                draft = WorkflowDefinitionDraft.model_validate_json(
                    args.file.read_text(encoding="utf-8")
                )
            except PydanticValidationError as e:
                print(f"Invalid workflow definition file {args.file}:", file=sys.stderr)
                print(e, file=sys.stderr)
                return EXIT_WORKFLOW_ERROR
            created = service.create_definition(draft)
            if isinstance(created, WorkflowError):
                return _report(created)
            print(_dump(created))
            return 0

        if args.command == "list-definitions":
            print(_dump(service.list_definitions()))
            return 0

        if args.command == "show-definition":
            definition = service.get_definition(args.definition_id)
            if definition is None:
                print(f"Workflow definition '{args.definition_id}' not found", file=sys.stderr)
                return EXIT_WORKFLOW_ERROR
            print(_dump(definition))
            return 0

        if args.command == "create-instance":
            instance = service.create_instance(args.definition_id, name=args.name)
            if isinstance(instance, WorkflowError):
                return _report(instance)
            print(_dump(instance))
            return 0

        if args.command == "list-instances":
            if args.definition_id is None:
                print(_dump(service.list_instances()))
                return 0
            scoped = service.list_instances_for_definition(args.definition_id)
            if isinstance(scoped, WorkflowError):
                return _report(scoped)
            print(_dump(scoped))
            return 0

        if args.command == "show-instance":
            found = service.get_instance(args.instance_id)
            if found is None:
                print(f"Workflow instance '{args.instance_id}' not found", file=sys.stderr)
                return EXIT_WORKFLOW_ERROR
            print(_dump(found))
            return 0

        if args.command == "execute":
            updated = service.execute_action(args.instance_id, args.action_id)
            if isinstance(updated, WorkflowError):
                return _report(updated)
            print(_dump(updated))
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return EXIT_CONFIG_ERROR

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
