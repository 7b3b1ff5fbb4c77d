"""Workflow service: validator + transition engine over an injected repository.

Every operation returns either its value or a typed error from
`workflow_engine.engine.workflow.errors`; nothing here raises for a bad request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .errors import (
    DefinitionNotFound,
    InstanceNotFound,
    LookupFailure,
    NoInitialState,
    TransitionError,
    ValidationError,
)
from .models import WorkflowDefinition, WorkflowDefinitionDraft, WorkflowInstance
from .repository import WorkflowRepository
from .transitions import apply_action
from .validation import validate_definition

logger = logging.getLogger(__name__)


@dataclass
class WorkflowService:
    repository: WorkflowRepository

    # --- definitions ---------------------------------------------------------

    def create_definition(
        self, draft: WorkflowDefinitionDraft
    ) -> WorkflowDefinition | ValidationError:
        definition = WorkflowDefinition.from_draft(draft)
        result = validate_definition(definition)
        if isinstance(result, ValidationError):
            logger.warning(
                "Workflow definition rejected",
                extra={
                    "kind": result.kind,
                    "reason": result.message,
                    "definition_name": draft.name,
                },
            )
            return result

        self.repository.put_definition(definition)
        logger.info(
            "Workflow definition created",
            extra={
                "definition_id": definition.id,
                "states": len(definition.states),
                "actions": len(definition.actions),
            },
        )
        return definition

    def get_definition(self, definition_id: str) -> WorkflowDefinition | None:
        return self.repository.get_definition(definition_id)

    def list_definitions(self) -> list[WorkflowDefinition]:
        return self.repository.list_definitions()

    # --- instances -----------------------------------------------------------

    def create_instance(
        self, definition_id: str, name: str = ""
    ) -> WorkflowInstance | DefinitionNotFound | NoInitialState:
        definition = self.repository.get_definition(definition_id)
        if definition is None:
            return DefinitionNotFound(definition_id=definition_id)

        initial = definition.initial_state()
        if initial is None:
            return NoInitialState(definition_id=definition_id)

        instance = WorkflowInstance(
            definition_id=definition.id, name=name, current_state_id=initial.id
        )
        self.repository.put_instance(instance)
        logger.info(
            "Workflow instance created",
            extra={
                "instance_id": instance.id,
                "definition_id": definition.id,
                "state_id": initial.id,
            },
        )
        return instance

    def get_instance(self, instance_id: str) -> WorkflowInstance | None:
        return self.repository.get_instance(instance_id)

    def list_instances(self) -> list[WorkflowInstance]:
        return self.repository.list_instances()

    def list_instances_for_definition(
        self, definition_id: str
    ) -> list[WorkflowInstance] | DefinitionNotFound:
        if self.repository.get_definition(definition_id) is None:
            return DefinitionNotFound(definition_id=definition_id)
        return [i for i in self.repository.list_instances() if i.definition_id == definition_id]

    def execute_action(
        self, instance_id: str, action_id: str
    ) -> WorkflowInstance | LookupFailure | TransitionError:
        """Fire `action_id` on an instance.

        The instance lock is held from the first read to the final put, so
        concurrent calls on the same instance observe each other's result. On
        any failure the stored instance is left as it was.
        """

        with self.repository.instance_lock(instance_id):
            instance = self.repository.get_instance(instance_id)
            if instance is None:
                return InstanceNotFound(instance_id=instance_id)

            definition = self.repository.get_definition(instance.definition_id)
            if definition is None:
                logger.error(
                    "Instance references a missing workflow definition",
                    extra={"instance_id": instance.id, "definition_id": instance.definition_id},
                )
                return DefinitionNotFound(definition_id=instance.definition_id)

            updated = apply_action(definition, instance, action_id)
            if isinstance(updated, TransitionError):
                logger.warning(
                    "Action rejected",
                    extra={
                        "instance_id": instance.id,
                        "action_id": action_id,
                        "state_id": instance.current_state_id,
                        "kind": updated.kind,
                    },
                )
                return updated

            self.repository.put_instance(updated)

        logger.info(
            "Action executed",
            extra={
                "instance_id": updated.id,
                "action_id": action_id,
                "from_state_id": instance.current_state_id,
                "to_state_id": updated.current_state_id,
            },
        )
        return updated
