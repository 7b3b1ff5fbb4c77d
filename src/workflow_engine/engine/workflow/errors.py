"""Typed error results.

Validation, lookup and transition failures are returned to the caller as
values instead of being raised. Every error is a small frozen dataclass with a
stable `kind` string and an actionable `message`.

Callers narrow results with `isinstance`:

    result = service.execute_action(instance_id, action_id)
    if isinstance(result, TransitionError):
        ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, TypeAlias


@dataclass(frozen=True, slots=True)
class Ok:
    """Successful outcome of a check that produces no value."""


OK = Ok()


@dataclass(frozen=True, slots=True)
class WorkflowError:
    kind: ClassVar[str] = "WorkflowError"

    @property
    def message(self) -> str:
        return self.kind

    def __str__(self) -> str:
        return self.message

    def to_json(self) -> dict[str, object]:
        return {"kind": self.kind, "message": self.message}


# --- definition validation ----------------------------------------------------


@dataclass(frozen=True, slots=True)
class ValidationError(WorkflowError):
    kind: ClassVar[str] = "ValidationError"


@dataclass(frozen=True, slots=True)
class EmptyName(ValidationError):
    kind: ClassVar[str] = "EmptyName"

    @property
    def message(self) -> str:
        return "Workflow definition name cannot be empty."


@dataclass(frozen=True, slots=True)
class NoStates(ValidationError):
    kind: ClassVar[str] = "NoStates"

    @property
    def message(self) -> str:
        return "Workflow definition must have at least one state."


@dataclass(frozen=True, slots=True)
class DuplicateStateId(ValidationError):
    kind: ClassVar[str] = "DuplicateStateId"
    state_id: str

    @property
    def message(self) -> str:
        return f"Workflow definition contains duplicate state IDs: '{self.state_id}'."


@dataclass(frozen=True, slots=True)
class DuplicateActionId(ValidationError):
    kind: ClassVar[str] = "DuplicateActionId"
    action_id: str

    @property
    def message(self) -> str:
        return f"Workflow definition contains duplicate action IDs: '{self.action_id}'."


@dataclass(frozen=True, slots=True)
class InitialStateCountMismatch(ValidationError):
    kind: ClassVar[str] = "InitialStateCountMismatch"
    count: int

    @property
    def message(self) -> str:
        return (
            "Workflow definition must have exactly one initial state. "
            f"Found: {self.count}"
        )


@dataclass(frozen=True, slots=True)
class EmptyStateIdOrName(ValidationError):
    kind: ClassVar[str] = "EmptyStateIdOrName"
    state_id: str

    @property
    def message(self) -> str:
        if not self.state_id.strip():
            return "State ID cannot be empty."
        return f"State '{self.state_id}' name cannot be empty."


@dataclass(frozen=True, slots=True)
class EmptyActionField(ValidationError):
    kind: ClassVar[str] = "EmptyActionField"
    action_id: str
    field: str

    @property
    def message(self) -> str:
        if self.field == "id":
            return "Action ID cannot be empty."
        if self.field == "from_states":
            return f"Action '{self.action_id}' must have at least one source state."
        if self.field == "to_state":
            return f"Action '{self.action_id}' must have a target state."
        return f"Action '{self.action_id}' {self.field} cannot be empty."


@dataclass(frozen=True, slots=True)
class UnknownToState(ValidationError):
    kind: ClassVar[str] = "UnknownToState"
    action_id: str
    state_id: str

    @property
    def message(self) -> str:
        return (
            f"Action '{self.action_id}' references non-existent target state "
            f"'{self.state_id}'."
        )


@dataclass(frozen=True, slots=True)
class UnknownFromState(ValidationError):
    kind: ClassVar[str] = "UnknownFromState"
    action_id: str
    state_id: str

    @property
    def message(self) -> str:
        return (
            f"Action '{self.action_id}' references non-existent source state "
            f"'{self.state_id}'."
        )


# --- lookups ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LookupFailure(WorkflowError):
    kind: ClassVar[str] = "LookupFailure"


@dataclass(frozen=True, slots=True)
class DefinitionNotFound(LookupFailure):
    kind: ClassVar[str] = "DefinitionNotFound"
    definition_id: str

    @property
    def message(self) -> str:
        return f"Workflow definition with ID '{self.definition_id}' not found."


@dataclass(frozen=True, slots=True)
class InstanceNotFound(LookupFailure):
    kind: ClassVar[str] = "InstanceNotFound"
    instance_id: str

    @property
    def message(self) -> str:
        return f"Workflow instance with ID '{self.instance_id}' not found."


@dataclass(frozen=True, slots=True)
class NoInitialState(WorkflowError):
    kind: ClassVar[str] = "NoInitialState"
    definition_id: str

    @property
    def message(self) -> str:
        return f"Workflow definition '{self.definition_id}' does not have an initial state."


# --- action execution ---------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TransitionError(WorkflowError):
    kind: ClassVar[str] = "TransitionError"


@dataclass(frozen=True, slots=True)
class CurrentStateNotFound(TransitionError):
    kind: ClassVar[str] = "CurrentStateNotFound"
    state_id: str

    @property
    def message(self) -> str:
        return f"Current state '{self.state_id}' not found in workflow definition."


@dataclass(frozen=True, slots=True)
class FinalStateViolation(TransitionError):
    kind: ClassVar[str] = "FinalStateViolation"
    state_id: str
    state_name: str

    @property
    def message(self) -> str:
        return (
            "Cannot execute actions on workflow instance in final state "
            f"'{self.state_name}'."
        )


@dataclass(frozen=True, slots=True)
class DisabledStateViolation(TransitionError):
    kind: ClassVar[str] = "DisabledStateViolation"
    state_id: str
    state_name: str

    @property
    def message(self) -> str:
        return (
            "Cannot execute actions on workflow instance in disabled state "
            f"'{self.state_name}'."
        )


@dataclass(frozen=True, slots=True)
class ActionNotFound(TransitionError):
    kind: ClassVar[str] = "ActionNotFound"
    action_id: str

    @property
    def message(self) -> str:
        return f"Action with ID '{self.action_id}' not found in workflow definition."


@dataclass(frozen=True, slots=True)
class ActionDisabled(TransitionError):
    kind: ClassVar[str] = "ActionDisabled"
    action_id: str
    action_name: str

    @property
    def message(self) -> str:
        return f"Action '{self.action_name}' is disabled and cannot be executed."


@dataclass(frozen=True, slots=True)
class InvalidSourceState(TransitionError):
    kind: ClassVar[str] = "InvalidSourceState"
    action_id: str
    action_name: str
    state_id: str

    @property
    def message(self) -> str:
        return (
            f"Action '{self.action_name}' cannot be executed from current state "
            f"'{self.state_id}'."
        )


@dataclass(frozen=True, slots=True)
class TargetStateNotFound(TransitionError):
    kind: ClassVar[str] = "TargetStateNotFound"
    action_id: str
    state_id: str

    @property
    def message(self) -> str:
        return f"Target state '{self.state_id}' not found in workflow definition."


ValidationResult: TypeAlias = Ok | ValidationError
CheckResult: TypeAlias = Ok | TransitionError
