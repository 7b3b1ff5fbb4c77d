from __future__ import annotations

from collections.abc import Iterable

from .errors import (
    OK,
    DuplicateActionId,
    DuplicateStateId,
    EmptyActionField,
    EmptyName,
    EmptyStateIdOrName,
    InitialStateCountMismatch,
    NoStates,
    UnknownFromState,
    UnknownToState,
    ValidationResult,
)
from .models import Action, State, WorkflowDefinition, WorkflowDefinitionDraft


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _first_duplicate(ids: Iterable[str]) -> str | None:
    seen: set[str] = set()
    for item in ids:
        if item in seen:
            return item
        seen.add(item)
    return None


def validate_definition(
    candidate: WorkflowDefinitionDraft | WorkflowDefinition,
) -> ValidationResult:
    """Check a candidate definition for structural integrity.

    Rules run in a fixed order and the first failure is returned. Nothing is
    mutated, so validating the same candidate twice gives the same answer.
    """

    if _blank(candidate.name):
        return EmptyName()

    if not candidate.states:
        return NoStates()

    duplicate_state = _first_duplicate(s.id for s in candidate.states)
    if duplicate_state is not None:
        return DuplicateStateId(state_id=duplicate_state)

    duplicate_action = _first_duplicate(a.id for a in candidate.actions)
    if duplicate_action is not None:
        return DuplicateActionId(action_id=duplicate_action)

    state_result = _validate_states(candidate.states)
    if state_result is not OK:
        return state_result

    return _validate_actions(candidate.actions, {s.id for s in candidate.states})


def _validate_states(states: list[State]) -> ValidationResult:
    initial_count = sum(1 for s in states if s.is_initial)
    if initial_count != 1:
        return InitialStateCountMismatch(count=initial_count)

    for state in states:
        if _blank(state.id) or _blank(state.name):
            return EmptyStateIdOrName(state_id=state.id)
    return OK


def _validate_actions(actions: list[Action], state_ids: set[str]) -> ValidationResult:
    # Field presence is checked for every action before any reference is resolved.
    for action in actions:
        if _blank(action.id):
            return EmptyActionField(action_id=action.id, field="id")
        if _blank(action.name):
            return EmptyActionField(action_id=action.id, field="name")
        if _blank(action.to_state):
            return EmptyActionField(action_id=action.id, field="to_state")
        if not action.from_states:
            return EmptyActionField(action_id=action.id, field="from_states")

    for action in actions:
        if action.to_state not in state_ids:
            return UnknownToState(action_id=action.id, state_id=action.to_state)

    for action in actions:
        for source in action.from_states:
            if source not in state_ids:
                return UnknownFromState(action_id=action.id, state_id=source)

    return OK
