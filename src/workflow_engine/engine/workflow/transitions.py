"""Data-driven state machine semantics.

The machine itself is described entirely by a `WorkflowDefinition`; this
module only interprets the flags on states and actions. Both entry points are
pure: `can_execute` decides legality, `apply_action` computes the next
instance value without touching the one it was given.
"""

from __future__ import annotations

from datetime import UTC, datetime

from .errors import (
    OK,
    ActionDisabled,
    ActionNotFound,
    CheckResult,
    CurrentStateNotFound,
    DisabledStateViolation,
    FinalStateViolation,
    InvalidSourceState,
    TargetStateNotFound,
    TransitionError,
)
from .models import Action, HistoryEntry, State, WorkflowDefinition, WorkflowInstance


def _check_current_state(definition: WorkflowDefinition, current_state_id: str) -> CheckResult:
    current = definition.find_state(current_state_id)
    if current is None:
        return CurrentStateNotFound(state_id=current_state_id)
    if current.is_final:
        return FinalStateViolation(state_id=current.id, state_name=current.name)
    # A disabled state blocks every action, including ones listing it as a source.
    if not current.enabled:
        return DisabledStateViolation(state_id=current.id, state_name=current.name)
    return OK


def _check_action(action: Action, current_state_id: str) -> CheckResult:
    if not action.enabled:
        return ActionDisabled(action_id=action.id, action_name=action.name)
    if current_state_id not in action.from_states:
        return InvalidSourceState(
            action_id=action.id, action_name=action.name, state_id=current_state_id
        )
    return OK


def resolve_transition(
    definition: WorkflowDefinition, current_state_id: str, action_id: str
) -> tuple[Action, State] | TransitionError:
    """Resolve the action and its target state, or the first reason it can't fire."""

    state_check = _check_current_state(definition, current_state_id)
    if isinstance(state_check, TransitionError):
        return state_check

    action = definition.find_action(action_id)
    if action is None:
        return ActionNotFound(action_id=action_id)

    action_check = _check_action(action, current_state_id)
    if isinstance(action_check, TransitionError):
        return action_check

    target = definition.find_state(action.to_state)
    if target is None:
        return TargetStateNotFound(action_id=action.id, state_id=action.to_state)
    return action, target


def can_execute(
    definition: WorkflowDefinition, current_state_id: str, action_id: str
) -> CheckResult:
    resolved = resolve_transition(definition, current_state_id, action_id)
    if isinstance(resolved, TransitionError):
        return resolved
    return OK


def apply_action(
    definition: WorkflowDefinition,
    instance: WorkflowInstance,
    action_id: str,
    *,
    now: datetime | None = None,
) -> WorkflowInstance | TransitionError:
    """Return a new instance with the action applied.

    The returned instance carries both the new `current_state_id` and the
    appended history entry; `instance` is left as it was.
    """

    resolved = resolve_transition(definition, instance.current_state_id, action_id)
    if isinstance(resolved, TransitionError):
        return resolved
    action, target = resolved

    timestamp = now or datetime.now(tz=UTC)
    previous = instance.latest_history_entry()
    if previous is not None and timestamp < previous.timestamp:
        # Keep history chronological even if the wall clock steps backwards.
        timestamp = previous.timestamp

    entry = HistoryEntry(
        action_id=action.id,
        action_name=action.name,
        from_state_id=instance.current_state_id,
        to_state_id=target.id,
        timestamp=timestamp,
    )
    return instance.model_copy(
        update={"current_state_id": target.id, "history": [*instance.history, entry]}
    )
