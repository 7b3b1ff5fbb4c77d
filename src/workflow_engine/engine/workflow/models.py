"""Workflow definition and instance models.

A definition is the static description of a finite state machine (states plus
the actions that move between them). An instance is one running copy of a
definition: it only tracks where it currently is and how it got there.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class _WireModel(BaseModel):
    # JSON on the wire is camelCase (`isInitial`, `fromStates`); Python stays snake_case.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def new_id() -> str:
    """Return a fresh 128-bit random identifier."""

    return str(uuid.uuid4())


class State(_WireModel):
    """A state descriptor. Behaviour lives in the transition engine."""

    id: str = ""
    name: str = ""
    is_initial: bool = False
    is_final: bool = False
    enabled: bool = True
    description: str | None = None


class Action(_WireModel):
    """A directed transition rule: any of `from_states` -> `to_state`."""

    id: str = ""
    name: str = ""
    enabled: bool = True
    from_states: list[str] = Field(default_factory=list)
    to_state: str = ""
    description: str | None = None


class WorkflowDefinitionDraft(_WireModel):
    """A candidate definition as submitted by a client, before validation."""

    name: str = ""
    description: str | None = None
    states: list[State] = Field(default_factory=list)
    actions: list[Action] = Field(default_factory=list)


class WorkflowDefinition(_WireModel):
    id: str = Field(default_factory=new_id)
    name: str
    description: str | None = None
    states: list[State] = Field(default_factory=list)
    actions: list[Action] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utc_now)

    @classmethod
    def from_draft(cls, draft: WorkflowDefinitionDraft) -> WorkflowDefinition:
        return cls(
            name=draft.name,
            description=draft.description,
            states=[s.model_copy() for s in draft.states],
            actions=[a.model_copy(deep=True) for a in draft.actions],
        )

    def initial_state(self) -> State | None:
        for state in self.states:
            if state.is_initial:
                return state
        return None

    def find_state(self, state_id: str) -> State | None:
        for state in self.states:
            if state.id == state_id:
                return state
        return None

    def find_action(self, action_id: str) -> Action | None:
        for action in self.actions:
            if action.id == action_id:
                return action
        return None


class HistoryEntry(_WireModel):
    """Audit record of one executed transition."""

    model_config = ConfigDict(frozen=True)

    action_id: str
    # Captured at execution time; never re-derived from the definition.
    action_name: str
    from_state_id: str
    to_state_id: str
    timestamp: datetime = Field(default_factory=_utc_now)


class WorkflowInstance(_WireModel):
    id: str = Field(default_factory=new_id)
    definition_id: str
    name: str = ""
    current_state_id: str
    history: list[HistoryEntry] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utc_now)

    def latest_history_entry(self) -> HistoryEntry | None:
        if not self.history:
            return None
        return self.history[-1]
