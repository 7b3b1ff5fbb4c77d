"""Workflow definitions, instances and the state machine that drives them.

This package holds:
- the definition/instance models
- the definition validator
- the transition engine (pure decision + pure apply)
- the repository contract and its in-memory / JSON-file implementations
- the service composing the above

Validator and engine never touch storage; only the service does.
"""

from .errors import OK, Ok, TransitionError, ValidationError, WorkflowError
from .models import (
    Action,
    HistoryEntry,
    State,
    WorkflowDefinition,
    WorkflowDefinitionDraft,
    WorkflowInstance,
)
from .repository import InMemoryWorkflowRepository, JsonFileWorkflowRepository, WorkflowRepository
from .service import WorkflowService
from .transitions import apply_action, can_execute
from .validation import validate_definition

__all__ = [
    "OK",
    "Action",
    "HistoryEntry",
    "InMemoryWorkflowRepository",
    "JsonFileWorkflowRepository",
    "Ok",
    "State",
    "TransitionError",
    "ValidationError",
    "WorkflowDefinition",
    "WorkflowDefinitionDraft",
    "WorkflowError",
    "WorkflowInstance",
    "WorkflowRepository",
    "WorkflowService",
    "apply_action",
    "can_execute",
    "validate_definition",
]
