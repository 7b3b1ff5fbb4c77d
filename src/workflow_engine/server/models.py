"""Pydantic models for the REST server."""

from __future__ import annotations

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from workflow_engine.engine.workflow.errors import WorkflowError

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Response envelope shared by every `/api` endpoint, error responses included."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    data: T | None = None
    error: str | None = None
    error_kind: str | None = None

    @classmethod
    def ok(cls, data: T) -> ApiResponse[T]:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: WorkflowError | str) -> ApiResponse[T]:
        if isinstance(error, WorkflowError):
            return cls(success=False, error=error.message, error_kind=error.kind)
        return cls(success=False, error=error)


class ExecuteActionRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    action_id: str


class CreateInstanceRequest(BaseModel):
    name: str = ""


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
