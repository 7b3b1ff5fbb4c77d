"""Workflow definition and instance endpoints (mounted at /api).

Handlers are thin: they translate HTTP to `WorkflowService` calls and typed
errors back to status codes. All state-machine rules live in the service.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from workflow_engine.engine.workflow.errors import (
    DefinitionNotFound,
    InstanceNotFound,
    WorkflowError,
)
from workflow_engine.engine.workflow.models import (
    WorkflowDefinition,
    WorkflowDefinitionDraft,
    WorkflowInstance,
)
from workflow_engine.engine.workflow.service import WorkflowService
from workflow_engine.server.models import (
    ApiResponse,
    CreateInstanceRequest,
    ExecuteActionRequest,
)

router = APIRouter()


def _service(request: Request) -> WorkflowService:
    service = getattr(request.app.state, "workflow_service", None)
    if not isinstance(service, WorkflowService):
        raise HTTPException(status_code=500, detail="Workflow service not configured")
    return service


def _fail(status_code: int, error: WorkflowError | str) -> JSONResponse:
    body = ApiResponse[object].fail(error)
    return JSONResponse(
        status_code=status_code, content=body.model_dump(mode="json", by_alias=True)
    )


@router.post(
    "/workflows",
    status_code=201,
    response_model=ApiResponse[WorkflowDefinition],
    summary="Create a new workflow definition",
)
def create_definition(
    request: Request, draft: WorkflowDefinitionDraft
) -> ApiResponse[WorkflowDefinition] | JSONResponse:
    result = _service(request).create_definition(draft)
    if isinstance(result, WorkflowError):
        return _fail(400, result)
    return ApiResponse[WorkflowDefinition].ok(result)


@router.get(
    "/workflows",
    response_model=ApiResponse[list[WorkflowDefinition]],
    summary="Get all workflow definitions",
)
def list_definitions(request: Request) -> ApiResponse[list[WorkflowDefinition]]:
    return ApiResponse[list[WorkflowDefinition]].ok(_service(request).list_definitions())


@router.get(
    "/workflows/{definition_id}",
    response_model=ApiResponse[WorkflowDefinition],
    summary="Get a workflow definition by ID",
)
def get_definition(
    request: Request, definition_id: str
) -> ApiResponse[WorkflowDefinition] | JSONResponse:
    definition = _service(request).get_definition(definition_id)
    if definition is None:
        return _fail(404, DefinitionNotFound(definition_id=definition_id))
    return ApiResponse[WorkflowDefinition].ok(definition)


@router.get(
    "/workflows/{definition_id}/instances",
    response_model=ApiResponse[list[WorkflowInstance]],
    summary="Get all instances of a workflow definition",
)
def list_definition_instances(
    request: Request, definition_id: str
) -> ApiResponse[list[WorkflowInstance]] | JSONResponse:
    result = _service(request).list_instances_for_definition(definition_id)
    if isinstance(result, WorkflowError):
        return _fail(404, result)
    return ApiResponse[list[WorkflowInstance]].ok(result)


@router.post(
    "/workflows/{definition_id}/instances",
    status_code=201,
    response_model=ApiResponse[WorkflowInstance],
    summary="Create a new workflow instance",
)
def create_instance(
    request: Request, definition_id: str, body: CreateInstanceRequest | None = None
) -> ApiResponse[WorkflowInstance] | JSONResponse:
    name = body.name if body is not None else ""
    result = _service(request).create_instance(definition_id, name=name)
    if isinstance(result, WorkflowError):
        return _fail(400, result)
    return ApiResponse[WorkflowInstance].ok(result)


@router.get(
    "/instances",
    response_model=ApiResponse[list[WorkflowInstance]],
    summary="Get all workflow instances",
)
def list_instances(request: Request) -> ApiResponse[list[WorkflowInstance]]:
    return ApiResponse[list[WorkflowInstance]].ok(_service(request).list_instances())


@router.get(
    "/instances/{instance_id}",
    response_model=ApiResponse[WorkflowInstance],
    summary="Get a workflow instance by ID",
)
def get_instance(
    request: Request, instance_id: str
) -> ApiResponse[WorkflowInstance] | JSONResponse:
    instance = _service(request).get_instance(instance_id)
    if instance is None:
        return _fail(404, InstanceNotFound(instance_id=instance_id))
    return ApiResponse[WorkflowInstance].ok(instance)


@router.post(
    "/instances/{instance_id}/actions",
    response_model=ApiResponse[WorkflowInstance],
    summary="Execute an action on a workflow instance",
)
def execute_action(
    request: Request, instance_id: str, req: ExecuteActionRequest
) -> ApiResponse[WorkflowInstance] | JSONResponse:
    result = _service(request).execute_action(instance_id, req.action_id)
    if isinstance(result, InstanceNotFound):
        return _fail(404, result)
    if isinstance(result, WorkflowError):
        return _fail(400, result)
    return ApiResponse[WorkflowInstance].ok(result)
