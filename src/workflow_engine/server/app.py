"""FastAPI app factory.

Endpoints are intentionally thin wrappers over `WorkflowService`.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from workflow_engine import __version__
from workflow_engine.engine.workflow.repository import WorkflowRepository
from workflow_engine.engine.workflow.service import WorkflowService
from workflow_engine.server.config import ServerSettings
from workflow_engine.server.models import ApiResponse, HealthResponse
from workflow_engine.server.workflow_router import router as workflow_router

logger = logging.getLogger(__name__)


def create_app(
    repository: WorkflowRepository | None = None,
    settings: ServerSettings | None = None,
) -> FastAPI:
    """Build the API.

    Args:
        repository: Storage to use. Defaults to the backend selected by
            `WORKFLOW_STORE_BACKEND`.
        settings: Server settings. Defaults to reading the environment/.env.
    """

    if settings is None:
        settings = ServerSettings()
    if repository is None:
        repository = settings.build_repository()

    app = FastAPI(
        title="Workflow Engine",
        version=__version__,
        description="Finite state machine workflows: definitions, instances and actions.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Request handlers read these from `request.app.state`.
    app.state.settings = settings
    app.state.workflow_service = WorkflowService(repository=repository)

    origins = settings.parsed_cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentialed requests against a wildcard origin.
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(workflow_router, prefix="/api")

    @app.exception_handler(RequestValidationError)
    def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        body = ApiResponse[object](
            success=False,
            error=f"Invalid request: {problems}",
            error_kind="RequestValidationError",
        )
        return JSONResponse(status_code=400, content=body.model_dump(mode="json", by_alias=True))

    @app.exception_handler(Exception)
    def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error", extra={"path": request.url.path, "method": request.method}
        )
        body = ApiResponse[object].fail(f"An unexpected error occurred: {exc}")
        return JSONResponse(status_code=500, content=body.model_dump(mode="json", by_alias=True))

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(status="Healthy", timestamp=datetime.now(tz=UTC))

    return app
