"""FastAPI app factory.

Endpoints are thin wrappers over the workflow store; store errors are translated
to HTTP statuses here.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from workflow_orchestrator import __version__
from workflow_orchestrator.config import WorkflowSettings
from workflow_orchestrator.errors import (
    NotFound,
    PreconditionViolation,
    Unauthenticated,
    WorkflowError,
)
from workflow_orchestrator.ids import id_factory
from workflow_orchestrator.seed import SeedDirectory, initial_state, load_seed_directory
from workflow_orchestrator.server.router import router
from workflow_orchestrator.store import WorkflowStore

logger = logging.getLogger(__name__)

_ERROR_STATUS: dict[type[WorkflowError], int] = {
    Unauthenticated: 401,
    NotFound: 404,
    PreconditionViolation: 409,
}


def _status_for(exc: WorkflowError) -> int:
    for kind, status in _ERROR_STATUS.items():
        if isinstance(exc, kind):
            return status
    return 400


async def _workflow_error_handler(_request: Request, exc: WorkflowError) -> JSONResponse:
    return JSONResponse(
        status_code=_status_for(exc),
        content={"detail": str(exc), "error": type(exc).__name__},
    )


def create_app(
    store: WorkflowStore | None = None,
    settings: WorkflowSettings | None = None,
    directory: SeedDirectory | None = None,
) -> FastAPI:
    """Build the app.

    Without an explicit store, one is created from the seed file named in settings.
    """

    settings = settings or WorkflowSettings()
    if directory is None:
        directory = load_seed_directory(settings.seed_path)
    if store is None:
        store = WorkflowStore(initial_state(directory), id_factory=id_factory(settings.id_length))

    app = FastAPI(
        title="Workflow Orchestrator",
        version=__version__,
        description="REST API over the in-memory workflow store.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.settings = settings
    app.state.store = store
    app.state.directory = directory

    # Dev-friendly CORS so a Vite dev server can call the API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(WorkflowError, _workflow_error_handler)
    app.include_router(router, prefix="/api")

    logger.info(
        "Workflow API ready",
        extra={"templates": len(store.templates), "users": len(directory.users)},
    )
    return app
