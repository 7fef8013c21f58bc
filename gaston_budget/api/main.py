"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from gaston_budget.api.dependencies import get_request_id
from gaston_budget.api.middleware import RequestIDMiddleware, MetricsMiddleware
from gaston_budget.api.v1 import calculators, config, dashboard, debts, entities, goals, ledgers, projects, trip
from gaston_budget.config import settings
from gaston_budget.domain.exceptions import (
    ConcurrentUpdateError,
    ConfirmationRequiredError,
    DocumentNotFoundError,
    EntityNotFoundError,
    InvalidInputError,
    UnknownCategoryError,
)
from gaston_budget.infrastructure.database.session import init_db
from gaston_budget.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level)

# Domain errors and the status code each maps to
ERROR_STATUS = {
    InvalidInputError: 422,
    UnknownCategoryError: 422,
    EntityNotFoundError: 404,
    DocumentNotFoundError: 404,
    ConcurrentUpdateError: 409,
    ConfirmationRequiredError: 400,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def _error_handler(status_code: int):
    def handle(request: Request, exc: Exception) -> JSONResponse:
        log = logging.warning if status_code != 409 else logging.info
        log(f"{type(exc).__name__}: {exc}", extra={"request_id": get_request_id(request)})

        content = {"detail": str(exc)}
        if isinstance(exc, ConcurrentUpdateError):
            content["actual_revision"] = exc.actual_revision
        return JSONResponse(status_code=status_code, content=content)

    return handle


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Gaston Budget",
        description="Household and business budgeting, debts and goals service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    for exc_class, status_code in ERROR_STATUS.items():
        app.add_exception_handler(exc_class, _error_handler(status_code))

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(entities.router, prefix="/v1", tags=["entities"])
    app.include_router(config.router, prefix="/v1", tags=["config"])
    app.include_router(ledgers.router, prefix="/v1", tags=["ledgers"])
    app.include_router(debts.router, prefix="/v1", tags=["debts"])
    app.include_router(calculators.router, prefix="/v1", tags=["calculators"])
    app.include_router(goals.router, prefix="/v1", tags=["goals"])
    app.include_router(projects.router, prefix="/v1", tags=["projects"])
    app.include_router(dashboard.router, prefix="/v1", tags=["dashboard"])
    app.include_router(trip.router, prefix="/v1", tags=["trip"])

    return app


app = create_app()
