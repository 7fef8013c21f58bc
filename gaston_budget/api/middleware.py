"""FastAPI middleware for request tracing, access logs and metrics"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from gaston_budget.infrastructure.observability.metrics import request_duration_histogram

REQUEST_ID_HEADER = "X-Request-ID"

# Longer client-supplied ids are replaced rather than logged
MAX_REQUEST_ID_LENGTH = 128


def _route_template(request: Request) -> str:
    """Matched route path (e.g. /v1/entities/{entity_id}/debts), or the raw path when unmatched"""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id, reusing the caller's X-Request-ID when sane"""

    async def dispatch(self, request: Request, call_next):
        incoming = request.headers.get(REQUEST_ID_HEADER, "")
        if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH:
            request_id = incoming
        else:
            request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record request latency per route template and emit one access log line"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        duration = time.time() - start_time
        route = _route_template(request)
        request_duration_histogram.labels(
            method=request.method,
            endpoint=route,
            status=response.status_code,
        ).observe(duration)

        if route not in ("/health", "/metrics"):
            logging.info(
                "Request completed",
                extra={
                    "request_id": getattr(request.state, "request_id", "unknown"),
                    "method": request.method,
                    "route": route,
                    "entity_id": request.path_params.get("entity_id"),
                    "status": response.status_code,
                    "duration_ms": round(duration * 1000, 2),
                },
            )

        return response
