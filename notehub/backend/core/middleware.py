"""
Request Context Middleware.

Tags every request with a request ID and a source, binds both to the
structlog context, and reports timing in the response headers.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notehub.backend.core.logging import get_logger

logger = get_logger(__name__)

# Sent by public/app.js on every call
BROWSER_CLIENT_ID = "web"


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def request_source(request: Request) -> str:
    """Return "web" for the bundled browser client and "api" for anything else."""
    frontend_id = request.headers.get("X-Frontend-ID", "").strip().lower()
    return "web" if frontend_id == BROWSER_CLIENT_ID else "api"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Sets request.state.request_id and request.state.source.

    The request ID is taken from X-Request-ID when the caller supplies one
    and echoed back; X-Response-Time carries the handling time.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        source = request_source(request)

        request.state.request_id = request_id
        request.state.source = source

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            source=source,
            method=request.method,
            path=request.url.path,
        )

        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{_elapsed_ms(start)}ms"
            return response
        except Exception as exc:
            logger.error("Request raised", error_type=type(exc).__name__)
            raise
        finally:
            logger.debug("Request finished", status_code=status_code, duration_ms=_elapsed_ms(start))
            structlog.contextvars.clear_contextvars()
