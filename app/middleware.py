"""
Per-request tracing: a request id on every log line and every response,
including the generic 500 for errors nothing else handled.
"""
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from structlog.contextvars import bound_contextvars

from app.logging_config import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

INTERNAL_ERROR_BODY = {
    "error": "Internal server error",
    "message": "An unexpected error occurred",
}


async def request_id_middleware(request: Request, call_next: Callable) -> Response:
    """
    Tag the request with the caller's X-Request-ID (or a fresh uuid4) and log
    its outcome.

    Runs inside CORSMiddleware, so the 500 built here for an uncaught exception
    still carries the CORS headers along with the request id.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    request.state.request_id = request_id

    with bound_contextvars(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    ):
        logger.info(
            "request_started",
            client_host=request.client.host if request.client else None,
        )
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request_failed",
                exc_info=exc,
                error_type=type(exc).__name__,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            response = JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)
        else:
            logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )

    response.headers[REQUEST_ID_HEADER] = request_id
    return response
