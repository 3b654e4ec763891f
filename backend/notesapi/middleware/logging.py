"""
Notes API Backend - Request Logging Middleware
==============================================

What:  One access-log line per HTTP request.
How:   Times the downstream call and logs method, path, status, duration,
       request ID and client address on the `notesapi.access` logger.
       Level follows the status class: 5xx ERROR, 4xx WARNING, else INFO.
Who:   Applied to every request except the health probe.

An exception that escapes the route stack is logged with its traceback and
answered here with a generic 500 in the common error shape, while the
request ID is still bound; the access line then records that 500 as usual.

Request bodies are never logged; note content stays out of the logs.
"""

import logging
import time

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notesapi.middleware.request_id import request_id_var
from notesapi.schemas.note import UNEXPECTED_ERROR_MESSAGE, error_body

logger = logging.getLogger("notesapi.access")
error_logger = logging.getLogger("notesapi.errors")

# Probed every few seconds by orchestrators; not worth a log line each time
SILENT_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs structured information about each HTTP request and response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        method = request.method
        rid = request_id_var.get("")

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            error_logger.error(
                "[%s] Unexpected error on %s %s: %s",
                rid,
                method,
                path,
                str(e),
                exc_info=True,
            )
            response = JSONResponse(
                status_code=500,
                content=error_body("internal_server_error", UNEXPECTED_ERROR_MESSAGE),
            )
        duration_ms = (time.perf_counter() - start_time) * 1000

        if path in SILENT_PATHS:
            return response

        client_ip = request.client.host if request.client else "unknown"
        status = response.status_code

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
