"""Failure envelope for errors that escape the route handlers."""
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
import structlog
from .correlation import get_correlation_id

log = structlog.get_logger()

LOG_PATH = "/log"

# (method, path) -> message reported to the caller
OPERATION_ERRORS = {
    ("POST", LOG_PATH): "Failed to log request",
    ("PUT", LOG_PATH): "Failed to log request",
    ("PATCH", LOG_PATH): "Failed to log request",
    ("GET", LOG_PATH): "Failed to read log",
    ("GET", LOG_PATH + "/stats"): "Failed to compute log statistics",
    ("DELETE", LOG_PATH): "Failed to clear log",
}
DEFAULT_ERROR = "Internal server error"


def failure_response(error: str, status_code: int = 500) -> JSONResponse:
    """The service-wide ``{success: false, error}`` body, tagged with the correlation id."""
    content = {"success": False, "error": error}
    correlation_id = get_correlation_id()
    if correlation_id:
        content["correlation_id"] = correlation_id
    return JSONResponse(status_code=status_code, content=content)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Turns unhandled exceptions into the failure envelope.

    The message names the log operation that failed; internal details
    only go to the logs.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            path = request.url.path.rstrip("/") or "/"
            error = OPERATION_ERRORS.get((request.method, path), DEFAULT_ERROR)
            log.error(
                "unhandled.exception",
                error=str(exc),
                error_type=exc.__class__.__name__,
                operation=error,
                exc_info=True
            )
            return failure_response(error)
