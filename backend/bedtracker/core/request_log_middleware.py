"""
Request logging middleware.
Logs every call to the bed/patient/hospital API with its outcome and latency.
"""
import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)

# Only API traffic is logged; health checks and docs are skipped
API_PATH_PREFIX = "/api/"

# Mutations touch patient data and are logged at INFO, reads at DEBUG
MUTATING_METHODS = ("POST", "PUT", "PATCH", "DELETE")


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Middleware that logs method, path, status and duration of API requests."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("%s %s failed", request.method, request.url.path)
            raise

        path = request.url.path
        if not path.startswith(API_PATH_PREFIX):
            return response

        elapsed_ms = (time.perf_counter() - started) * 1000
        client = request.client.host if request.client else "-"
        level = logging.INFO if request.method in MUTATING_METHODS else logging.DEBUG
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = max(level, logging.WARNING)
        logger.log(
            level,
            "%s %s -> %d (%.1f ms, client=%s)",
            request.method, path, response.status_code, elapsed_ms, client,
        )
        return response
