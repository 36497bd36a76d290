"""Per-call tracing for relayed extension requests."""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from extension_relay.core.logging import REQUEST_ID_HEADER, request_id_var, resolve_request_id

logger = logging.getLogger(__name__)


def completion_level(status_code: int) -> int:
    """Relay failures (5xx, including forwarded upstream errors) stand out at WARNING."""
    return logging.WARNING if status_code >= 500 else logging.INFO


class RelayTraceMiddleware(BaseHTTPMiddleware):
    """
    Give every extension call a correlation id and log one summary line for it.

    The id is echoed back in ``X-Request-ID`` so an extension can quote it
    when reporting a failed answer or transcript.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        call_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = call_id
        token = request_id_var.set(call_id)
        origin = request.headers.get("origin", "-")
        started = time.perf_counter()
        try:
            try:
                response = await call_next(request)
            except Exception:
                logger.exception("%s %s from %s failed", request.method, request.url.path, origin)
                raise
            logger.log(
                completion_level(response.status_code),
                "%s %s from %s -> %d in %.0f ms",
                request.method,
                request.url.path,
                origin,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
            response.headers[REQUEST_ID_HEADER] = call_id
            return response
        finally:
            request_id_var.reset(token)
