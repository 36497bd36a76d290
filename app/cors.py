"""CORS gate for browser-extension callers."""

from collections.abc import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

ALLOW_METHODS = "GET, POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"


class CORSGateMiddleware(BaseHTTPMiddleware):
    """Decide the Access-Control-Allow-Origin header for every request.

    Origins in the allowed set are echoed back. Any other origin gets ``*``
    when ``allow_wildcard`` is set (non-production deployments, or an
    explicit override) and no allow-origin header otherwise, which leaves
    the browser to block the response. Preflight ``OPTIONS`` requests are
    answered here with 204 and never reach a route.
    """

    def __init__(self, app, allowed_origins: Iterable[str], allow_wildcard: bool) -> None:  # noqa: ANN001
        super().__init__(app)
        self.allowed_origins = frozenset(allowed_origins)
        self.allow_wildcard = allow_wildcard

    def cors_headers(self, origin: str | None) -> dict[str, str]:
        headers = {
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
        }
        if origin and origin in self.allowed_origins:
            headers["Access-Control-Allow-Origin"] = origin
        elif self.allow_wildcard:
            headers["Access-Control-Allow-Origin"] = "*"
        return headers

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        headers = self.cors_headers(request.headers.get("origin"))

        if request.method == "OPTIONS":
            response = Response(status_code=204)
        else:
            response = await call_next(request)

        response.headers.update(headers)
        if headers.get("Access-Control-Allow-Origin", "*") != "*":
            response.headers.add_vary_header("Origin")
        return response
