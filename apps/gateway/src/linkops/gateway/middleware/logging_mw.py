"""LoggingMiddleware -- per-request request_id bound to structlog contextvars

Crawlers may send their run id as X-Request-ID; it is reused when it looks
like a ULID so crawler and gateway logs share one id. Otherwise a new ULID
is generated.
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

REQUEST_ID_HEADER = "X-Request-ID"


def resolve_request_id(inbound: str | None) -> str:
    """Reuse a valid inbound ULID, otherwise mint a new one"""
    if inbound:
        try:
            return str(ULID.from_str(inbound))
        except ValueError:
            pass
    return str(ULID())


class LoggingMiddleware(BaseHTTPMiddleware):
    """Request-scoped logging with request id, duration and client user agent"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        log = structlog.get_logger()
        await log.ainfo(
            "request_started",
            user_agent=request.headers.get("user-agent", ""),
        )

        start_time = time.monotonic()
        response = await call_next(request)
        duration_ms = int((time.monotonic() - start_time) * 1000)

        # Rejected submissions are worth seeing at warning level
        log_method = log.awarning if response.status_code >= 400 else log.ainfo
        await log_method(
            "request_completed",
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
