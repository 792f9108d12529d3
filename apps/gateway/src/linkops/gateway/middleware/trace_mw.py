"""TraceMiddleware -- binds trace_id for task and report scoped requests

trace_id is derived from the id in /api/tasks/{id} or
/api/backlink-reports/{id}. Submission routes bind it themselves from the
request body.
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Path segments followed by an entity id, mapped to the trace prefix
_TRACED_SEGMENTS = {
    "tasks": "trace",
    "backlink-reports": "report",
}

# Sub-routes that are not ids
_RESERVED = {"stats", "direct"}


def trace_id_for_path(path: str) -> str | None:
    """Return the trace id for a request path, or None when not entity scoped"""
    parts = path.strip("/").split("/")
    for i, part in enumerate(parts):
        prefix = _TRACED_SEGMENTS.get(part)
        if prefix is None or i + 1 >= len(parts):
            continue
        entity_id = parts[i + 1]
        if entity_id and entity_id not in _RESERVED:
            return f"{prefix}-{entity_id}"
    return None


class TraceMiddleware(BaseHTTPMiddleware):
    """Entity-scoped tracing middleware"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        trace_id = trace_id_for_path(request.url.path)
        if trace_id:
            structlog.contextvars.bind_contextvars(trace_id=trace_id)

        return await call_next(request)
