"""Health routes

GET /health: liveness, always 200.
GET /ready: readiness -- SQLite connectivity, the link checker used by direct
submissions and free disk space.
"""

import shutil

import structlog
from fastapi import APIRouter, Request
from linkops.linkcheck import LinkChecker
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness -- always 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness -- checks that core dependencies are usable

    Checks:
    1. sqlite: database connectivity
    2. link_checker: probe client configured at startup
    3. disk_space_mb: free disk space
    """
    checks = {}
    all_ok = True

    try:
        store_group = request.app.state.store_group
        cursor = await store_group.conn.execute("SELECT 1")
        await cursor.fetchone()
        checks["sqlite"] = "ok"
    except Exception as e:
        log.warning("readiness_sqlite_failed", error_type=type(e).__name__, error=str(e))
        checks["sqlite"] = "unavailable"
        all_ok = False

    link_checker = getattr(request.app.state, "link_checker", None)
    if isinstance(link_checker, LinkChecker):
        checks["link_checker"] = "ok"
    else:
        log.warning("readiness_link_checker_missing")
        checks["link_checker"] = "unavailable"
        all_ok = False

    try:
        disk_usage = shutil.disk_usage("/")
        checks["disk_space_mb"] = disk_usage.free // (1024 * 1024)
    except OSError:
        checks["disk_space_mb"] = 0
        all_ok = False

    status_code = 200 if all_ok else 503
    status_text = "ready" if all_ok else "not_ready"

    return JSONResponse(
        status_code=status_code,
        content={
            "status": status_text,
            "checks": checks,
        },
    )
