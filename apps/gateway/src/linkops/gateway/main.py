"""FastAPI application

App creation plus lifespan management: database open/close, link checker
setup, middleware and route registration.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from linkops.core.config import get_db_path
from linkops.core.store import create_store_group
from linkops.linkcheck import LinkChecker, load_link_check_config

from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import backlink_reports, health, notifications, tasks

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the store and build the link checker on startup, close on shutdown"""
    db_path = get_db_path()
    store_group = await create_store_group(db_path)
    app.state.store_group = store_group

    link_check_config = load_link_check_config()
    app.state.link_checker = LinkChecker(link_check_config)
    log.info(
        "gateway_started",
        db_path=db_path,
        link_check_timeout_s=link_check_config.timeout_s,
    )

    yield

    if getattr(app.state, "store_group", None):
        await app.state.store_group.conn.close()


def create_app() -> FastAPI:
    """Create the FastAPI application"""
    app = FastAPI(
        title="LinkOps Gateway",
        version="0.1.0",
        description="Backlink report triage API",
        lifespan=lifespan,
    )

    # Order: Trace first, then Logging (Logging ends up outermost)
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)
    # Dashboard and crawlers call from other origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    setup_logging()
    setup_logfire(app)

    app.include_router(backlink_reports.router, tags=["backlink-reports"])
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(notifications.router, tags=["notifications"])
    app.include_router(health.router, tags=["health"])

    return app


# Default app instance (uvicorn entry point)
app = create_app()
