"""Integration test shared fixtures"""

import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from pathlib import Path

import httpx
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from linkops.core.models import ProjectMember, Task, TaskStatus, TeamUser
from linkops.core.store import create_store_group
from linkops.linkcheck import LinkChecker, LinkCheckConfig


def _fake_web(request: httpx.Request) -> httpx.Response:
    if request.url.path.startswith("/dead"):
        return httpx.Response(410)
    return httpx.Response(204)


@pytest_asyncio.fixture
async def integration_app(tmp_path: Path):
    """FastAPI app for integration tests"""
    os.environ["LINKOPS_DB_PATH"] = str(tmp_path / "test.db")
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from linkops.gateway.main import create_app

    app = create_app()

    store_group = await create_store_group(str(tmp_path / "test.db"))
    app.state.store_group = store_group
    app.state.link_checker = LinkChecker(
        LinkCheckConfig(), transport=httpx.MockTransport(_fake_web)
    )

    yield app

    await store_group.conn.close()
    os.environ.pop("LINKOPS_DB_PATH", None)
    os.environ.pop("LOGFIRE_SEND_TO_LOGFIRE", None)


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def stores(integration_app):
    return integration_app.state.store_group


@pytest_asyncio.fixture
async def team(stores):
    """Task T in project P; M1 and the assignee A manage P; S is a super admin"""
    now = datetime.now(UTC)
    await stores.task_store.create_task(
        Task(
            id="T",
            project_id="P",
            assignee_id="A",
            title="Backlinks for P",
            status=TaskStatus.IN_PROGRESS,
            created_at=now,
            updated_at=now,
        )
    )
    directory = stores.directory_store
    await directory.upsert_user(TeamUser(id="A", role="member"))
    await directory.upsert_user(TeamUser(id="M1", role="member"))
    await directory.upsert_user(TeamUser(id="S", role="Super Admin"))
    await directory.add_project_member(ProjectMember(project_id="P", user_id="M1", role="manager"))
    await directory.add_project_member(ProjectMember(project_id="P", user_id="A", role="manager"))
    await stores.conn.commit()
    return stores
