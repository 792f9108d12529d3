"""apps/gateway test configuration -- app with initialised state + AsyncClient"""

import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from linkops.core.models import ProjectMember, Task, TaskStatus, TeamUser
from linkops.core.store import create_store_group
from linkops.linkcheck import LinkChecker, LinkCheckConfig

_ENV_KEYS = ("LINKOPS_DB_PATH", "LOGFIRE_SEND_TO_LOGFIRE")


def _fake_web(request: httpx.Request) -> httpx.Response:
    """Probe target stand-in: /dead* is 404, /down* refuses, the rest is 200"""
    path = request.url.path
    if path.startswith("/dead"):
        return httpx.Response(404)
    if path.startswith("/down"):
        raise httpx.ConnectError("connection refused", request=request)
    return httpx.Response(200)


@pytest_asyncio.fixture
async def gateway_tmp_dir(tmp_path: Path) -> Path:
    """Gateway temporary data directory"""
    db_dir = tmp_path / "sqlite"
    db_dir.mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest_asyncio.fixture
async def test_app(gateway_tmp_dir: Path):
    """Full app with state initialised by hand (ASGITransport skips lifespan)"""
    db_path = str(gateway_tmp_dir / "sqlite" / "test.db")
    os.environ["LINKOPS_DB_PATH"] = db_path
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from linkops.gateway.main import create_app

    app = create_app()
    store_group = await create_store_group(db_path)
    app.state.store_group = store_group
    app.state.link_checker = LinkChecker(
        LinkCheckConfig(timeout_s=1), transport=httpx.MockTransport(_fake_web)
    )

    yield app

    await store_group.conn.close()
    for key in _ENV_KEYS:
        os.environ.pop(key, None)


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """httpx AsyncClient bound to the app"""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def store_group(test_app):
    """The app's StoreGroup"""
    return test_app.state.store_group


@pytest_asyncio.fixture
async def seeded(store_group):
    """One in-progress task plus a small team

    proj-1 members: u-assignee (member), u-manager (manager), u-admin (admin).
    u-super holds the Super Admin role.
    """
    now = datetime.now(UTC)
    await store_group.task_store.create_task(
        Task(
            id="task-1",
            project_id="proj-1",
            assignee_id="u-assignee",
            title="Build 10 backlinks",
            status=TaskStatus.IN_PROGRESS,
            created_at=now,
            updated_at=now,
        )
    )
    directory = store_group.directory_store
    await directory.upsert_user(TeamUser(id="u-super", email="sa@example.com", role="Super Admin"))
    for user_id, role in (
        ("u-assignee", "member"),
        ("u-manager", "manager"),
        ("u-admin", "admin"),
    ):
        await directory.upsert_user(TeamUser(id=user_id, email=f"{user_id}@example.com"))
        await directory.add_project_member(
            ProjectMember(project_id="proj-1", user_id=user_id, role=role)
        )
    await store_group.conn.commit()
    return store_group


def _report_body(status: str = "critical", **overrides) -> dict:
    body = {
        "task_id": "task-1",
        "project_id": "proj-1",
        "assignee_id": "u-assignee",
        "status": status,
        "summary": {"dead_links": 1},
        "payload": {
            "created_links": [
                {"url": "https://a.example/post", "status": "working"},
                {"url": "https://b.example/post", "status": "dead"},
            ],
            "indexed_blogs": [
                {
                    "blog_url": "https://blog.example/one",
                    "is_indexed": True,
                    "interlink_count": 1,
                    "interlinks": [{"url": "https://blog.example/two", "status": "working"}],
                },
            ],
            "issues": [],
            "summary": {
                "total_created_links": 2,
                "working_links": 1,
                "dead_links": 1,
                "total_indexed_blogs": 1,
                "indexed_count": 1,
                "total_interlinks": 1,
                "working_interlinks": 1,
            },
        },
    }
    body.update(overrides)
    return body


@pytest.fixture
def report_body():
    """Report submission body factory"""
    return _report_body
