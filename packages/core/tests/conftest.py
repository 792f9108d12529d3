"""packages/core test configuration -- core layer fixtures"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio
from linkops.core.models import (
    BacklinkReport,
    BacklinkReportPayload,
    CreatedLink,
    IndexedBlog,
    Interlink,
    ReportIssue,
    ReportStatus,
    Task,
)


@pytest_asyncio.fixture
async def core_db_path(tmp_path: Path) -> Path:
    """Core layer temporary database path"""
    return tmp_path / "core_test.db"


@pytest_asyncio.fixture
async def core_db(core_db_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """Core layer initialised database connection"""
    from linkops.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(core_db_path))
    await init_db(conn)
    yield conn
    await conn.close()


@pytest.fixture
def mixed_payload() -> BacklinkReportPayload:
    """Payload with one dead link, one unindexed blog and a dead interlink"""
    created = [
        CreatedLink(url="https://a.example/post", status="working", anchor_text="seo"),
        CreatedLink(url="https://b.example/post", status="dead"),
    ]
    blogs = [
        IndexedBlog(
            blog_url="https://blog.example/one",
            is_indexed=True,
            interlink_count=4,
            interlinks=[
                Interlink(url="https://blog.example/one#a", status="working"),
                Interlink(url="https://blog.example/one#b", status="dead"),
            ],
        ),
        IndexedBlog(blog_url="https://blog.example/two", is_indexed=False, interlink_count=1),
    ]
    return BacklinkReportPayload(
        created_links=created,
        indexed_blogs=blogs,
        issues=[ReportIssue(type="irrelevant_link", url="https://a.example/post")],
        summary=BacklinkReportPayload.derive_summary(created, blogs),
    )


def _make_task(task_id: str = "task-1", project_id: str = "proj-1", **kwargs) -> Task:
    now = datetime.now(UTC)
    return Task(
        id=task_id,
        project_id=project_id,
        assignee_id=kwargs.pop("assignee_id", "user-assignee"),
        title=kwargs.pop("title", "Build backlinks"),
        created_at=now,
        updated_at=now,
        **kwargs,
    )


def _make_report(
    report_id: str,
    payload: BacklinkReportPayload | None = None,
    status: ReportStatus = ReportStatus.CRITICAL,
    task_id: str = "task-1",
    project_id: str = "proj-1",
    processed_at: datetime | None = None,
) -> BacklinkReport:
    return BacklinkReport.from_submission(
        report_id=report_id,
        task_id=task_id,
        project_id=project_id,
        assignee_id="user-assignee",
        status=status,
        payload=payload or BacklinkReportPayload(),
        summary=None,
        processed_at=processed_at or datetime.now(UTC),
    )


@pytest.fixture
def make_task():
    """Task factory"""
    return _make_task


@pytest.fixture
def make_report():
    """BacklinkReport factory"""
    return _make_report
