"""ReportService unit tests

Pipeline step ordering and per-step failure isolation, without HTTP.
"""

from unittest.mock import AsyncMock, patch

import aiosqlite
import pytest
from linkops.core.models import (
    BacklinkReportPayload,
    CreatedLink,
    IndexedBlog,
    ReportStatus,
    ReportSummary,
    TaskStatus,
)
from linkops.gateway.services.report_service import ReportService, ReportSubmission


@pytest.fixture
def critical_submission() -> ReportSubmission:
    """Dead link plus an unindexed blog: two critical follow-ups"""
    created = [CreatedLink(url="https://a.example", status="dead")]
    blogs = [IndexedBlog(blog_url="https://blog.example", is_indexed=False)]
    return ReportSubmission(
        task_id="task-1",
        project_id="proj-1",
        assignee_id="u-assignee",
        status=ReportStatus.CRITICAL,
        payload=BacklinkReportPayload(
            created_links=created,
            indexed_blogs=blogs,
            summary=BacklinkReportPayload.derive_summary(created, blogs),
        ),
    )


async def test_full_pipeline(seeded, critical_submission):
    result = await ReportService(seeded).process(critical_submission)

    assert result.success is True
    assert result.task_updated is True
    assert result.follow_up_tasks_created == 2
    assert result.notifications_sent == 4

    follow_ups = await seeded.task_store.list_tasks_for_report(result.report_id)
    assert [t.title for t in follow_ups] == [
        "Fix dead backlink URLs",
        "Fix critical blog interlinks",
    ]
    assert all(t.project_id == "proj-1" for t in follow_ups)


async def test_result_excludes_error_field(seeded, critical_submission):
    result = await ReportService(seeded).process(critical_submission)

    assert "error" not in result.model_dump()


async def test_duplicate_submissions_not_deduplicated(seeded, critical_submission):
    service = ReportService(seeded)

    first = await service.process(critical_submission)
    second = await service.process(critical_submission)

    assert first.report_id != second.report_id
    assert await seeded.report_store.count_reports("task-1") == 2
    assert len(await seeded.task_store.list_tasks_for_report(second.report_id)) == 2
    # the task was already completed; updating it again still matches one row
    assert second.task_updated is True


async def test_report_insert_failure_stops_pipeline(seeded, critical_submission):
    with patch.object(
        type(seeded.report_store),
        "insert_report",
        AsyncMock(side_effect=aiosqlite.OperationalError("locked")),
    ):
        result = await ReportService(seeded).process(critical_submission)

    assert result.success is False
    assert result.report_id is None
    assert result.error == "failed to store backlink report"
    task = await seeded.task_store.get_task("task-1")
    assert task.status == TaskStatus.IN_PROGRESS


async def test_task_update_failure_does_not_block(seeded, critical_submission):
    with patch.object(
        type(seeded.task_store),
        "complete_task",
        AsyncMock(side_effect=aiosqlite.OperationalError("locked")),
    ):
        result = await ReportService(seeded).process(critical_submission)

    assert result.success is True
    assert result.task_updated is False
    assert result.follow_up_tasks_created == 2
    assert result.notifications_sent == 4


async def test_one_follow_up_failure_counts_the_rest(seeded, critical_submission):
    store_cls = type(seeded.task_store)
    real_create = store_cls.create_task
    calls = {"n": 0}

    async def flaky_create(self, task):
        calls["n"] += 1
        if calls["n"] == 1:
            raise aiosqlite.IntegrityError("constraint failed")
        await real_create(self, task)

    with patch.object(store_cls, "create_task", flaky_create):
        result = await ReportService(seeded).process(critical_submission)

    assert result.follow_up_tasks_created == 1
    report = await seeded.report_store.get_report(result.report_id)
    assert report.follow_up_tasks_created is True
    titles = [t.title for t in await seeded.task_store.list_tasks_for_report(report.id)]
    assert titles == ["Fix critical blog interlinks"]


async def test_no_follow_ups_leaves_flag_unset(seeded):
    result = await ReportService(seeded).process(
        ReportSubmission(
            task_id="task-1",
            project_id="proj-1",
            assignee_id="u-assignee",
            status=ReportStatus.HEALTHY,
            payload=BacklinkReportPayload(
                summary=ReportSummary(total_created_links=3, working_links=3)
            ),
        )
    )

    report = await seeded.report_store.get_report(result.report_id)
    assert result.follow_up_tasks_created == 0
    assert report.follow_up_tasks_created is False
    assert report.health_percentage == 100.0


async def test_manager_lookup_failure_still_notifies_others(seeded, critical_submission):
    with patch.object(
        type(seeded.directory_store),
        "list_project_members",
        AsyncMock(side_effect=aiosqlite.OperationalError("no such table")),
    ):
        result = await ReportService(seeded).process(critical_submission)

    rows = await seeded.notification_store.list_for_report(result.report_id)
    assert [r.user_id for r in rows] == ["u-assignee", "u-super"]


async def test_notification_batch_is_all_or_nothing(seeded, critical_submission):
    with patch.object(
        type(seeded.notification_store),
        "insert_notifications",
        AsyncMock(side_effect=aiosqlite.OperationalError("disk full")),
    ):
        result = await ReportService(seeded).process(critical_submission)

    assert result.notifications_sent == 0
    assert await seeded.notification_store.list_for_report(result.report_id) == []


async def test_untracked_links_are_skipped(seeded, critical_submission):
    """Report links with no registered backlink row do not fail the pipeline"""
    result = await ReportService(seeded).process(critical_submission)

    assert result.success is True
    assert await seeded.backlink_store.list_links("task-1") == []


async def test_unknown_task_counts_as_updated(seeded, critical_submission):
    """A task update matching no row is not an error"""
    submission = critical_submission.model_copy(update={"task_id": "task-missing"})

    result = await ReportService(seeded).process(submission)

    assert result.success is True
    assert result.task_updated is True
    assert await seeded.task_store.get_task("task-missing") is None


async def test_entries_without_url_are_not_tracked(seeded):
    payload = BacklinkReportPayload.model_validate(
        {
            "created_links": [{"url": "https://a.example", "status": "working"}],
            "indexed_blogs": [
                {"is_indexed": True, "interlinks": [{"status": "working"}]},
                {"blog_url": "https://blog.example", "is_indexed": False},
            ],
        }
    )
    submission = ReportSubmission(
        task_id="task-1",
        project_id="proj-1",
        assignee_id="u-assignee",
        status=ReportStatus.WARNING,
        payload=payload,
    )

    with patch.object(
        type(seeded.backlink_store), "find_link", AsyncMock(return_value=None)
    ) as find_link:
        result = await ReportService(seeded).process(submission)

    assert result.success is True
    assert [call.args[1] for call in find_link.await_args_list] == [
        "https://a.example",
        "https://blog.example",
    ]
