"""ReportService -- backlink report triage pipeline

Processing order for one submission:
1. Persist the report (fatal on failure, nothing else runs)
2. Complete the originating task and set its report badge
3. Record backlink status changes from the payload
4. Create follow-up tasks derived by triage rules, flag the report
5. Fan out notifications as one batch

Steps 2-5 commit independently and never fail the pipeline; a failure is
logged, rolled back for that step only, and shows up as a lower count.
"""

from datetime import UTC, datetime

import aiosqlite
import structlog
from linkops.core.config import MANAGER_ROLES, SUPER_ADMIN_ROLE
from linkops.core.models import (
    BacklinkReport,
    BacklinkReportPayload,
    BacklinkState,
    BacklinkStatusChange,
    BacklinkType,
    ProjectMember,
    ReportStatus,
    Task,
    TeamUser,
)
from linkops.core.store import StoreGroup
from linkops.core.store.protocols import (
    BacklinkStore,
    DirectoryStore,
    NotificationStore,
    ReportStore,
    TaskStore,
)
from linkops.core.triage import build_notifications, determine_follow_up_tasks
from pydantic import BaseModel, Field
from ulid import ULID

log = structlog.get_logger()


class ReportSubmission(BaseModel):
    """Validated pipeline input"""

    task_id: str
    project_id: str
    assignee_id: str
    status: ReportStatus
    payload: BacklinkReportPayload
    summary: dict | None = None


class ReportProcessingResult(BaseModel):
    """Pipeline outcome; success is False only when the report was not stored"""

    success: bool
    report_id: str | None = None
    task_updated: bool = False
    follow_up_tasks_created: int = 0
    notifications_sent: int = 0
    error: str | None = Field(default=None, exclude=True)


class ReportService:
    """Backlink report business service"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._conn = store_group.conn
        self._reports: ReportStore = store_group.report_store
        self._tasks: TaskStore = store_group.task_store
        self._notifications: NotificationStore = store_group.notification_store
        self._directory: DirectoryStore = store_group.directory_store
        self._backlinks: BacklinkStore = store_group.backlink_store

    async def process(self, submission: ReportSubmission) -> ReportProcessingResult:
        """Run the full pipeline for one submission

        Submissions are not de-duplicated: the same payload sent twice creates
        two reports and two sets of follow-up tasks.
        """
        report = await self._persist_report(submission)
        if report is None:
            return ReportProcessingResult(
                success=False,
                error="failed to store backlink report",
            )

        structlog.contextvars.bind_contextvars(report_id=report.id)

        task_updated = await self._complete_task(report)
        await self._track_backlinks(report)
        follow_up_count = await self._create_follow_up_tasks(report)
        notifications_sent = await self._send_notifications(report, follow_up_count)

        log.info(
            "report_processed",
            task_id=report.task_id,
            status=report.status.value,
            task_updated=task_updated,
            follow_up_tasks_created=follow_up_count,
            notifications_sent=notifications_sent,
        )
        return ReportProcessingResult(
            success=True,
            report_id=report.id,
            task_updated=task_updated,
            follow_up_tasks_created=follow_up_count,
            notifications_sent=notifications_sent,
        )

    async def _persist_report(self, submission: ReportSubmission) -> BacklinkReport | None:
        report = BacklinkReport.from_submission(
            report_id=str(ULID()),
            task_id=submission.task_id,
            project_id=submission.project_id,
            assignee_id=submission.assignee_id,
            status=submission.status,
            payload=submission.payload,
            summary=submission.summary,
            processed_at=datetime.now(UTC),
        )
        try:
            await self._reports.insert_report(report)
            await self._conn.commit()
        except aiosqlite.Error as e:
            await self._conn.rollback()
            log.error(
                "report_insert_failed",
                task_id=submission.task_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            return None

        log.info(
            "report_persisted",
            report_id=report.id,
            task_id=report.task_id,
            status=report.status.value,
        )
        return report

    async def _complete_task(self, report: BacklinkReport) -> bool:
        try:
            updated = await self._tasks.complete_task(
                report.task_id, report.status, datetime.now(UTC)
            )
            await self._conn.commit()
        except aiosqlite.Error as e:
            await self._conn.rollback()
            log.error(
                "task_update_failed",
                task_id=report.task_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            return False

        if not updated:
            log.warning("task_update_no_rows", task_id=report.task_id)
            return True

        log.info(
            "task_completed",
            task_id=report.task_id,
            backlink_report_status=report.status.value,
        )
        return True

    async def _track_backlinks(self, report: BacklinkReport) -> int:
        """Apply link statuses from the payload to tracked backlinks

        Returns:
            Number of backlinks whose status was recorded
        """
        now = datetime.now(UTC)
        updates: list[tuple[BacklinkType, str | None, BacklinkState, str, dict]] = []

        for link in report.payload.created_links:
            new_status = BacklinkState(link.status.value)
            updates.append(
                (
                    BacklinkType.CREATED,
                    link.url,
                    new_status,
                    "Report check",
                    {
                        "status": new_status.value,
                        "checked_at": now.isoformat(),
                        "original_status_from_report": link.model_dump(mode="json"),
                    },
                )
            )

        for blog in report.payload.indexed_blogs:
            new_status = BacklinkState.WORKING if blog.is_indexed else BacklinkState.DEAD
            updates.append(
                (
                    BacklinkType.INDEXED,
                    blog.blog_url,
                    new_status,
                    "Report check",
                    {
                        "status": new_status.value,
                        "is_indexed": blog.is_indexed,
                        "checked_at": now.isoformat(),
                    },
                )
            )

        recorded = 0
        for link_type, url, new_status, reason, check_result in updates:
            # Crawler entries without a URL cannot match a tracked link
            if url is None:
                continue
            try:
                backlink = await self._backlinks.find_link(report.task_id, url, link_type)
                if backlink is None:
                    continue
                await self._record_status(
                    backlink.id, backlink.link_status, new_status, reason, check_result,
                    report.id, now,
                )
                await self._conn.commit()
                recorded += 1
            except aiosqlite.Error as e:
                await self._conn.rollback()
                log.error(
                    "backlink_status_update_failed",
                    url=url,
                    link_type=link_type.value,
                    error_type=type(e).__name__,
                )

        try:
            filtered = await self._backlinks.list_links(report.task_id, BacklinkType.FILTERED)
        except aiosqlite.Error as e:
            log.error("filtered_links_fetch_failed", error_type=type(e).__name__)
            filtered = []

        for backlink in filtered:
            try:
                await self._record_status(
                    backlink.id,
                    backlink.link_status,
                    BacklinkState.FILTERED,
                    "Intentionally filtered",
                    {
                        "status": BacklinkState.FILTERED.value,
                        "reason": "Intentionally filtered",
                        "checked_at": now.isoformat(),
                    },
                    report.id,
                    now,
                )
                await self._conn.commit()
                recorded += 1
            except aiosqlite.Error as e:
                await self._conn.rollback()
                log.error(
                    "backlink_status_update_failed",
                    backlink_id=backlink.id,
                    link_type=BacklinkType.FILTERED.value,
                    error_type=type(e).__name__,
                )

        if recorded:
            log.info("backlink_statuses_recorded", count=recorded)
        return recorded

    async def _record_status(
        self,
        backlink_id: str,
        old_status: BacklinkState,
        new_status: BacklinkState,
        reason: str,
        check_result: dict,
        report_id: str,
        now: datetime,
    ) -> None:
        await self._backlinks.update_status(
            backlink_id, new_status, check_result, report_id, now
        )
        await self._backlinks.append_history(
            BacklinkStatusChange(
                id=str(ULID()),
                backlink_id=backlink_id,
                old_status=old_status,
                new_status=new_status,
                change_reason=reason,
                report_id=report_id,
                changed_at=now,
            )
        )

    async def _create_follow_up_tasks(self, report: BacklinkReport) -> int:
        follow_ups = determine_follow_up_tasks(report.payload, report.status)
        created = 0

        for follow_up in follow_ups:
            now = datetime.now(UTC)
            task = Task(
                id=str(ULID()),
                project_id=report.project_id,
                assignee_id=report.assignee_id,
                title=follow_up.title,
                description=follow_up.description,
                type=follow_up.type,
                priority=follow_up.priority,
                status=follow_up.status,
                parent_report_id=report.id,
                created_at=now,
                updated_at=now,
            )
            try:
                await self._tasks.create_task(task)
                await self._conn.commit()
            except aiosqlite.Error as e:
                await self._conn.rollback()
                log.error(
                    "follow_up_task_create_failed",
                    title=follow_up.title,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                continue
            created += 1
            log.info("follow_up_task_created", task_id=task.id, title=task.title)

        if created:
            try:
                await self._reports.mark_follow_up_tasks_created(report.id)
                await self._conn.commit()
            except aiosqlite.Error as e:
                await self._conn.rollback()
                log.error(
                    "follow_up_flag_update_failed",
                    error_type=type(e).__name__,
                )

        return created

    async def _load_managers(self, project_id: str) -> list[ProjectMember]:
        try:
            return await self._directory.list_project_members(project_id, MANAGER_ROLES)
        except aiosqlite.Error as e:
            log.error("manager_lookup_failed", project_id=project_id, error_type=type(e).__name__)
            return []

    async def _load_super_admins(self) -> list[TeamUser]:
        try:
            return await self._directory.list_users_by_role(SUPER_ADMIN_ROLE)
        except aiosqlite.Error as e:
            log.error("super_admin_lookup_failed", error_type=type(e).__name__)
            return []

    async def _send_notifications(
        self, report: BacklinkReport, follow_up_count: int
    ) -> int:
        managers = await self._load_managers(report.project_id)
        super_admins = (
            await self._load_super_admins()
            if report.status == ReportStatus.CRITICAL
            else []
        )

        notifications = build_notifications(
            report_id=report.id,
            project_id=report.project_id,
            assignee_id=report.assignee_id,
            status=report.status,
            follow_up_count=follow_up_count,
            managers=managers,
            super_admins=super_admins,
            now=datetime.now(UTC),
        )

        try:
            await self._notifications.insert_notifications(notifications)
            await self._conn.commit()
        except aiosqlite.Error as e:
            await self._conn.rollback()
            log.error(
                "notification_insert_failed",
                count=len(notifications),
                error_type=type(e).__name__,
                error=str(e),
            )
            return 0

        log.info("notifications_sent", count=len(notifications))
        return len(notifications)
