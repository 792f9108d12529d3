"""Report triage rules -- follow-up task derivation and notification planning

Both functions are free of persistence: they take already-loaded data and
return the rows the pipeline should write.
"""

from datetime import datetime

from ulid import ULID

from .config import LOW_INTERLINK_THRESHOLD
from .models import (
    BacklinkReportPayload,
    FollowUpTask,
    Notification,
    NotificationType,
    ProjectMember,
    ReportStatus,
    TaskPriority,
    TeamUser,
)


def _critical_rules(payload: BacklinkReportPayload) -> list[FollowUpTask]:
    tasks: list[FollowUpTask] = []

    dead_links = payload.summary.dead_links
    if dead_links > 0:
        tasks.append(
            FollowUpTask(
                title="Fix dead backlink URLs",
                description=(
                    f"{dead_links} created backlinks are returning dead/404 status. "
                    "Verify and fix these URLs."
                ),
                priority=TaskPriority.HIGH,
            )
        )

    critical_blogs = [
        blog
        for blog in payload.indexed_blogs
        if not blog.is_indexed or blog.has_dead_interlink
    ]
    if critical_blogs:
        tasks.append(
            FollowUpTask(
                title="Fix critical blog interlinks",
                description=(
                    f"{len(critical_blogs)} blogs are not indexed or contain dead "
                    "interlinks. Fix their indexing and interlinks."
                ),
                priority=TaskPriority.HIGH,
            )
        )

    dead_interlinks = payload.summary.dead_interlinks
    if dead_interlinks > 0:
        tasks.append(
            FollowUpTask(
                title="Replace dead interlinks",
                description=(
                    f"{dead_interlinks} interlinks within blog posts are dead "
                    "and need replacement."
                ),
                priority=TaskPriority.HIGH,
            )
        )

    return tasks


def _warning_rules(payload: BacklinkReportPayload) -> list[FollowUpTask]:
    tasks: list[FollowUpTask] = []

    low_interlink_blogs = [
        blog
        for blog in payload.indexed_blogs
        if blog.interlink_count < LOW_INTERLINK_THRESHOLD
    ]
    if low_interlink_blogs:
        tasks.append(
            FollowUpTask(
                title="Improve interlinking",
                description=(
                    f"{len(low_interlink_blogs)} blogs have fewer than "
                    f"{LOW_INTERLINK_THRESHOLD} interlinks. Add more internal links."
                ),
                priority=TaskPriority.MEDIUM,
            )
        )

    irrelevant = [issue for issue in payload.issues if issue.type == "irrelevant_link"]
    if irrelevant:
        tasks.append(
            FollowUpTask(
                title="Improve link relevance",
                description=(
                    f"{len(irrelevant)} links have been flagged as potentially "
                    "irrelevant. Review and improve anchor text relevance."
                ),
                priority=TaskPriority.MEDIUM,
            )
        )

    return tasks


def determine_follow_up_tasks(
    payload: BacklinkReportPayload,
    status: ReportStatus,
) -> list[FollowUpTask]:
    """Derive remediation tasks from a report

    Critical reports run the critical rules, warning reports run the warning
    rules, healthy reports produce nothing.

    Args:
        payload: submitted report payload
        status: report classification

    Returns:
        Follow-up task descriptors in rule order
    """
    if status == ReportStatus.CRITICAL:
        return _critical_rules(payload)
    if status == ReportStatus.WARNING:
        return _warning_rules(payload)
    return []


def _assignee_message(status: ReportStatus, follow_up_count: int) -> str:
    if status == ReportStatus.CRITICAL:
        return (
            "Your backlink report has critical issues. "
            f"{follow_up_count} follow-up tasks have been created."
        )
    if status == ReportStatus.WARNING:
        return (
            "Your backlink report has warnings. "
            f"{follow_up_count} follow-up tasks have been created."
        )
    return "Your backlink report shows all links are healthy!"


def build_notifications(
    report_id: str,
    project_id: str,
    assignee_id: str,
    status: ReportStatus,
    follow_up_count: int,
    managers: list[ProjectMember],
    super_admins: list[TeamUser],
    now: datetime,
) -> list[Notification]:
    """Plan the notification rows for one report

    Order: assignee, then managers/admins of the project, then super admins
    (critical only). The assignee is skipped in the later groups; no other
    de-duplication happens, so a user holding several roles gets one row
    per role.

    Args:
        report_id: persisted report id
        project_id: report project
        assignee_id: task assignee
        status: report classification
        follow_up_count: number of follow-up tasks actually created
        managers: project members already filtered to manager/admin roles
        super_admins: users holding the super-admin role
        now: creation timestamp for every row

    Returns:
        Notification rows ready for a batch insert
    """
    label = status.value.upper()

    def _row(user_id: str, title: str, message: str, data: dict) -> Notification:
        return Notification(
            id=str(ULID()),
            user_id=user_id,
            type=NotificationType.BACKLINK_REPORT,
            title=title,
            message=message,
            data=data,
            read=False,
            created_at=now,
        )

    rows = [
        _row(
            assignee_id,
            f"Backlink Report Generated: {label}",
            _assignee_message(status, follow_up_count),
            {"report_id": report_id, "status": status.value},
        )
    ]

    for member in managers:
        if member.user_id == assignee_id:
            continue
        rows.append(
            _row(
                member.user_id,
                f"New Backlink Report: {label}",
                f"A {status.value} backlink report has been generated for your project.",
                {"report_id": report_id, "status": status.value, "project_id": project_id},
            )
        )

    if status == ReportStatus.CRITICAL:
        for admin in super_admins:
            if admin.id == assignee_id:
                continue
            rows.append(
                _row(
                    admin.id,
                    f"Backlink Report Alert: {label}",
                    "A critical backlink report has been generated and requires attention.",
                    {
                        "report_id": report_id,
                        "status": status.value,
                        "project_id": project_id,
                    },
                )
            )

    return rows
