"""Store Protocol interfaces

Structural interfaces for the tables the report pipeline writes and reads.
The SQLite stores implement them; tests may substitute any object with the
same async methods.
"""

from datetime import datetime
from typing import Protocol

from ..models.backlink import Backlink, BacklinkStatusChange
from ..models.directory import ProjectMember, TeamUser
from ..models.enums import BacklinkState, BacklinkType, ReportStatus
from ..models.notification import Notification
from ..models.report import BacklinkReport
from ..models.task import Task


class ReportStore(Protocol):
    """backlink_reports table"""

    async def insert_report(self, report: BacklinkReport) -> None: ...

    async def get_report(self, report_id: str) -> BacklinkReport | None: ...

    async def list_reports(
        self,
        project_id: str | None = None,
        assignee_id: str | None = None,
        status: str | None = None,
    ) -> list[BacklinkReport]: ...

    async def mark_follow_up_tasks_created(self, report_id: str) -> int: ...


class TaskStore(Protocol):
    """tasks table"""

    async def create_task(self, task: Task) -> None: ...

    async def get_task(self, task_id: str) -> Task | None: ...

    async def list_tasks_for_report(self, report_id: str) -> list[Task]: ...

    async def complete_task(
        self,
        task_id: str,
        report_status: ReportStatus,
        updated_at: datetime,
    ) -> int: ...


class NotificationStore(Protocol):
    """notifications table"""

    async def insert_notifications(self, notifications: list[Notification]) -> None: ...

    async def list_for_user(
        self, user_id: str, unread_only: bool = False
    ) -> list[Notification]: ...

    async def mark_read(self, notification_id: str) -> int: ...


class DirectoryStore(Protocol):
    """users + project_members role lookups"""

    async def list_project_members(
        self, project_id: str, roles: tuple[str, ...]
    ) -> list[ProjectMember]: ...

    async def list_users_by_role(self, role: str) -> list[TeamUser]: ...


class BacklinkStore(Protocol):
    """backlinks + backlink_status_history tables"""

    async def register_links(self, links: list[Backlink]) -> None: ...

    async def find_link(
        self, task_id: str, url: str, link_type: BacklinkType
    ) -> Backlink | None: ...

    async def list_links(
        self, task_id: str, link_type: BacklinkType | None = None
    ) -> list[Backlink]: ...

    async def update_status(
        self,
        backlink_id: str,
        new_status: BacklinkState,
        check_result: dict,
        report_id: str,
        updated_at: datetime,
    ) -> None: ...

    async def append_history(self, change: BacklinkStatusChange) -> None: ...
