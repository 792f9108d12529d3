"""LinkOps Core Domain Models -- public type exports

Import every public model type from here.
"""

from .backlink import Backlink, BacklinkStatusChange
from .directory import ProjectMember, TeamUser
from .enums import (
    BacklinkState,
    BacklinkType,
    LinkStatus,
    NotificationType,
    ReportStatus,
    TaskPriority,
    TaskStatus,
    TaskType,
)
from .notification import Notification
from .payloads import (
    BacklinkReportPayload,
    CreatedLink,
    IndexedBlog,
    Interlink,
    ReportIssue,
    ReportSummary,
)
from .report import (
    BacklinkReport,
    CreatedLinksSummary,
    IndexedBlogsSummary,
    InterlinksSummary,
)
from .task import FollowUpTask, Task

__all__ = [
    # Enums
    "ReportStatus",
    "TaskStatus",
    "TaskPriority",
    "TaskType",
    "LinkStatus",
    "BacklinkType",
    "BacklinkState",
    "NotificationType",
    # Payload
    "BacklinkReportPayload",
    "CreatedLink",
    "IndexedBlog",
    "Interlink",
    "ReportIssue",
    "ReportSummary",
    # Report
    "BacklinkReport",
    "CreatedLinksSummary",
    "IndexedBlogsSummary",
    "InterlinksSummary",
    # Task
    "Task",
    "FollowUpTask",
    # Notification
    "Notification",
    # Directory
    "TeamUser",
    "ProjectMember",
    # Backlink tracking
    "Backlink",
    "BacklinkStatusChange",
]
