"""Enum definitions -- report classification, task fields, link tracking

Values match the column contents of the dashboard tables so rows can be read
back without translation.
"""

from enum import StrEnum


class ReportStatus(StrEnum):
    """Overall health classification of a backlink report"""

    CRITICAL = "critical"
    WARNING = "warning"
    HEALTHY = "healthy"


class TaskStatus(StrEnum):
    """Task workflow status"""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    COMPLETED = "completed"


class TaskPriority(StrEnum):
    """Task priority"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskType(StrEnum):
    """Task category"""

    BACKLINKS = "backlinks"
    CONTENT = "content"
    TECHNICAL = "technical"
    GENERAL = "general"


class LinkStatus(StrEnum):
    """Status of a single link as reported by a crawler or probe"""

    WORKING = "working"
    DEAD = "dead"


class BacklinkType(StrEnum):
    """How a tracked backlink entered the system"""

    CREATED = "created"
    INDEXED = "indexed"
    FILTERED = "filtered"


class BacklinkState(StrEnum):
    """Tracked status of a row in the backlinks table"""

    PENDING = "pending"
    WORKING = "working"
    DEAD = "dead"
    FILTERED = "filtered"


class NotificationType(StrEnum):
    """Notification event type"""

    BACKLINK_REPORT = "backlink_report"
