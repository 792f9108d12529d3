"""Task domain model

Tasks are owned by the dashboard; this service only completes the task a report
belongs to and inserts follow-up tasks derived from report triage.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import ReportStatus, TaskPriority, TaskStatus, TaskType


class Task(BaseModel):
    """Task row"""

    id: str = Field(description="Unique id")
    project_id: str
    assignee_id: str | None = None
    title: str = ""
    description: str = ""
    type: TaskType = TaskType.GENERAL
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    backlink_report_status: ReportStatus | None = Field(
        default=None, description="Badge of the latest backlink report"
    )
    parent_report_id: str | None = Field(
        default=None, description="Report that spawned this task"
    )
    created_at: datetime
    updated_at: datetime


class FollowUpTask(BaseModel):
    """Remediation task descriptor produced by report triage"""

    title: str
    description: str
    priority: TaskPriority
    type: TaskType = TaskType.BACKLINKS
    status: TaskStatus = TaskStatus.TODO
