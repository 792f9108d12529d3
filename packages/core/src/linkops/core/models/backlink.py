"""Backlink tracking models

backlinks holds every URL submitted for a task; backlink_status_history is
append-only and records each status change with the report that caused it.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import BacklinkState, BacklinkType


class Backlink(BaseModel):
    """A tracked backlink"""

    id: str = Field(description="Unique id, ULID")
    url: str
    project_id: str
    task_id: str
    link_type: BacklinkType
    link_status: BacklinkState = BacklinkState.PENDING
    report_id: str | None = None
    last_check_result: dict = Field(default_factory=dict)
    created_at: datetime
    last_updated_status: datetime


class BacklinkStatusChange(BaseModel):
    """Status history entry"""

    id: str = Field(description="Unique id, ULID")
    backlink_id: str
    old_status: BacklinkState
    new_status: BacklinkState
    change_reason: str = ""
    report_id: str | None = None
    changed_at: datetime
