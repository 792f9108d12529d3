"""BacklinkReport domain model

One report row is written per submission. The row is immutable afterwards,
except for the follow_up_tasks_created flag.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import LinkStatus, ReportStatus
from .payloads import BacklinkReportPayload, ReportSummary


class CreatedLinksSummary(BaseModel):
    """Created-link counts plus the dead URLs for quick display"""

    total: int = 0
    working: int = 0
    dead: int = 0
    dead_list: list[str] = Field(default_factory=list)


class InterlinksSummary(BaseModel):
    total: int = 0
    working: int = 0
    dead: int = 0


class IndexedBlogsSummary(BaseModel):
    """Indexed blog counts plus interlink totals"""

    total_blogs: int = 0
    indexed: int = 0
    not_indexed: int = 0
    interlinks_summary: InterlinksSummary = Field(default_factory=InterlinksSummary)


class BacklinkReport(BaseModel):
    """Backlink report -- outcome and classification of one task submission"""

    id: str = Field(description="Unique id, ULID")
    task_id: str
    project_id: str
    assignee_id: str
    status: ReportStatus
    total_links_checked: int = Field(default=0, ge=0)
    total_working: int = Field(default=0, ge=0)
    total_dead: int = Field(default=0, ge=0)
    health_percentage: float = Field(default=100.0, ge=0.0, le=100.0)
    created_links_summary: CreatedLinksSummary = Field(
        default_factory=CreatedLinksSummary
    )
    indexed_blogs_summary: IndexedBlogsSummary = Field(
        default_factory=IndexedBlogsSummary
    )
    summary: dict = Field(default_factory=dict, description="Summary as submitted")
    payload: BacklinkReportPayload = Field(default_factory=BacklinkReportPayload)
    follow_up_tasks_created: bool = False
    processed_at: datetime

    @classmethod
    def from_submission(
        cls,
        report_id: str,
        task_id: str,
        project_id: str,
        assignee_id: str,
        status: ReportStatus,
        payload: BacklinkReportPayload,
        summary: dict | None,
        processed_at: datetime,
    ) -> "BacklinkReport":
        """Build the report row, deriving counts and display summaries

        Link counts come from payload.summary; the display summaries are
        computed from the payload lists.
        """
        counts: ReportSummary = payload.summary
        dead_urls = [
            link.url for link in payload.created_links if link.status == LinkStatus.DEAD
        ]
        interlinks = [i for blog in payload.indexed_blogs for i in blog.interlinks]
        dead_interlinks = sum(1 for i in interlinks if i.status == LinkStatus.DEAD)
        indexed = sum(1 for blog in payload.indexed_blogs if blog.is_indexed)

        total = counts.total_created_links
        health = round(counts.working_links / total * 100, 1) if total else 100.0

        return cls(
            id=report_id,
            task_id=task_id,
            project_id=project_id,
            assignee_id=assignee_id,
            status=status,
            total_links_checked=total,
            total_working=counts.working_links,
            total_dead=counts.dead_links,
            health_percentage=min(health, 100.0),
            created_links_summary=CreatedLinksSummary(
                total=len(payload.created_links),
                working=len(payload.created_links) - len(dead_urls),
                dead=len(dead_urls),
                dead_list=dead_urls,
            ),
            indexed_blogs_summary=IndexedBlogsSummary(
                total_blogs=len(payload.indexed_blogs),
                indexed=indexed,
                not_indexed=len(payload.indexed_blogs) - indexed,
                interlinks_summary=InterlinksSummary(
                    total=len(interlinks),
                    working=len(interlinks) - dead_interlinks,
                    dead=dead_interlinks,
                ),
            ),
            summary=summary if summary is not None else counts.model_dump(),
            payload=payload,
            processed_at=processed_at,
        )
