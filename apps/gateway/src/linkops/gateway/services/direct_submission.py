"""DirectSubmissionService -- operator-submitted link lists

An operator can submit raw URL lists instead of a crawler report. The service
registers the links, probes them, builds a report payload from the probe
results and hands it to the report pipeline.

Indexing is approximated by reachability: a blog post that answers the probe
is recorded as indexed. The search engine index itself is not queried.
"""

from datetime import UTC, datetime

import aiosqlite
import structlog
from linkops.core.models import (
    Backlink,
    BacklinkReportPayload,
    BacklinkState,
    BacklinkType,
    CreatedLink,
    IndexedBlog,
    ReportStatus,
)
from linkops.core.store import StoreGroup
from linkops.linkcheck import LinkChecker
from pydantic import BaseModel, Field
from ulid import ULID

from .report_service import ReportProcessingResult, ReportService, ReportSubmission

log = structlog.get_logger()


class DirectSubmission(BaseModel):
    """Validated direct submission"""

    task_id: str
    project_id: str
    assignee_id: str
    links_created: list[str] = Field(default_factory=list)
    links_indexed: list[str] = Field(default_factory=list)
    links_filtered: list[str] = Field(default_factory=list)


class DirectSubmissionService:
    """Register, audit and report a direct submission"""

    def __init__(self, store_group: StoreGroup, link_checker: LinkChecker) -> None:
        self._stores = store_group
        self._checker = link_checker

    async def submit(self, submission: DirectSubmission) -> ReportProcessingResult:
        await self._register_links(submission)
        payload = await self._audit(submission)

        # Status only reflects created links; unindexed blogs do not escalate
        status = (
            ReportStatus.CRITICAL if payload.summary.dead_links > 0 else ReportStatus.HEALTHY
        )
        log.info(
            "direct_submission_audited",
            task_id=submission.task_id,
            status=status.value,
            dead_links=payload.summary.dead_links,
        )

        return await ReportService(self._stores).process(
            ReportSubmission(
                task_id=submission.task_id,
                project_id=submission.project_id,
                assignee_id=submission.assignee_id,
                status=status,
                payload=payload,
            )
        )

    async def _register_links(self, submission: DirectSubmission) -> int:
        """Insert every submitted URL as a pending backlink

        Failure is logged and does not stop the submission.
        """
        now = datetime.now(UTC)
        links = [
            Backlink(
                id=str(ULID()),
                url=url,
                project_id=submission.project_id,
                task_id=submission.task_id,
                link_type=link_type,
                link_status=BacklinkState.PENDING,
                created_at=now,
                last_updated_status=now,
            )
            for link_type, urls in (
                (BacklinkType.CREATED, submission.links_created),
                (BacklinkType.INDEXED, submission.links_indexed),
                (BacklinkType.FILTERED, submission.links_filtered),
            )
            for url in urls
        ]
        if not links:
            return 0

        try:
            await self._stores.backlink_store.register_links(links)
            await self._stores.conn.commit()
        except aiosqlite.Error as e:
            await self._stores.conn.rollback()
            log.error(
                "backlink_register_failed",
                task_id=submission.task_id,
                count=len(links),
                error_type=type(e).__name__,
            )
            return 0

        log.info("backlinks_registered", task_id=submission.task_id, count=len(links))
        return len(links)

    async def _audit(self, submission: DirectSubmission) -> BacklinkReportPayload:
        created_results = await self._checker.check_many(submission.links_created)
        indexed_results = await self._checker.check_many(submission.links_indexed)

        created_links = [
            CreatedLink(url=result.url, status=result.status) for result in created_results
        ]
        indexed_blogs = [
            IndexedBlog(
                blog_url=result.url,
                is_indexed=result.status_code is not None,
                interlink_count=0,
                interlinks=[],
            )
            for result in indexed_results
        ]

        return BacklinkReportPayload(
            created_links=created_links,
            indexed_blogs=indexed_blogs,
            summary=BacklinkReportPayload.derive_summary(created_links, indexed_blogs),
        )
