"""Backlink report routes

POST /api/backlink-reports: submit a crawler report and run the triage pipeline.
POST /api/backlink-reports/direct: submit raw link lists to be audited first.
GET  /api/backlink-reports: list reports with optional filters.
GET  /api/backlink-reports/stats: dashboard aggregates.
GET  /api/backlink-reports/{report_id}: report detail with follow-up tasks.
"""

import structlog
from fastapi import APIRouter, Depends, Query
from linkops.core.models import BacklinkReportPayload, ReportStatus
from pydantic import BaseModel, Field, ValidationError
from starlette.responses import JSONResponse

from ..deps import get_link_checker, get_store_group
from ..services.direct_submission import DirectSubmission, DirectSubmissionService
from ..services.report_service import ReportService, ReportSubmission
from ..services.report_stats import compute_report_stats

log = structlog.get_logger()

router = APIRouter()


class ReportSubmissionRequest(BaseModel):
    """Report submission body

    Every field is optional at the schema level so a missing field is
    answered with 400 and a list of what is missing.
    """

    task_id: str | None = None
    project_id: str | None = None
    assignee_id: str | None = None
    status: str | None = None
    summary: dict | None = None
    payload: dict | None = None


class DirectSubmissionRequest(BaseModel):
    """Direct submission body"""

    task_id: str | None = None
    project_id: str | None = None
    assignee_id: str | None = None
    links_created: list[str] = Field(default_factory=list)
    links_indexed: list[str] = Field(default_factory=list)
    links_filtered: list[str] = Field(default_factory=list)


class ReportProcessingResponse(BaseModel):
    success: bool
    report_id: str
    task_updated: bool
    follow_up_tasks_created: int
    notifications_sent: int


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


def _missing(body: BaseModel, fields: tuple[str, ...]) -> list[str]:
    return [name for name in fields if getattr(body, name) in (None, "")]


def _processing_response(result) -> JSONResponse:
    if not result.success:
        return _error(400, "REPORT_INSERT_FAILED", result.error or "failed to store report")
    return JSONResponse(
        status_code=200,
        content=ReportProcessingResponse(
            success=True,
            report_id=result.report_id,
            task_updated=result.task_updated,
            follow_up_tasks_created=result.follow_up_tasks_created,
            notifications_sent=result.notifications_sent,
        ).model_dump(),
    )


@router.post("/api/backlink-reports", response_model=ReportProcessingResponse)
async def submit_report(
    body: ReportSubmissionRequest,
    store_group=Depends(get_store_group),
):
    """Persist a report, complete its task, derive follow-ups, notify

    - 400 on missing fields, invalid status/payload, or report insert failure
    - 200 with processing counts otherwise
    """
    missing = _missing(body, ("task_id", "project_id", "assignee_id", "status", "payload"))
    if missing:
        log.warning("report_submission_missing_fields", missing=missing)
        return _error(
            400, "MISSING_FIELDS", f"Missing required fields: {', '.join(missing)}"
        )

    try:
        status = ReportStatus(body.status)
    except ValueError:
        return _error(
            400,
            "INVALID_STATUS",
            f"status must be one of: {', '.join(s.value for s in ReportStatus)}",
        )

    try:
        payload = BacklinkReportPayload.model_validate(body.payload)
    except ValidationError as e:
        return _error(400, "INVALID_PAYLOAD", f"Invalid report payload: {e.error_count()} errors")

    structlog.contextvars.bind_contextvars(trace_id=f"trace-{body.task_id}")

    try:
        result = await ReportService(store_group).process(
            ReportSubmission(
                task_id=body.task_id,
                project_id=body.project_id,
                assignee_id=body.assignee_id,
                status=status,
                payload=payload,
                summary=body.summary,
            )
        )
    except Exception as e:
        log.exception("report_processing_error", error_type=type(e).__name__)
        return _error(500, "INTERNAL_ERROR", str(e) or "Unknown error")

    return _processing_response(result)


@router.post("/api/backlink-reports/direct", response_model=ReportProcessingResponse)
async def submit_direct(
    body: DirectSubmissionRequest,
    store_group=Depends(get_store_group),
    link_checker=Depends(get_link_checker),
):
    """Register and probe raw link lists, then run the triage pipeline"""
    missing = _missing(body, ("task_id", "project_id", "assignee_id"))
    if missing:
        return _error(
            400, "MISSING_FIELDS", f"Missing required fields: {', '.join(missing)}"
        )

    structlog.contextvars.bind_contextvars(trace_id=f"trace-{body.task_id}")

    try:
        result = await DirectSubmissionService(store_group, link_checker).submit(
            DirectSubmission(
                task_id=body.task_id,
                project_id=body.project_id,
                assignee_id=body.assignee_id,
                links_created=body.links_created,
                links_indexed=body.links_indexed,
                links_filtered=body.links_filtered,
            )
        )
    except Exception as e:
        log.exception("direct_submission_error", error_type=type(e).__name__)
        return _error(500, "INTERNAL_ERROR", str(e) or "Unknown error")

    return _processing_response(result)


@router.get("/api/backlink-reports")
async def list_reports(
    project_id: str | None = Query(default=None, description="Filter by project"),
    assignee_id: str | None = Query(default=None, description="Filter by assignee"),
    status: ReportStatus | None = Query(default=None, description="Filter by status"),
    store_group=Depends(get_store_group),
):
    """List reports, newest first"""
    reports = await store_group.report_store.list_reports(
        project_id=project_id,
        assignee_id=assignee_id,
        status=status.value if status else None,
    )
    return {
        "reports": [
            report.model_dump(mode="json", exclude={"payload"}) for report in reports
        ]
    }


@router.get("/api/backlink-reports/stats")
async def report_stats(
    project_id: str | None = Query(default=None, description="Restrict to one project"),
    store_group=Depends(get_store_group),
):
    """Counts by status, link totals and the most failing projects"""
    reports = await store_group.report_store.list_reports(project_id=project_id)
    return compute_report_stats(reports).model_dump()


@router.get("/api/backlink-reports/{report_id}")
async def get_report(
    report_id: str,
    store_group=Depends(get_store_group),
):
    """Report detail including its payload and follow-up tasks"""
    report = await store_group.report_store.get_report(report_id)
    if report is None:
        return _error(404, "REPORT_NOT_FOUND", f"Report with id {report_id} does not exist")

    follow_ups = await store_group.task_store.list_tasks_for_report(report_id)
    return {
        "report": report.model_dump(mode="json"),
        "follow_up_tasks": [task.model_dump(mode="json") for task in follow_ups],
    }
