"""Report statistics -- aggregates for the reports dashboard"""

from linkops.core.config import TOP_FAILING_PROJECTS_LIMIT
from linkops.core.models import BacklinkReport, ReportStatus
from pydantic import BaseModel, Field


class ProjectFailureCount(BaseModel):
    project_id: str
    total: int = 0
    critical: int = 0
    warning: int = 0


class ReportStats(BaseModel):
    """Dashboard statistics over a set of reports"""

    total: int = 0
    critical: int = 0
    warning: int = 0
    healthy: int = 0
    total_dead_links: int = 0
    total_working_links: int = 0
    total_dead_interlinks: int = 0
    total_working_interlinks: int = 0
    top_failing_projects: list[ProjectFailureCount] = Field(default_factory=list)


def compute_report_stats(reports: list[BacklinkReport]) -> ReportStats:
    """Count reports by status, sum link metrics, rank failing projects

    Projects are ranked by critical + warning reports; ties keep first-seen
    order.
    """
    stats = ReportStats(total=len(reports))
    projects: dict[str, ProjectFailureCount] = {}

    for report in reports:
        if report.status == ReportStatus.CRITICAL:
            stats.critical += 1
        elif report.status == ReportStatus.WARNING:
            stats.warning += 1
        else:
            stats.healthy += 1

        stats.total_dead_links += report.total_dead
        stats.total_working_links += report.total_working
        interlinks = report.indexed_blogs_summary.interlinks_summary
        stats.total_dead_interlinks += interlinks.dead
        stats.total_working_interlinks += interlinks.working

        counts = projects.setdefault(
            report.project_id, ProjectFailureCount(project_id=report.project_id)
        )
        counts.total += 1
        if report.status == ReportStatus.CRITICAL:
            counts.critical += 1
        elif report.status == ReportStatus.WARNING:
            counts.warning += 1

    stats.top_failing_projects = sorted(
        projects.values(),
        key=lambda c: c.critical + c.warning,
        reverse=True,
    )[:TOP_FAILING_PROJECTS_LIMIT]
    return stats
