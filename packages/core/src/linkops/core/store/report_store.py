"""ReportStore SQLite implementation

Reports are written once; the only update is the follow-up flag.
"""

import json
from datetime import datetime

import aiosqlite

from ..models.payloads import BacklinkReportPayload
from ..models.report import BacklinkReport, CreatedLinksSummary, IndexedBlogsSummary

_COLUMNS = (
    "id, task_id, project_id, assignee_id, status, total_links_checked, "
    "total_working, total_dead, health_percentage, created_links_summary, "
    "indexed_blogs_summary, summary, payload, follow_up_tasks_created, processed_at"
)


class SqliteReportStore:
    """ReportStore backed by SQLite"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def insert_report(self, report: BacklinkReport) -> None:
        """Insert a report row (does not commit)"""
        await self._conn.execute(
            f"""
            INSERT INTO backlink_reports ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                report.id,
                report.task_id,
                report.project_id,
                report.assignee_id,
                report.status.value,
                report.total_links_checked,
                report.total_working,
                report.total_dead,
                report.health_percentage,
                report.created_links_summary.model_dump_json(),
                report.indexed_blogs_summary.model_dump_json(),
                json.dumps(report.summary, ensure_ascii=False),
                report.payload.model_dump_json(),
                int(report.follow_up_tasks_created),
                report.processed_at.isoformat(),
            ),
        )

    async def get_report(self, report_id: str) -> BacklinkReport | None:
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM backlink_reports WHERE id = ?",
            (report_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_report(row)

    async def list_reports(
        self,
        project_id: str | None = None,
        assignee_id: str | None = None,
        status: str | None = None,
    ) -> list[BacklinkReport]:
        """List reports, newest first, filtered by equality on the given fields"""
        clauses: list[str] = []
        params: list[str] = []
        for column, value in (
            ("project_id", project_id),
            ("assignee_id", assignee_id),
            ("status", status),
        ):
            if value:
                clauses.append(f"{column} = ?")
                params.append(value)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        cursor = await self._conn.execute(
            f"""
            SELECT {_COLUMNS} FROM backlink_reports
            {where}
            ORDER BY processed_at DESC, rowid DESC
            """,
            params,
        )
        rows = await cursor.fetchall()
        return [self._row_to_report(row) for row in rows]

    async def count_reports(self, task_id: str) -> int:
        cursor = await self._conn.execute(
            "SELECT COUNT(*) FROM backlink_reports WHERE task_id = ?",
            (task_id,),
        )
        row = await cursor.fetchone()
        return row[0] if row else 0

    async def mark_follow_up_tasks_created(self, report_id: str) -> int:
        """Set follow_up_tasks_created; returns the number of rows updated"""
        cursor = await self._conn.execute(
            "UPDATE backlink_reports SET follow_up_tasks_created = 1 WHERE id = ?",
            (report_id,),
        )
        return cursor.rowcount

    @staticmethod
    def _row_to_report(row: aiosqlite.Row) -> BacklinkReport:
        return BacklinkReport(
            id=row[0],
            task_id=row[1],
            project_id=row[2],
            assignee_id=row[3],
            status=row[4],
            total_links_checked=row[5],
            total_working=row[6],
            total_dead=row[7],
            health_percentage=row[8],
            created_links_summary=CreatedLinksSummary.model_validate_json(row[9]),
            indexed_blogs_summary=IndexedBlogsSummary.model_validate_json(row[10]),
            summary=json.loads(row[11]) if row[11] else {},
            payload=BacklinkReportPayload.model_validate_json(row[12]),
            follow_up_tasks_created=bool(row[13]),
            processed_at=datetime.fromisoformat(row[14]),
        )
