"""TaskStore SQLite implementation

Methods do not commit; the caller owns the transaction boundary.
"""

from datetime import datetime

import aiosqlite

from ..models.enums import ReportStatus, TaskStatus
from ..models.task import Task

_COLUMNS = (
    "id, project_id, assignee_id, title, description, type, priority, status, "
    "backlink_report_status, parent_report_id, created_at, updated_at"
)


class SqliteTaskStore:
    """TaskStore backed by SQLite"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_task(self, task: Task) -> None:
        """Insert a task row"""
        await self._conn.execute(
            f"""
            INSERT INTO tasks ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                task.id,
                task.project_id,
                task.assignee_id,
                task.title,
                task.description,
                task.type.value,
                task.priority.value,
                task.status.value,
                task.backlink_report_status.value if task.backlink_report_status else None,
                task.parent_report_id,
                task.created_at.isoformat(),
                task.updated_at.isoformat(),
            ),
        )

    async def get_task(self, task_id: str) -> Task | None:
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks WHERE id = ?",
            (task_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def list_tasks_for_report(self, report_id: str) -> list[Task]:
        """Follow-up tasks spawned by a report, oldest first"""
        cursor = await self._conn.execute(
            f"""
            SELECT {_COLUMNS} FROM tasks
            WHERE parent_report_id = ?
            ORDER BY created_at ASC, rowid ASC
            """,
            (report_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def complete_task(
        self,
        task_id: str,
        report_status: ReportStatus,
        updated_at: datetime,
    ) -> int:
        """Mark a task completed and set its report badge

        Returns:
            Number of rows updated (0 when the task does not exist)
        """
        cursor = await self._conn.execute(
            """
            UPDATE tasks
            SET status = ?, backlink_report_status = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                TaskStatus.COMPLETED.value,
                report_status.value,
                updated_at.isoformat(),
                task_id,
            ),
        )
        return cursor.rowcount

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        return Task(
            id=row[0],
            project_id=row[1],
            assignee_id=row[2],
            title=row[3],
            description=row[4],
            type=row[5],
            priority=row[6],
            status=row[7],
            backlink_report_status=row[8],
            parent_report_id=row[9],
            created_at=datetime.fromisoformat(row[10]),
            updated_at=datetime.fromisoformat(row[11]),
        )
