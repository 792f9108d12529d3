"""BacklinkStore SQLite implementation

backlinks rows are updated in place; backlink_status_history is append-only.
"""

import json
from datetime import datetime

import aiosqlite

from ..models.backlink import Backlink, BacklinkStatusChange
from ..models.enums import BacklinkState, BacklinkType

_COLUMNS = (
    "id, url, project_id, task_id, link_type, link_status, report_id, "
    "last_check_result, created_at, last_updated_status"
)


class SqliteBacklinkStore:
    """BacklinkStore backed by SQLite"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def register_links(self, links: list[Backlink]) -> None:
        """Batch insert tracked links (does not commit)"""
        await self._conn.executemany(
            f"INSERT INTO backlinks ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            [
                (
                    link.id,
                    link.url,
                    link.project_id,
                    link.task_id,
                    link.link_type.value,
                    link.link_status.value,
                    link.report_id,
                    json.dumps(link.last_check_result, ensure_ascii=False),
                    link.created_at.isoformat(),
                    link.last_updated_status.isoformat(),
                )
                for link in links
            ],
        )

    async def find_link(
        self, task_id: str, url: str, link_type: BacklinkType
    ) -> Backlink | None:
        """Most recently registered link matching (task, url, type)"""
        cursor = await self._conn.execute(
            f"""
            SELECT {_COLUMNS} FROM backlinks
            WHERE task_id = ? AND url = ? AND link_type = ?
            ORDER BY rowid DESC LIMIT 1
            """,
            (task_id, url, link_type.value),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_backlink(row)

    async def list_links(
        self, task_id: str, link_type: BacklinkType | None = None
    ) -> list[Backlink]:
        if link_type is None:
            cursor = await self._conn.execute(
                f"SELECT {_COLUMNS} FROM backlinks WHERE task_id = ? ORDER BY rowid ASC",
                (task_id,),
            )
        else:
            cursor = await self._conn.execute(
                f"""
                SELECT {_COLUMNS} FROM backlinks
                WHERE task_id = ? AND link_type = ?
                ORDER BY rowid ASC
                """,
                (task_id, link_type.value),
            )
        rows = await cursor.fetchall()
        return [self._row_to_backlink(row) for row in rows]

    async def update_status(
        self,
        backlink_id: str,
        new_status: BacklinkState,
        check_result: dict,
        report_id: str,
        updated_at: datetime,
    ) -> None:
        await self._conn.execute(
            """
            UPDATE backlinks
            SET link_status = ?, last_check_result = ?, report_id = ?,
                last_updated_status = ?
            WHERE id = ?
            """,
            (
                new_status.value,
                json.dumps(check_result, ensure_ascii=False),
                report_id,
                updated_at.isoformat(),
                backlink_id,
            ),
        )

    async def append_history(self, change: BacklinkStatusChange) -> None:
        await self._conn.execute(
            """
            INSERT INTO backlink_status_history (id, backlink_id, old_status,
                                                 new_status, change_reason,
                                                 report_id, changed_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                change.id,
                change.backlink_id,
                change.old_status.value,
                change.new_status.value,
                change.change_reason,
                change.report_id,
                change.changed_at.isoformat(),
            ),
        )

    async def list_history(self, backlink_id: str) -> list[BacklinkStatusChange]:
        cursor = await self._conn.execute(
            """
            SELECT id, backlink_id, old_status, new_status, change_reason,
                   report_id, changed_at
            FROM backlink_status_history
            WHERE backlink_id = ?
            ORDER BY changed_at ASC, rowid ASC
            """,
            (backlink_id,),
        )
        rows = await cursor.fetchall()
        return [
            BacklinkStatusChange(
                id=row[0],
                backlink_id=row[1],
                old_status=row[2],
                new_status=row[3],
                change_reason=row[4],
                report_id=row[5],
                changed_at=datetime.fromisoformat(row[6]),
            )
            for row in rows
        ]

    @staticmethod
    def _row_to_backlink(row: aiosqlite.Row) -> Backlink:
        return Backlink(
            id=row[0],
            url=row[1],
            project_id=row[2],
            task_id=row[3],
            link_type=row[4],
            link_status=row[5],
            report_id=row[6],
            last_check_result=json.loads(row[7]) if row[7] else {},
            created_at=datetime.fromisoformat(row[8]),
            last_updated_status=datetime.fromisoformat(row[9]),
        )
