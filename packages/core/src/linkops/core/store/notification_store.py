"""NotificationStore SQLite implementation"""

import json
from datetime import datetime

import aiosqlite

from ..models.notification import Notification

_COLUMNS = "id, user_id, type, title, message, data, read, created_at"


class SqliteNotificationStore:
    """NotificationStore backed by SQLite"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def insert_notifications(self, notifications: list[Notification]) -> None:
        """Batch insert (does not commit)

        executemany runs inside the caller's transaction, so a failing row
        leaves the whole batch uncommitted once the caller rolls back.
        """
        await self._conn.executemany(
            f"INSERT INTO notifications ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            [
                (
                    n.id,
                    n.user_id,
                    n.type.value,
                    n.title,
                    n.message,
                    json.dumps(n.data, ensure_ascii=False),
                    int(n.read),
                    n.created_at.isoformat(),
                )
                for n in notifications
            ],
        )

    async def list_for_user(
        self, user_id: str, unread_only: bool = False
    ) -> list[Notification]:
        """Notifications of a user, newest first"""
        sql = f"SELECT {_COLUMNS} FROM notifications WHERE user_id = ?"
        if unread_only:
            sql += " AND read = 0"
        sql += " ORDER BY created_at DESC, rowid DESC"
        cursor = await self._conn.execute(sql, (user_id,))
        rows = await cursor.fetchall()
        return [self._row_to_notification(row) for row in rows]

    async def list_for_report(self, report_id: str) -> list[Notification]:
        """Notifications whose data references a report, in insertion order"""
        cursor = await self._conn.execute(
            f"""
            SELECT {_COLUMNS} FROM notifications
            WHERE json_extract(data, '$.report_id') = ?
            ORDER BY rowid ASC
            """,
            (report_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_notification(row) for row in rows]

    async def mark_read(self, notification_id: str) -> int:
        cursor = await self._conn.execute(
            "UPDATE notifications SET read = 1 WHERE id = ?",
            (notification_id,),
        )
        return cursor.rowcount

    async def get_notification(self, notification_id: str) -> Notification | None:
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM notifications WHERE id = ?",
            (notification_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_notification(row)

    @staticmethod
    def _row_to_notification(row: aiosqlite.Row) -> Notification:
        return Notification(
            id=row[0],
            user_id=row[1],
            type=row[2],
            title=row[3],
            message=row[4],
            data=json.loads(row[5]) if row[5] else {},
            read=bool(row[6]),
            created_at=datetime.fromisoformat(row[7]),
        )
