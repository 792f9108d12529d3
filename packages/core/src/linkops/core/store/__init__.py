"""LinkOps Core Store -- SQLite persistence

Factory for a group of table stores sharing one database connection.
"""

from pathlib import Path

import aiosqlite

from .backlink_store import SqliteBacklinkStore
from .directory_store import SqliteDirectoryStore
from .notification_store import SqliteNotificationStore
from .report_store import SqliteReportStore
from .sqlite_init import init_db
from .task_store import SqliteTaskStore


class StoreGroup:
    """Store instances sharing one database connection"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        self.report_store = SqliteReportStore(conn)
        self.task_store = SqliteTaskStore(conn)
        self.notification_store = SqliteNotificationStore(conn)
        self.directory_store = SqliteDirectoryStore(conn)
        self.backlink_store = SqliteBacklinkStore(conn)


async def create_store_group(db_path: str) -> StoreGroup:
    """Open the database, initialise the schema and build the store group

    Args:
        db_path: SQLite database file path

    Returns:
        StoreGroup instance
    """
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row
    await init_db(conn)

    return StoreGroup(conn=conn)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "SqliteReportStore",
    "SqliteTaskStore",
    "SqliteNotificationStore",
    "SqliteDirectoryStore",
    "SqliteBacklinkStore",
    "init_db",
]
