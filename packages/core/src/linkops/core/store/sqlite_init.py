"""SQLite database initialisation

PRAGMA setup, table DDL and indexes, executed with aiosqlite.
"""

import aiosqlite

# users / project_members: role lookup for notification recipients
_USERS_DDL = """
CREATE TABLE IF NOT EXISTS users (
    id      TEXT PRIMARY KEY,
    email   TEXT NOT NULL DEFAULT '',
    role    TEXT NOT NULL DEFAULT ''
);
"""

_PROJECT_MEMBERS_DDL = """
CREATE TABLE IF NOT EXISTS project_members (
    project_id  TEXT NOT NULL,
    user_id     TEXT NOT NULL,
    role        TEXT NOT NULL DEFAULT 'member',

    PRIMARY KEY (project_id, user_id)
);
"""

_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    id                      TEXT PRIMARY KEY,
    project_id              TEXT NOT NULL,
    assignee_id             TEXT,
    title                   TEXT NOT NULL DEFAULT '',
    description             TEXT NOT NULL DEFAULT '',
    type                    TEXT NOT NULL DEFAULT 'general',
    priority                TEXT NOT NULL DEFAULT 'medium',
    status                  TEXT NOT NULL DEFAULT 'todo',
    backlink_report_status  TEXT,
    parent_report_id        TEXT,
    created_at              TEXT NOT NULL,
    updated_at              TEXT NOT NULL,

    FOREIGN KEY (parent_report_id) REFERENCES backlink_reports(id)
);
"""

_TASKS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_project_id ON tasks(project_id);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_parent_report_id ON tasks(parent_report_id);",
]

# backlink_reports: no foreign key to tasks, duplicate submissions are allowed
_REPORTS_DDL = """
CREATE TABLE IF NOT EXISTS backlink_reports (
    id                      TEXT PRIMARY KEY,
    task_id                 TEXT NOT NULL,
    project_id              TEXT NOT NULL,
    assignee_id             TEXT NOT NULL,
    status                  TEXT NOT NULL,
    total_links_checked     INTEGER NOT NULL DEFAULT 0,
    total_working           INTEGER NOT NULL DEFAULT 0,
    total_dead              INTEGER NOT NULL DEFAULT 0,
    health_percentage       REAL NOT NULL DEFAULT 100.0,
    created_links_summary   TEXT NOT NULL DEFAULT '{}',
    indexed_blogs_summary   TEXT NOT NULL DEFAULT '{}',
    summary                 TEXT NOT NULL DEFAULT '{}',
    payload                 TEXT NOT NULL DEFAULT '{}',
    follow_up_tasks_created INTEGER NOT NULL DEFAULT 0,
    processed_at            TEXT NOT NULL
);
"""

_REPORTS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_reports_task_id ON backlink_reports(task_id);",
    "CREATE INDEX IF NOT EXISTS idx_reports_project_id ON backlink_reports(project_id);",
    (
        "CREATE INDEX IF NOT EXISTS idx_reports_processed_at "
        "ON backlink_reports(processed_at DESC);"
    ),
]

_NOTIFICATIONS_DDL = """
CREATE TABLE IF NOT EXISTS notifications (
    id          TEXT PRIMARY KEY,
    user_id     TEXT NOT NULL,
    type        TEXT NOT NULL,
    title       TEXT NOT NULL DEFAULT '',
    message     TEXT NOT NULL DEFAULT '',
    data        TEXT NOT NULL DEFAULT '{}',
    read        INTEGER NOT NULL DEFAULT 0,
    created_at  TEXT NOT NULL
);
"""

_NOTIFICATIONS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_notifications_user_id ON notifications(user_id, created_at DESC);",
]

_BACKLINKS_DDL = """
CREATE TABLE IF NOT EXISTS backlinks (
    id                  TEXT PRIMARY KEY,
    url                 TEXT NOT NULL,
    project_id          TEXT NOT NULL,
    task_id             TEXT NOT NULL,
    link_type           TEXT NOT NULL,
    link_status         TEXT NOT NULL DEFAULT 'pending',
    report_id           TEXT,
    last_check_result   TEXT NOT NULL DEFAULT '{}',
    created_at          TEXT NOT NULL,
    last_updated_status TEXT NOT NULL
);
"""

_BACKLINKS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_backlinks_task_type ON backlinks(task_id, link_type);",
    "CREATE INDEX IF NOT EXISTS idx_backlinks_url ON backlinks(url);",
]

# backlink_status_history: append-only
_STATUS_HISTORY_DDL = """
CREATE TABLE IF NOT EXISTS backlink_status_history (
    id              TEXT PRIMARY KEY,
    backlink_id     TEXT NOT NULL,
    old_status      TEXT NOT NULL,
    new_status      TEXT NOT NULL,
    change_reason   TEXT NOT NULL DEFAULT '',
    report_id       TEXT,
    changed_at      TEXT NOT NULL,

    FOREIGN KEY (backlink_id) REFERENCES backlinks(id)
);
"""

_STATUS_HISTORY_INDEXES = [
    (
        "CREATE INDEX IF NOT EXISTS idx_status_history_backlink "
        "ON backlink_status_history(backlink_id, changed_at);"
    ),
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """Initialise the database: PRAGMAs, tables, indexes

    Args:
        conn: aiosqlite connection
    """
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    for ddl in (
        _USERS_DDL,
        _PROJECT_MEMBERS_DDL,
        _REPORTS_DDL,
        _TASKS_DDL,
        _NOTIFICATIONS_DDL,
        _BACKLINKS_DDL,
        _STATUS_HISTORY_DDL,
    ):
        await conn.execute(ddl)

    for idx_sql in (
        _TASKS_INDEXES
        + _REPORTS_INDEXES
        + _NOTIFICATIONS_INDEXES
        + _BACKLINKS_INDEXES
        + _STATUS_HISTORY_INDEXES
    ):
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """Return True when WAL journaling is active"""
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
