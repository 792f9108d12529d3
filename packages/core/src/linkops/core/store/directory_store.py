"""DirectoryStore SQLite implementation -- users and project membership"""

import aiosqlite

from ..models.directory import ProjectMember, TeamUser


class SqliteDirectoryStore:
    """Role lookups used to resolve notification recipients"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def upsert_user(self, user: TeamUser) -> None:
        await self._conn.execute(
            """
            INSERT INTO users (id, email, role) VALUES (?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET email = excluded.email, role = excluded.role
            """,
            (user.id, user.email, user.role),
        )

    async def add_project_member(self, member: ProjectMember) -> None:
        await self._conn.execute(
            """
            INSERT INTO project_members (project_id, user_id, role) VALUES (?, ?, ?)
            ON CONFLICT(project_id, user_id) DO UPDATE SET role = excluded.role
            """,
            (member.project_id, member.user_id, member.role),
        )

    async def list_project_members(
        self, project_id: str, roles: tuple[str, ...]
    ) -> list[ProjectMember]:
        """Members of a project whose role is in roles"""
        if not roles:
            return []
        placeholders = ", ".join("?" for _ in roles)
        cursor = await self._conn.execute(
            f"""
            SELECT project_id, user_id, role FROM project_members
            WHERE project_id = ? AND role IN ({placeholders})
            ORDER BY rowid ASC
            """,
            (project_id, *roles),
        )
        rows = await cursor.fetchall()
        return [
            ProjectMember(project_id=row[0], user_id=row[1], role=row[2]) for row in rows
        ]

    async def list_users_by_role(self, role: str) -> list[TeamUser]:
        cursor = await self._conn.execute(
            "SELECT id, email, role FROM users WHERE role = ? ORDER BY rowid ASC",
            (role,),
        )
        rows = await cursor.fetchall()
        return [TeamUser(id=row[0], email=row[1], role=row[2]) for row in rows]
