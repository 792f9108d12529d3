"""Configuration constants -- overridable through environment variables

Database location plus the thresholds and role names used by report triage.
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """Base data directory"""
    return Path(os.environ.get("LINKOPS_DATA_DIR", "data"))


def get_db_path() -> str:
    """SQLite database path"""
    return os.environ.get(
        "LINKOPS_DB_PATH",
        str(_get_base_dir() / "sqlite" / "linkops.db"),
    )


# Blogs with fewer interlinks than this are flagged on warning reports
LOW_INTERLINK_THRESHOLD: int = 3

# project_members.role values that receive project-scoped report notices
MANAGER_ROLES: tuple[str, ...] = ("manager", "admin")

# users.role value escalated to on critical reports
SUPER_ADMIN_ROLE: str = "Super Admin"

# Maximum number of projects returned in report stats
TOP_FAILING_PROJECTS_LIMIT: int = 5
