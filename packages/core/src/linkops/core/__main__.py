"""CLI entry -- python -m linkops.core <command>

Commands:
  init-db        create the SQLite schema at LINKOPS_DB_PATH
  list-reports   print the most recent backlink reports
"""

import asyncio
import sys

from .config import get_db_path


def main() -> None:
    """CLI main entry"""
    if len(sys.argv) < 2:
        print("usage: python -m linkops.core <command>")
        print("commands:")
        print("  init-db        create the SQLite schema")
        print("  list-reports   print the most recent backlink reports")
        sys.exit(1)

    command = sys.argv[1]

    if command == "init-db":
        asyncio.run(init_database())
    elif command == "list-reports":
        asyncio.run(list_reports())
    else:
        print(f"unknown command: {command}")
        print("available commands: init-db, list-reports")
        sys.exit(1)


async def init_database() -> None:
    from .store import create_store_group

    db_path = get_db_path()
    print(f"database: {db_path}")
    store_group = await create_store_group(db_path)
    await store_group.conn.close()
    print("schema ready")


async def list_reports(limit: int = 20) -> None:
    from .store import create_store_group

    store_group = await create_store_group(get_db_path())
    try:
        reports = await store_group.report_store.list_reports()
        for report in reports[:limit]:
            print(
                f"{report.processed_at.isoformat()}  {report.id}  "
                f"{report.status.value:<8}  task={report.task_id}  "
                f"dead={report.total_dead}/{report.total_links_checked}"
            )
        print(f"{len(reports)} reports")
    finally:
        await store_group.conn.close()


if __name__ == "__main__":
    main()
