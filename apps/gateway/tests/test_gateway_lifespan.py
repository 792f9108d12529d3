"""FastAPI lifespan tests

1. Startup opens the database and builds the link checker from env config
2. Shutdown closes the connection
"""

from pathlib import Path

from linkops.gateway.main import create_app
from linkops.linkcheck import LinkChecker


async def test_lifespan_initialises_state(tmp_path: Path, monkeypatch):
    db_path = tmp_path / "life" / "linkops.db"
    monkeypatch.setenv("LINKOPS_DB_PATH", str(db_path))
    monkeypatch.setenv("LINKOPS_LINK_CHECK_TIMEOUT_S", "7")
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")

    app = create_app()
    async with app.router.lifespan_context(app):
        assert db_path.exists()
        assert app.state.store_group.conn is not None
        assert isinstance(app.state.link_checker, LinkChecker)
        assert app.state.link_checker._config.timeout_s == 7

        cursor = await app.state.store_group.conn.execute("SELECT 1")
        assert (await cursor.fetchone())[0] == 1


def test_routes_registered():
    paths = set(create_app().openapi()["paths"])

    assert {
        "/api/backlink-reports",
        "/api/backlink-reports/direct",
        "/api/backlink-reports/stats",
        "/api/backlink-reports/{report_id}",
        "/api/tasks/{task_id}",
        "/api/notifications",
        "/api/notifications/{notification_id}/read",
        "/health",
        "/ready",
    } <= paths
