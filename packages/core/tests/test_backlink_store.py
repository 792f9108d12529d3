"""SqliteBacklinkStore tests"""

from datetime import UTC, datetime

import aiosqlite
import pytest
from linkops.core.models import (
    Backlink,
    BacklinkState,
    BacklinkStatusChange,
    BacklinkType,
)
from linkops.core.store.backlink_store import SqliteBacklinkStore

NOW = datetime(2026, 2, 1, tzinfo=UTC)


def _link(link_id: str, url: str, link_type: BacklinkType, task_id: str = "task-1"):
    return Backlink(
        id=link_id,
        url=url,
        project_id="proj-1",
        task_id=task_id,
        link_type=link_type,
        created_at=NOW,
        last_updated_status=NOW,
    )


@pytest.fixture
def links() -> list[Backlink]:
    return [
        _link("bl-1", "https://a.example", BacklinkType.CREATED),
        _link("bl-2", "https://blog.example", BacklinkType.INDEXED),
        _link("bl-3", "https://spam.example", BacklinkType.FILTERED),
        _link("bl-4", "https://a.example", BacklinkType.CREATED, task_id="task-2"),
    ]


async def test_register_and_list(core_db, links):
    store = SqliteBacklinkStore(core_db)
    await store.register_links(links)
    await core_db.commit()

    all_links = await store.list_links("task-1")
    filtered = await store.list_links("task-1", BacklinkType.FILTERED)

    assert [b.id for b in all_links] == ["bl-1", "bl-2", "bl-3"]
    assert all(b.link_status == BacklinkState.PENDING for b in all_links)
    assert [b.id for b in filtered] == ["bl-3"]


async def test_find_link_scoped_by_task_and_type(core_db, links):
    store = SqliteBacklinkStore(core_db)
    await store.register_links(links)

    found = await store.find_link("task-2", "https://a.example", BacklinkType.CREATED)

    assert found is not None
    assert found.id == "bl-4"
    assert await store.find_link("task-1", "https://a.example", BacklinkType.INDEXED) is None


async def test_find_link_prefers_latest_registration(core_db, links):
    store = SqliteBacklinkStore(core_db)
    await store.register_links(links)
    await store.register_links([_link("bl-5", "https://a.example", BacklinkType.CREATED)])

    found = await store.find_link("task-1", "https://a.example", BacklinkType.CREATED)

    assert found.id == "bl-5"


async def test_update_status_and_history(core_db, links):
    store = SqliteBacklinkStore(core_db)
    await store.register_links(links)
    later = datetime(2026, 2, 2, tzinfo=UTC)

    await store.update_status(
        "bl-1", BacklinkState.DEAD, {"status": "dead"}, "rep-1", later
    )
    await store.append_history(
        BacklinkStatusChange(
            id="h-1",
            backlink_id="bl-1",
            old_status=BacklinkState.PENDING,
            new_status=BacklinkState.DEAD,
            change_reason="Report check",
            report_id="rep-1",
            changed_at=later,
        )
    )
    await core_db.commit()

    link = await store.find_link("task-1", "https://a.example", BacklinkType.CREATED)
    assert link.link_status == BacklinkState.DEAD
    assert link.report_id == "rep-1"
    assert link.last_check_result == {"status": "dead"}
    assert link.last_updated_status == later

    history = await store.list_history("bl-1")
    assert len(history) == 1
    assert history[0].old_status == BacklinkState.PENDING
    assert history[0].new_status == BacklinkState.DEAD


async def test_history_requires_existing_backlink(core_db):
    store = SqliteBacklinkStore(core_db)

    with pytest.raises(aiosqlite.IntegrityError):
        await store.append_history(
            BacklinkStatusChange(
                id="h-1",
                backlink_id="ghost",
                old_status=BacklinkState.PENDING,
                new_status=BacklinkState.WORKING,
                changed_at=NOW,
            )
        )
