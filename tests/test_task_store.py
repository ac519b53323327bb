import pytest
from pydantic import ValidationError
from sqlalchemy import text

from tasktimetracker import TimeTrackerClient, create_client
from tasktimetracker.config import StoreConfig, TimeTrackerConfig
from tasktimetracker.db import create_store_engine
from tasktimetracker.exceptions import (
    DatabaseError,
    ForeignKeyViolationError,
    NotFoundError,
    UniqueViolationError,
)
from tasktimetracker.models import (
    ImportanceCreate,
    ImportanceUpdate,
    TagCreate,
    TaskCreate,
    TaskUpdate,
)

pytestmark = pytest.mark.asyncio


async def test_task_lifecycle(client: TimeTrackerClient):
    """
    Creates an importance level and a task, updates and deletes the task.
    """
    # --- ARRANGE ---
    low = await client.importances.create(ImportanceCreate(name="Low", val=1))

    # --- ACT ---
    task = await client.tasks.create(TaskCreate(name="write report", iid=low.id))

    # --- ASSERT ---
    assert task.id is not None
    assert task.des == ""
    assert task.done is False
    assert task.time == 0
    assert task.iid == low.id

    updated = await client.tasks.update(task.id, TaskUpdate(des="quarterly numbers"))
    assert updated.des == "quarterly numbers"
    assert updated.name == "write report"

    done = await client.tasks.set_done(task.id)
    assert done.done is True
    assert [t.id for t in await client.tasks.list_all(done=True)] == [task.id]
    assert await client.tasks.list_all(done=False) == []

    await client.tasks.delete(task.id)
    assert await client.tasks.get(task.id) is None
    with pytest.raises(NotFoundError):
        await client.tasks.delete(task.id)


async def test_task_requires_existing_importance(client: TimeTrackerClient):
    with pytest.raises(ForeignKeyViolationError):
        await client.tasks.create(TaskCreate(name="orphan", iid=999))
    assert await client.tasks.list_all() == []


async def test_task_name_is_unique(client: TimeTrackerClient):
    low = await client.importances.create(ImportanceCreate(name="Low", val=1))
    await client.tasks.create(TaskCreate(name="dup", iid=low.id))

    with pytest.raises(UniqueViolationError):
        await client.tasks.create(TaskCreate(name="dup", iid=low.id))


async def test_importance_value_is_unique(client: TimeTrackerClient):
    """Low/1 followed by Urgent/1 must fail on the unique val."""
    await client.importances.create(ImportanceCreate(name="Low", val=1))

    with pytest.raises(UniqueViolationError):
        await client.importances.create(ImportanceCreate(name="Urgent", val=1))

    with pytest.raises(UniqueViolationError):
        await client.importances.create(ImportanceCreate(name="Low", val=2))

    assert [i.name for i in await client.importances.list_all()] == ["Low"]


async def test_importance_levels_are_ordered_by_value(client: TimeTrackerClient):
    await client.importances.create(ImportanceCreate(name="Urgent", val=10))
    await client.importances.create(ImportanceCreate(name="Low", val=1))
    await client.importances.create(ImportanceCreate(name="Normal", val=5))

    levels = await client.importances.list_all()

    assert [i.name for i in levels] == ["Low", "Normal", "Urgent"]
    assert (await client.importances.get_by_value(5)).name == "Normal"
    assert (await client.importances.get_by_name("Urgent")).val == 10
    assert await client.importances.get_by_name("Missing") is None


async def test_importance_update_and_delete(client: TimeTrackerClient):
    low = await client.importances.create(ImportanceCreate(name="Low", val=1))
    high = await client.importances.create(ImportanceCreate(name="High", val=9))

    assert await client.importances.update(low.id, ImportanceUpdate()) is None
    renamed = await client.importances.update(low.id, ImportanceUpdate(name="Minor"))
    assert renamed.name == "Minor"
    assert renamed.val == 1

    with pytest.raises(UniqueViolationError):
        await client.importances.update(low.id, ImportanceUpdate(val=high.val))

    task = await client.tasks.create(TaskCreate(name="t", iid=high.id))
    # Still referenced by a task and no cascade is declared.
    with pytest.raises(ForeignKeyViolationError):
        await client.importances.delete(high.id)

    await client.tasks.delete(task.id)
    await client.importances.delete(high.id)
    assert await client.importances.get(high.id) is None


async def test_tag_assignment_requires_existing_rows(client: TimeTrackerClient):
    low = await client.importances.create(ImportanceCreate(name="Low", val=1))
    task = await client.tasks.create(TaskCreate(name="t", iid=low.id))
    tag = await client.task_tags.create(TagCreate(name="home"))

    with pytest.raises(ForeignKeyViolationError):
        await client.tasks.add_tag(task.id, 999)
    with pytest.raises(ForeignKeyViolationError):
        await client.tasks.add_tag(999, tag.id)

    link = await client.tasks.add_tag(task.id, tag.id)
    assert (link.tkid, link.tgid) == (task.id, tag.id)

    with pytest.raises(UniqueViolationError):
        await client.tasks.add_tag(task.id, tag.id)


async def test_task_tags_and_details(client: TimeTrackerClient):
    # --- ARRANGE ---
    low = await client.importances.create(ImportanceCreate(name="Low", val=1))
    task = await client.tasks.create(TaskCreate(name="garden", des="mow the lawn", iid=low.id))
    home = await client.task_tags.create(TagCreate(name="home"))
    outside = await client.task_tags.create(TagCreate(name="outside"))

    # --- ACT ---
    await client.tasks.add_tag(task.id, outside.id)
    await client.tasks.add_tag(task.id, home.id)
    details = await client.tasks.get_details(task.id)

    # --- ASSERT ---
    assert details.importance.name == "Low"
    assert sorted(t.name for t in details.tags) == ["home", "outside"]
    assert [t.name for t in await client.tasks.assigned_tags(task.id)] == ["home", "outside"]

    # A tag in use cannot be deleted.
    with pytest.raises(ForeignKeyViolationError):
        await client.task_tags.delete(home.id)

    await client.tasks.remove_tag(task.id, home.id)
    assert [t.name for t in await client.tasks.assigned_tags(task.id)] == ["outside"]
    with pytest.raises(NotFoundError):
        await client.tasks.remove_tag(task.id, home.id)

    await client.task_tags.delete(home.id)
    assert await client.task_tags.get_by_name("home") is None


async def test_add_time_accumulates(client: TimeTrackerClient):
    low = await client.importances.create(ImportanceCreate(name="Low", val=1))
    task = await client.tasks.create(TaskCreate(name="t", iid=low.id))

    await client.tasks.add_time(task.id, 30)
    task = await client.tasks.add_time(task.id, 15)

    assert task.time == 45
    with pytest.raises(NotFoundError):
        await client.tasks.add_time(999, 5)
    with pytest.raises(ValueError):
        await client.tasks.add_time(task.id, -1)


async def test_tag_names_are_unique_per_store(client: TimeTrackerClient):
    await client.task_tags.create(TagCreate(name="work"))

    with pytest.raises(UniqueViolationError):
        await client.task_tags.create(TagCreate(name="work"))

    # The booking store keeps its own vocabulary.
    booking_tag = await client.booking_tags.create(TagCreate(name="work"))
    assert booking_tag.name == "work"


async def test_names_longer_than_column_are_rejected():
    with pytest.raises(ValidationError):
        TagCreate(name="x" * 31)
    with pytest.raises(ValidationError):
        ImportanceCreate(name="", val=1)


async def test_foreign_keys_follow_store_mode(tmp_path):
    """With enforcement switched off the engine accepts orphaned references."""
    config = TimeTrackerConfig(
        bookings=StoreConfig(path=str(tmp_path / "b.db")),
        tasks=StoreConfig(path=str(tmp_path / "t.db"), foreign_keys=False),
    )
    client = create_client(config)
    try:
        await client.migrate("tasks")
        task = await client.tasks.create(TaskCreate(name="orphan", iid=999))
        assert task.iid == 999
    finally:
        await client.aclose()


async def test_unmigrated_task_store_raises_database_error(unmigrated_client: TimeTrackerClient):
    c = unmigrated_client
    calls = [
        lambda: c.tasks.get(1),
        lambda: c.tasks.get_details(1),
        lambda: c.tasks.list_all(),
        lambda: c.tasks.update(1, TaskUpdate(des="x")),
        lambda: c.tasks.add_time(1, 5),
        lambda: c.tasks.remove_tag(1, 1),
        lambda: c.tasks.assigned_tags(1),
        lambda: c.importances.create(ImportanceCreate(name="Low", val=1)),
        lambda: c.importances.get(1),
        lambda: c.importances.get_by_name("Low"),
        lambda: c.importances.get_by_value(1),
        lambda: c.importances.list_all(),
        lambda: c.importances.update(1, ImportanceUpdate(val=2)),
        lambda: c.task_tags.search(name="home"),
    ]
    for call in calls:
        with pytest.raises(DatabaseError):
            await call()


async def test_stored_overlong_names_are_readable(client: TimeTrackerClient, store_config):
    """Rows written outside the models are returned as stored."""
    # --- ARRANGE ---
    long_name = "y" * 31
    engine = create_store_engine(store_config.tasks)
    async with engine.begin() as conn:
        await conn.execute(text("INSERT INTO importance (name, val) VALUES (:name, 1)"), {"name": long_name})
        await conn.execute(text("INSERT INTO task (name, iid) VALUES (:name, 1)"), {"name": long_name})
    await engine.dispose()

    # --- ACT ---
    tasks = await client.tasks.list_all()
    levels = await client.importances.list_all()

    # --- ASSERT ---
    assert [t.name for t in tasks] == [long_name]
    assert [i.name for i in levels] == [long_name]
    details = await client.tasks.get_details(tasks[0].id)
    assert details.importance.name == long_name
