import pytest
import pytest_asyncio

from tasktimetracker import TimeTrackerClient, create_client
from tasktimetracker.config import StoreConfig, TimeTrackerConfig, reset_settings


@pytest.fixture
def store_config(tmp_path) -> TimeTrackerConfig:
    """Both stores as throwaway SQLite files."""
    return TimeTrackerConfig(
        bookings=StoreConfig(path=str(tmp_path / "bookings.db")),
        tasks=StoreConfig(path=str(tmp_path / "tasks.db")),
    )


@pytest_asyncio.fixture
async def client(store_config) -> TimeTrackerClient:
    """
    A client whose stores are fully migrated, built through create_client
    exactly as the application does.
    """
    client = create_client(store_config)
    await client.migrate()
    yield client
    await client.aclose()


@pytest.fixture
def env_stores(tmp_path, monkeypatch):
    """Points the environment settings at temporary stores."""
    monkeypatch.setenv("BOOKINGS__PATH", str(tmp_path / "env_bookings.db"))
    monkeypatch.setenv("TASKS__PATH", str(tmp_path / "env_tasks.db"))
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    reset_settings()
    yield tmp_path
    reset_settings()


@pytest_asyncio.fixture
async def unmigrated_client(store_config) -> TimeTrackerClient:
    """A client over empty stores: no tables exist yet."""
    client = create_client(store_config)
    yield client
    await client.aclose()
