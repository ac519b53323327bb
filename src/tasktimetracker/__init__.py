# File: src/tasktimetracker/__init__.py

from typing import Optional

from .client import TimeTrackerClient
from .config import get_settings, TimeTrackerConfig, StoreConfig, ServerConfig
from .db import BookingTagORM, TaskTagORM, create_store_engine, create_session_factory
from .migrations import MigrationRunner, bundled_migrations
from .repositories import (
    BookingRepository,
    BookingTagAssignmentRepository,
    ImportanceRepository,
    TagRepository,
    TaskRepository,
)

from .exceptions import (
    TimeTrackerError,
    DatabaseError,
    ConstraintViolationError,
    UniqueViolationError,
    ForeignKeyViolationError,
    NotNullViolationError,
    NotFoundError,
    MigrationError,
)


def create_client(config: Optional[TimeTrackerConfig] = None) -> TimeTrackerClient:
    """
    Builds a TimeTrackerClient.

    :param config: explicit store configuration. When omitted the
                   environment (.env) settings are used.
    """
    if config is None:
        config = get_settings().to_client_config()

    booking_engine = create_store_engine(config.bookings)
    task_engine = create_store_engine(config.tasks)

    booking_sf = create_session_factory(booking_engine)
    task_sf = create_session_factory(task_engine)

    return TimeTrackerClient(
        booking_engine=booking_engine,
        task_engine=task_engine,
        booking_repo=BookingRepository(booking_sf),
        booking_tag_repo=TagRepository(booking_sf, BookingTagORM),
        booking_tag_assignment_repo=BookingTagAssignmentRepository(booking_sf),
        task_repo=TaskRepository(task_sf),
        importance_repo=ImportanceRepository(task_sf),
        task_tag_repo=TagRepository(task_sf, TaskTagORM),
        migrators={
            "bookings": MigrationRunner(booking_engine, bundled_migrations("bookings"), name="bookings"),
            "tasks": MigrationRunner(task_engine, bundled_migrations("tasks"), name="tasks"),
        },
    )


__all__ = [
    "TimeTrackerClient", "create_client",
    "TimeTrackerConfig", "StoreConfig", "ServerConfig",
    "TimeTrackerError", "DatabaseError", "ConstraintViolationError", "UniqueViolationError",
    "ForeignKeyViolationError", "NotNullViolationError", "NotFoundError", "MigrationError",
]
