# tasktimetracker/db/__init__.py

from .base import BookingBase, TaskBase, create_store_engine, create_session_factory, get_session

# booking store
from .bookings import BookingORM, BookingTagORM, BookingTagAssignmentORM

# task store
from .tasks import ImportanceORM, TaskORM, TaskTagORM, TaskTagAssignmentORM


__all__ = [
    "BookingBase",
    "TaskBase",
    "create_store_engine",
    "create_session_factory",
    "get_session",
    "BookingORM",
    "BookingTagORM",
    "BookingTagAssignmentORM",
    "ImportanceORM",
    "TaskORM",
    "TaskTagORM",
    "TaskTagAssignmentORM",
]
