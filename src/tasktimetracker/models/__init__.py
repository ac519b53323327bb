from .tag import TagCreate, TagInDB
from .booking import (
    BookingCreate,
    BookingUpdate,
    BookingFilter,
    BookingInDB,
    BookingWithTags,
    BookingTagAssignment,
)
from .importance import ImportanceCreate, ImportanceUpdate, ImportanceInDB
from .task import TaskCreate, TaskUpdate, TaskInDB, TaskDetails, TaskTagAssignment

__all__ = [
    "TagCreate", "TagInDB",
    "BookingCreate", "BookingUpdate", "BookingFilter", "BookingInDB", "BookingWithTags", "BookingTagAssignment",
    "ImportanceCreate", "ImportanceUpdate", "ImportanceInDB",
    "TaskCreate", "TaskUpdate", "TaskInDB", "TaskDetails", "TaskTagAssignment",
]
