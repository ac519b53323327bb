from .sql_repositoryTag import TagRepository
from .bookings.sql_repositoryBooking import BookingRepository
from .bookings.sql_repositoryTagAssignment import BookingTagAssignmentRepository
from .tasks.sql_repositoryImportance import ImportanceRepository
from .tasks.sql_repositoryTask import TaskRepository

__all__ = [
    "TagRepository",
    "BookingRepository",
    "BookingTagAssignmentRepository",
    "ImportanceRepository",
    "TaskRepository",
]
