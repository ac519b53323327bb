from .sql_repositoryBooking import BookingRepository
from .sql_repositoryTagAssignment import BookingTagAssignmentRepository

__all__ = ["BookingRepository", "BookingTagAssignmentRepository"]
