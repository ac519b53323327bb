from .booking_orm import BookingORM
from .tag_orm import BookingTagORM
from .tag_assignment_orm import BookingTagAssignmentORM

__all__ = ["BookingORM", "BookingTagORM", "BookingTagAssignmentORM"]
