# tasktimetracker/db/bookings/tag_assignment_orm.py

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from ..base import BookingBase


class BookingTagAssignmentORM(BookingBase):
    __tablename__ = "tagassignment"

    # The composite primary key keeps each (booking, tag) pair unique.
    # No ON DELETE clause: referenced rows cannot be removed while assigned.
    bid: Mapped[int] = mapped_column(Integer, ForeignKey("booking.id"), primary_key=True)
    tgid: Mapped[int] = mapped_column(Integer, ForeignKey("tag.id"), primary_key=True)
