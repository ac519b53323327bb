# tasktimetracker/db/bookings/booking_orm.py

from __future__ import annotations
from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..base import BookingBase

if TYPE_CHECKING:
    from .tag_orm import BookingTagORM


class BookingORM(BookingBase):
    __tablename__ = "booking"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # Milliseconds since the Unix epoch.
    startdate: Mapped[int] = mapped_column(Integer, nullable=False)
    enddate: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    des: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default=text("''"))

    tags: Mapped[List["BookingTagORM"]] = relationship(
        secondary="tagassignment", viewonly=True
    )
