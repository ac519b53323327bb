# File: tasktimetracker/models/booking.py

from __future__ import annotations
from typing import List, Optional

from pydantic import BaseModel, Field

from .tag import TagInDB


class BookingCreate(BaseModel):
    # startdate is stamped by the repository at creation time.
    enddate: Optional[int] = None
    des: str = ""


class BookingUpdate(BaseModel):
    startdate: Optional[int] = None
    enddate: Optional[int] = None
    des: Optional[str] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


class BookingFilter(BaseModel):
    """Booking search criteria. All date bounds are exclusive."""
    id: Optional[int] = None
    startdate_min: Optional[int] = None
    startdate_max: Optional[int] = None
    enddate_min: Optional[int] = None
    enddate_max: Optional[int] = None
    tags: List[str] = Field(default_factory=list)
    description_contains: Optional[str] = None


class BookingInDB(BaseModel):
    id: int
    startdate: int
    enddate: Optional[int] = None
    des: str = ""

    model_config = {"from_attributes": True}


class BookingWithTags(BookingInDB):
    tags: List[TagInDB] = []


class BookingTagAssignment(BaseModel):
    bid: int
    tgid: int

    model_config = {"from_attributes": True}
