# tasktimetracker/server/bookings.py

from typing import Annotated, List, Optional

from fastapi import APIRouter, Query, Response, status

from tasktimetracker.models.booking import BookingCreate, BookingFilter, BookingInDB, BookingUpdate
from .dependencies import ClientDep

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])


@router.get("", response_model=List[BookingInDB])
async def get_bookings(
    client: ClientDep,
    id: Optional[int] = None,
    startdate_min: Optional[int] = None,
    startdate_max: Optional[int] = None,
    enddate_min: Optional[int] = None,
    enddate_max: Optional[int] = None,
    tag: Annotated[Optional[List[str]], Query()] = None,
    description_contains: Optional[str] = None,
):
    """
    Lists bookings. Date bounds are exclusive; repeated `tag` parameters
    match bookings carrying any of the tags.
    """
    criteria = BookingFilter(
        id=id,
        startdate_min=startdate_min,
        startdate_max=startdate_max,
        enddate_min=enddate_min,
        enddate_max=enddate_max,
        tags=tag or [],
        description_contains=description_contains,
    )
    return await client.bookings.search(criteria)


@router.post("", response_model=BookingInDB, status_code=status.HTTP_201_CREATED)
async def post_booking(
    client: ClientDep,
    enddate: Optional[int] = None,
    description: Optional[str] = None,
):
    """Creates a booking starting now."""
    return await client.bookings.create(BookingCreate(enddate=enddate, des=description or ""))


@router.patch("", response_model=BookingInDB)
async def patch_booking(
    client: ClientDep,
    id: int,
    startdate: Optional[int] = None,
    enddate: Optional[int] = None,
    description: Optional[str] = None,
):
    booking = await client.bookings.update(
        id, BookingUpdate(startdate=startdate, enddate=enddate, des=description)
    )
    if booking is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return booking


@router.delete("")
async def delete_booking(client: ClientDep, id: int):
    await client.bookings.delete(id)
    return Response(status_code=status.HTTP_200_OK)
