# tasktimetracker/repositories/bookings/sql_repositoryBooking.py

import logging
import time
from typing import List, Optional

from sqlalchemy import delete, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession
from sqlalchemy.orm import selectinload

from tasktimetracker.db import BookingORM, BookingTagORM, BookingTagAssignmentORM
from tasktimetracker.db.base import get_session
from tasktimetracker.exceptions import DatabaseError, NotFoundError, from_integrity_error
from tasktimetracker.models.booking import (
    BookingCreate,
    BookingFilter,
    BookingInDB,
    BookingUpdate,
    BookingWithTags,
)

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class BookingRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def check_connection(self):
        """Runs a trivial query against the booking store."""
        async with get_session(self._session_factory) as session:
            try:
                await session.execute(text("SELECT 1"))
            except SQLAlchemyError as e:
                logger.error(f"Booking store connection failed: {e}")
                raise DatabaseError("Failed to connect to the booking store.") from e

    async def create(self, data: BookingCreate, startdate: Optional[int] = None) -> BookingInDB:
        """
        Creates a booking. startdate defaults to the current time in
        milliseconds since the epoch.
        """
        booking = BookingORM(
            startdate=startdate if startdate is not None else now_ms(),
            enddate=data.enddate,
            des=data.des,
        )
        async with get_session(self._session_factory) as session:
            try:
                session.add(booking)
                await session.commit()
                await session.refresh(booking)
                logger.info(f"Created booking {booking.id} starting at {booking.startdate}")
                return BookingInDB.model_validate(booking)
            except IntegrityError as e:
                await session.rollback()
                raise from_integrity_error(e, "Failed to create booking") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to create booking: {e}") from e

    async def get(self, booking_id: int) -> Optional[BookingInDB]:
        async with get_session(self._session_factory) as session:
            try:
                orm = await session.get(BookingORM, booking_id)
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to get booking {booking_id}: {e}") from e
            return BookingInDB.model_validate(orm) if orm else None

    async def get_with_tags(self, booking_id: int) -> Optional[BookingWithTags]:
        stmt = (
            select(BookingORM)
            .options(selectinload(BookingORM.tags))
            .where(BookingORM.id == booking_id)
        )
        async with get_session(self._session_factory) as session:
            try:
                orm = (await session.execute(stmt)).scalar_one_or_none()
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to get booking {booking_id}: {e}") from e
            return BookingWithTags.model_validate(orm) if orm else None

    async def update(self, booking_id: int, patch: BookingUpdate) -> Optional[BookingInDB]:
        """
        Applies the given fields. Returns None when the patch changes nothing,
        raises NotFoundError for an unknown id.
        """
        changes = patch.changes()
        if not changes:
            return None

        async with get_session(self._session_factory) as session:
            try:
                booking = await session.get(BookingORM, booking_id)
                if booking is None:
                    raise NotFoundError(f"Booking with id {booking_id} not found.")
                for key, value in changes.items():
                    setattr(booking, key, value)
                await session.commit()
                logger.info(f"Updated booking {booking_id}: {sorted(changes)}")
                return BookingInDB.model_validate(booking)
            except IntegrityError as e:
                await session.rollback()
                raise from_integrity_error(e, f"Failed to update booking {booking_id}") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to update booking {booking_id}: {e}") from e

    async def delete(self, booking_id: int) -> None:
        async with get_session(self._session_factory) as session:
            try:
                res = await session.execute(delete(BookingORM).where(BookingORM.id == booking_id))
                if res.rowcount == 0:
                    await session.rollback()
                    raise NotFoundError(f"Booking with id {booking_id} not found.")
                await session.commit()
                logger.info(f"Deleted booking {booking_id}")
            except IntegrityError as e:
                await session.rollback()
                raise from_integrity_error(e, f"Booking {booking_id} still has tags assigned") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to delete booking {booking_id}: {e}") from e

    async def search(self, criteria: Optional[BookingFilter] = None) -> List[BookingInDB]:
        """
        Lists bookings matching all criteria. Date bounds are exclusive and a
        tag list matches bookings carrying any of the named tags.
        """
        c = criteria or BookingFilter()
        stmt = select(BookingORM)

        if c.id is not None:
            stmt = stmt.where(BookingORM.id == c.id)
        if c.startdate_min is not None:
            stmt = stmt.where(BookingORM.startdate > c.startdate_min)
        if c.startdate_max is not None:
            stmt = stmt.where(BookingORM.startdate < c.startdate_max)
        if c.enddate_min is not None:
            stmt = stmt.where(BookingORM.enddate > c.enddate_min)
        if c.enddate_max is not None:
            stmt = stmt.where(BookingORM.enddate < c.enddate_max)
        if c.description_contains:
            stmt = stmt.where(BookingORM.des.contains(c.description_contains, autoescape=True))
        if c.tags:
            tagged = (
                select(BookingTagAssignmentORM.bid)
                .join(BookingTagORM, BookingTagORM.id == BookingTagAssignmentORM.tgid)
                .where(BookingTagORM.name.in_(c.tags))
            )
            stmt = stmt.where(BookingORM.id.in_(tagged))

        stmt = stmt.order_by(BookingORM.startdate, BookingORM.id)
        async with get_session(self._session_factory) as session:
            try:
                res = await session.execute(stmt)
                bookings = res.scalars().all()
            except SQLAlchemyError as e:
                logger.error(f"Booking search failed: {e}")
                raise DatabaseError(f"Failed to search bookings: {e}") from e
            return [BookingInDB.model_validate(b) for b in bookings]
