# tasktimetracker/repositories/bookings/sql_repositoryTagAssignment.py

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession

from tasktimetracker.db import BookingTagORM, BookingTagAssignmentORM
from tasktimetracker.db.base import get_session
from tasktimetracker.exceptions import DatabaseError, NotFoundError, from_integrity_error
from tasktimetracker.models.booking import BookingTagAssignment
from tasktimetracker.models.tag import TagInDB

logger = logging.getLogger(__name__)


class BookingTagAssignmentRepository:
    """Links between bookings and booking-store tags."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def assign(self, booking_id: int, tag_id: int) -> BookingTagAssignment:
        link = BookingTagAssignmentORM(bid=booking_id, tgid=tag_id)
        async with get_session(self._session_factory) as session:
            try:
                session.add(link)
                await session.commit()
                logger.info(f"Assigned tag {tag_id} to booking {booking_id}")
                return BookingTagAssignment.model_validate(link)
            except IntegrityError as e:
                await session.rollback()
                logger.error(f"Failed to assign tag {tag_id} to booking {booking_id}: {e}")
                raise from_integrity_error(e, f"Failed to assign tag {tag_id} to booking {booking_id}") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to assign tag {tag_id} to booking {booking_id}: {e}") from e

    async def unassign(self, booking_id: int, tag_id: int) -> None:
        async with get_session(self._session_factory) as session:
            try:
                res = await session.execute(
                    delete(BookingTagAssignmentORM).where(
                        BookingTagAssignmentORM.bid == booking_id,
                        BookingTagAssignmentORM.tgid == tag_id,
                    )
                )
                if res.rowcount == 0:
                    await session.rollback()
                    raise NotFoundError(f"Tag {tag_id} is not assigned to booking {booking_id}.")
                await session.commit()
                logger.info(f"Removed tag {tag_id} from booking {booking_id}")
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to remove tag {tag_id} from booking {booking_id}: {e}") from e

    async def search(self, booking_id: Optional[int] = None, tag_id: Optional[int] = None) -> List[BookingTagAssignment]:
        stmt = select(BookingTagAssignmentORM)
        if booking_id is not None:
            stmt = stmt.where(BookingTagAssignmentORM.bid == booking_id)
        if tag_id is not None:
            stmt = stmt.where(BookingTagAssignmentORM.tgid == tag_id)
        stmt = stmt.order_by(BookingTagAssignmentORM.bid, BookingTagAssignmentORM.tgid)
        async with get_session(self._session_factory) as session:
            try:
                links = (await session.execute(stmt)).scalars().all()
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to list tag assignments: {e}") from e
            return [BookingTagAssignment.model_validate(a) for a in links]

    async def tags_for_booking(self, booking_id: int) -> List[TagInDB]:
        stmt = (
            select(BookingTagORM)
            .join(BookingTagAssignmentORM, BookingTagAssignmentORM.tgid == BookingTagORM.id)
            .where(BookingTagAssignmentORM.bid == booking_id)
            .order_by(BookingTagORM.name)
        )
        async with get_session(self._session_factory) as session:
            try:
                tags = (await session.execute(stmt)).scalars().all()
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to list tags of booking {booking_id}: {e}") from e
            return [TagInDB.model_validate(t) for t in tags]
