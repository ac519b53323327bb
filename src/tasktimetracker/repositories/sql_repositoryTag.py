# tasktimetracker/repositories/sql_repositoryTag.py

import logging
from typing import List, Optional, Type, Union

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession

from tasktimetracker.db import BookingTagORM, TaskTagORM
from tasktimetracker.db.base import get_session
from tasktimetracker.exceptions import DatabaseError, NotFoundError, from_integrity_error
from tasktimetracker.models.tag import TagCreate, TagInDB

logger = logging.getLogger(__name__)

TagORM = Union[BookingTagORM, TaskTagORM]


class TagRepository:
    """
    Tag vocabulary of one store. Both stores keep their own `tag` table with
    the same shape, so the mapped class is passed in.
    """
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], orm_class: Type[TagORM]):
        self._session_factory = session_factory
        self._orm = orm_class

    async def create(self, data: TagCreate) -> TagInDB:
        tag = self._orm(name=data.name)
        async with get_session(self._session_factory) as session:
            try:
                session.add(tag)
                await session.commit()
                await session.refresh(tag)
                logger.info(f"Created tag '{tag.name}' with id {tag.id}")
                return TagInDB.model_validate(tag)
            except IntegrityError as e:
                await session.rollback()
                raise from_integrity_error(e, f"Failed to create tag '{data.name}'") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to create tag: {e}") from e

    async def get(self, tag_id: int) -> Optional[TagInDB]:
        async with get_session(self._session_factory) as session:
            try:
                orm = await session.get(self._orm, tag_id)
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to get tag {tag_id}: {e}") from e
            return TagInDB.model_validate(orm) if orm else None

    async def get_by_name(self, name: str) -> Optional[TagInDB]:
        async with get_session(self._session_factory) as session:
            try:
                res = await session.execute(select(self._orm).where(self._orm.name == name))
                orm = res.scalar_one_or_none()
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to get tag '{name}': {e}") from e
            return TagInDB.model_validate(orm) if orm else None

    async def search(self, tag_id: Optional[int] = None, name: Optional[str] = None) -> List[TagInDB]:
        """Returns tags matching every given criterion; no criteria lists all."""
        stmt = select(self._orm)
        if tag_id is not None:
            stmt = stmt.where(self._orm.id == tag_id)
        if name is not None:
            stmt = stmt.where(self._orm.name == name)
        async with get_session(self._session_factory) as session:
            try:
                res = await session.execute(stmt.order_by(self._orm.id))
                tags = res.scalars().all()
            except SQLAlchemyError as e:
                logger.error(f"Tag search failed: {e}")
                raise DatabaseError(f"Failed to search tags: {e}") from e
            return [TagInDB.model_validate(t) for t in tags]

    async def list_all(self) -> List[TagInDB]:
        return await self.search()

    async def rename(self, tag_id: int, name: str) -> TagInDB:
        data = TagCreate(name=name)
        async with get_session(self._session_factory) as session:
            try:
                tag = await session.get(self._orm, tag_id)
                if tag is None:
                    raise NotFoundError(f"Tag with id {tag_id} not found.")
                tag.name = data.name
                await session.commit()
                logger.info(f"Renamed tag {tag_id} to '{data.name}'")
                return TagInDB.model_validate(tag)
            except IntegrityError as e:
                await session.rollback()
                raise from_integrity_error(e, f"Failed to rename tag {tag_id}") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to rename tag {tag_id}: {e}") from e

    async def delete(self, tag_id: int) -> None:
        async with get_session(self._session_factory) as session:
            try:
                res = await session.execute(delete(self._orm).where(self._orm.id == tag_id))
                if res.rowcount == 0:
                    await session.rollback()
                    raise NotFoundError(f"Tag with id {tag_id} not found.")
                await session.commit()
                logger.info(f"Deleted tag {tag_id}")
            except IntegrityError as e:
                await session.rollback()
                raise from_integrity_error(e, f"Tag {tag_id} is still assigned") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to delete tag {tag_id}: {e}") from e
