# tasktimetracker/repositories/tasks/sql_repositoryImportance.py

import logging
from typing import List, Optional

from sqlalchemy import delete, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession

from tasktimetracker.db import ImportanceORM
from tasktimetracker.db.base import get_session
from tasktimetracker.exceptions import DatabaseError, NotFoundError, from_integrity_error
from tasktimetracker.models.importance import ImportanceCreate, ImportanceInDB, ImportanceUpdate

logger = logging.getLogger(__name__)


class ImportanceRepository:
    """
    Named priority levels. `val` is unique, so ordering by it gives a total
    order over the levels.
    """
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def check_connection(self):
        async with get_session(self._session_factory) as session:
            try:
                await session.execute(text("SELECT 1"))
            except SQLAlchemyError as e:
                logger.error(f"Task store connection failed: {e}")
                raise DatabaseError("Failed to connect to the task store.") from e

    async def create(self, data: ImportanceCreate) -> ImportanceInDB:
        importance = ImportanceORM(**data.model_dump())
        async with get_session(self._session_factory) as session:
            try:
                session.add(importance)
                await session.commit()
                await session.refresh(importance)
                logger.info(f"Created importance '{importance.name}' (val={importance.val}) with id {importance.id}")
                return ImportanceInDB.model_validate(importance)
            except IntegrityError as e:
                await session.rollback()
                raise from_integrity_error(e, f"Failed to create importance '{data.name}'") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to create importance: {e}") from e

    async def _one(self, stmt, what: str) -> Optional[ImportanceInDB]:
        async with get_session(self._session_factory) as session:
            try:
                orm = (await session.execute(stmt)).scalar_one_or_none()
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to get importance {what}: {e}") from e
            return ImportanceInDB.model_validate(orm) if orm else None

    async def get(self, importance_id: int) -> Optional[ImportanceInDB]:
        return await self._one(select(ImportanceORM).where(ImportanceORM.id == importance_id), str(importance_id))

    async def get_by_name(self, name: str) -> Optional[ImportanceInDB]:
        return await self._one(select(ImportanceORM).where(ImportanceORM.name == name), f"'{name}'")

    async def get_by_value(self, val: int) -> Optional[ImportanceInDB]:
        return await self._one(select(ImportanceORM).where(ImportanceORM.val == val), f"with val {val}")

    async def list_all(self) -> List[ImportanceInDB]:
        """All levels, lowest val first."""
        async with get_session(self._session_factory) as session:
            try:
                res = await session.execute(select(ImportanceORM).order_by(ImportanceORM.val))
                levels = res.scalars().all()
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to list importance levels: {e}") from e
            return [ImportanceInDB.model_validate(i) for i in levels]

    async def update(self, importance_id: int, patch: ImportanceUpdate) -> Optional[ImportanceInDB]:
        changes = patch.changes()
        if not changes:
            return None
        async with get_session(self._session_factory) as session:
            try:
                importance = await session.get(ImportanceORM, importance_id)
                if importance is None:
                    raise NotFoundError(f"Importance with id {importance_id} not found.")
                for key, value in changes.items():
                    setattr(importance, key, value)
                await session.commit()
                logger.info(f"Updated importance {importance_id}: {sorted(changes)}")
                return ImportanceInDB.model_validate(importance)
            except IntegrityError as e:
                await session.rollback()
                raise from_integrity_error(e, f"Failed to update importance {importance_id}") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to update importance {importance_id}: {e}") from e

    async def delete(self, importance_id: int) -> None:
        async with get_session(self._session_factory) as session:
            try:
                res = await session.execute(delete(ImportanceORM).where(ImportanceORM.id == importance_id))
                if res.rowcount == 0:
                    await session.rollback()
                    raise NotFoundError(f"Importance with id {importance_id} not found.")
                await session.commit()
                logger.info(f"Deleted importance {importance_id}")
            except IntegrityError as e:
                await session.rollback()
                raise from_integrity_error(e, f"Importance {importance_id} is still used by tasks") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to delete importance {importance_id}: {e}") from e
