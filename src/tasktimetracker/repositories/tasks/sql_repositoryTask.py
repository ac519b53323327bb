# tasktimetracker/repositories/tasks/sql_repositoryTask.py

import logging
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession
from sqlalchemy.orm import selectinload

from tasktimetracker.db import TaskORM, TaskTagORM, TaskTagAssignmentORM
from tasktimetracker.db.base import get_session
from tasktimetracker.exceptions import DatabaseError, NotFoundError, from_integrity_error
from tasktimetracker.models.tag import TagInDB
from tasktimetracker.models.task import TaskCreate, TaskDetails, TaskInDB, TaskTagAssignment, TaskUpdate

logger = logging.getLogger(__name__)


class TaskRepository:
    """
    To-do items of the task store together with their tag links.
    """
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def create(self, data: TaskCreate) -> TaskInDB:
        """Creates a task. iid must reference an existing importance level."""
        task = TaskORM(**data.model_dump())
        async with get_session(self._session_factory) as session:
            try:
                session.add(task)
                await session.commit()
                await session.refresh(task)
                logger.info(f"Created task '{task.name}' with id {task.id}")
                return TaskInDB.model_validate(task)
            except IntegrityError as e:
                await session.rollback()
                logger.error(f"Failed to create task '{data.name}': {e}")
                raise from_integrity_error(e, f"Failed to create task '{data.name}'") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to create task: {e}") from e

    async def get(self, task_id: int) -> Optional[TaskInDB]:
        async with get_session(self._session_factory) as session:
            try:
                orm = await session.get(TaskORM, task_id)
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to get task {task_id}: {e}") from e
            return TaskInDB.model_validate(orm) if orm else None

    async def get_details(self, task_id: int) -> Optional[TaskDetails]:
        """Task with its importance level and tags loaded."""
        stmt = (
            select(TaskORM)
            .options(selectinload(TaskORM.importance), selectinload(TaskORM.tags))
            .where(TaskORM.id == task_id)
        )
        async with get_session(self._session_factory) as session:
            try:
                orm = (await session.execute(stmt)).scalar_one_or_none()
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to get task {task_id}: {e}") from e
            return TaskDetails.model_validate(orm) if orm else None

    async def list_all(self, done: Optional[bool] = None) -> List[TaskInDB]:
        stmt = select(TaskORM)
        if done is not None:
            stmt = stmt.where(TaskORM.done == done)
        async with get_session(self._session_factory) as session:
            try:
                tasks = (await session.execute(stmt.order_by(TaskORM.id))).scalars().all()
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to list tasks: {e}") from e
            return [TaskInDB.model_validate(t) for t in tasks]

    async def update(self, task_id: int, patch: TaskUpdate) -> Optional[TaskInDB]:
        changes = patch.changes()
        if not changes:
            return None
        async with get_session(self._session_factory) as session:
            try:
                task = await session.get(TaskORM, task_id)
                if task is None:
                    raise NotFoundError(f"Task with id {task_id} not found.")
                for key, value in changes.items():
                    setattr(task, key, value)
                await session.commit()
                logger.info(f"Updated task {task_id}: {sorted(changes)}")
                return TaskInDB.model_validate(task)
            except IntegrityError as e:
                await session.rollback()
                raise from_integrity_error(e, f"Failed to update task {task_id}") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to update task {task_id}: {e}") from e

    async def set_done(self, task_id: int, done: bool = True) -> TaskInDB:
        return await self.update(task_id, TaskUpdate(done=done))

    async def add_time(self, task_id: int, amount: int) -> TaskInDB:
        """Adds amount to the time spent on the task."""
        if amount < 0:
            raise ValueError("amount must not be negative")
        async with get_session(self._session_factory) as session:
            try:
                res = await session.execute(
                    update(TaskORM).where(TaskORM.id == task_id).values(time=TaskORM.time + amount)
                    .execution_options(synchronize_session=False)
                )
                if res.rowcount == 0:
                    await session.rollback()
                    raise NotFoundError(f"Task with id {task_id} not found.")
                await session.commit()
                task = await session.get(TaskORM, task_id, populate_existing=True)
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to add time to task {task_id}: {e}") from e
            return TaskInDB.model_validate(task)

    async def delete(self, task_id: int) -> None:
        async with get_session(self._session_factory) as session:
            try:
                res = await session.execute(delete(TaskORM).where(TaskORM.id == task_id))
                if res.rowcount == 0:
                    await session.rollback()
                    raise NotFoundError(f"Task with id {task_id} not found.")
                await session.commit()
                logger.info(f"Deleted task {task_id}")
            except IntegrityError as e:
                await session.rollback()
                raise from_integrity_error(e, f"Task {task_id} still has tags assigned") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to delete task {task_id}: {e}") from e

    # ――― tag links ――― #

    async def add_tag(self, task_id: int, tag_id: int) -> TaskTagAssignment:
        link = TaskTagAssignmentORM(tkid=task_id, tgid=tag_id)
        async with get_session(self._session_factory) as session:
            try:
                session.add(link)
                await session.commit()
                logger.info(f"Assigned tag {tag_id} to task {task_id}")
                return TaskTagAssignment.model_validate(link)
            except IntegrityError as e:
                await session.rollback()
                raise from_integrity_error(e, f"Failed to assign tag {tag_id} to task {task_id}") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to assign tag {tag_id} to task {task_id}: {e}") from e

    async def remove_tag(self, task_id: int, tag_id: int) -> None:
        async with get_session(self._session_factory) as session:
            try:
                res = await session.execute(
                    delete(TaskTagAssignmentORM).where(
                        TaskTagAssignmentORM.tkid == task_id,
                        TaskTagAssignmentORM.tgid == tag_id,
                    )
                )
                if res.rowcount == 0:
                    await session.rollback()
                    raise NotFoundError(f"Tag {tag_id} is not assigned to task {task_id}.")
                await session.commit()
                logger.info(f"Removed tag {tag_id} from task {task_id}")
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to remove tag {tag_id} from task {task_id}: {e}") from e

    async def assigned_tags(self, task_id: int) -> List[TagInDB]:
        stmt = (
            select(TaskTagORM)
            .join(TaskTagAssignmentORM, TaskTagAssignmentORM.tgid == TaskTagORM.id)
            .where(TaskTagAssignmentORM.tkid == task_id)
            .order_by(TaskTagORM.name)
        )
        async with get_session(self._session_factory) as session:
            try:
                tags = (await session.execute(stmt)).scalars().all()
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to list tags of task {task_id}: {e}") from e
            return [TagInDB.model_validate(t) for t in tags]
