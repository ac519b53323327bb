# tasktimetracker/db/tasks/task_orm.py

from __future__ import annotations
from typing import List, TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..base import TaskBase

if TYPE_CHECKING:
    from .importance_orm import ImportanceORM
    from .tag_orm import TaskTagORM


class TaskORM(TaskBase):
    __tablename__ = "task"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(30), unique=True, nullable=False, default="", server_default=text("''"))
    des: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default=text("''"))
    done: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text("0"))

    # Time spent on the task.
    time: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))

    iid: Mapped[int] = mapped_column(Integer, ForeignKey("importance.id"), nullable=False)

    importance: Mapped["ImportanceORM"] = relationship(viewonly=True)
    tags: Mapped[List["TaskTagORM"]] = relationship(
        secondary="tagassignment", viewonly=True
    )
