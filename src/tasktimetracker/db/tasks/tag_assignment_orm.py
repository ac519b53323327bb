# tasktimetracker/db/tasks/tag_assignment_orm.py

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from ..base import TaskBase


class TaskTagAssignmentORM(TaskBase):
    __tablename__ = "tagassignment"

    tkid: Mapped[int] = mapped_column(Integer, ForeignKey("task.id"), primary_key=True)
    tgid: Mapped[int] = mapped_column(Integer, ForeignKey("tag.id"), primary_key=True)
