# tasktimetracker/db/tasks/importance_orm.py

from __future__ import annotations

from sqlalchemy import Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from ..base import TaskBase


class ImportanceORM(TaskBase):
    __tablename__ = "importance"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)

    # Ordering weight. Unique, so the levels form a total order.
    val: Mapped[int] = mapped_column(Integer, unique=True, nullable=False, default=0, server_default=text("0"))
