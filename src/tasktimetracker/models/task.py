# File: tasktimetracker/models/task.py

from __future__ import annotations
from typing import List, Optional

from pydantic import BaseModel, Field

from .importance import ImportanceInDB
from .tag import NAME_MAX_LENGTH, TagInDB


class TaskCreate(BaseModel):
    name: str = Field("", max_length=NAME_MAX_LENGTH)
    des: str = ""
    done: bool = False
    time: int = Field(0, ge=0)
    iid: int


class TaskUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=NAME_MAX_LENGTH)
    des: Optional[str] = None
    done: Optional[bool] = None
    time: Optional[int] = Field(None, ge=0)
    iid: Optional[int] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


class TaskInDB(TaskCreate):
    id: int
    name: str
    time: int

    model_config = {"from_attributes": True}


# Task with its importance level and assigned tags loaded
class TaskDetails(TaskInDB):
    importance: ImportanceInDB
    tags: List[TagInDB] = []


class TaskTagAssignment(BaseModel):
    tkid: int
    tgid: int

    model_config = {"from_attributes": True}
