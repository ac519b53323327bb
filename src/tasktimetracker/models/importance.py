# File: tasktimetracker/models/importance.py

from __future__ import annotations
from typing import Optional

from pydantic import BaseModel, Field

from .tag import NAME_MAX_LENGTH


class ImportanceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    val: int = 0


class ImportanceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    val: Optional[int] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


class ImportanceInDB(ImportanceCreate):
    id: int
    name: str

    model_config = {"from_attributes": True}
