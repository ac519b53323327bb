# File: tasktimetracker/models/tag.py

from __future__ import annotations

from pydantic import BaseModel, Field

# Tag and importance names are stored as VARCHAR(30).
NAME_MAX_LENGTH = 30


class TagCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)


class TagInDB(TagCreate):
    id: int
    # Rows are read back as stored; SQLite does not enforce VARCHAR lengths.
    name: str

    model_config = {"from_attributes": True}
