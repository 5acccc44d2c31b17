from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.services.progress_service import ChapterState


class ChapterCreate(BaseModel):
    title: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    sequence_order: int = Field(..., ge=1)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Title is required and must be a non-empty string")
        return value


class ChapterRead(BaseModel):
    id: int
    course_id: int
    title: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    sequence_order: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ChapterWithState(ChapterRead):
    """Chapitre vu par un étudiant, avec son état de verrouillage calculé."""

    state: ChapterState
    is_locked: bool
    is_completed: bool


class ChapterBrief(BaseModel):
    id: int
    title: str
    sequence_order: int

    model_config = ConfigDict(from_attributes=True)
