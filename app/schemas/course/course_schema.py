from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CourseCreate(BaseModel):
    title: str
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Title is required and must be a non-empty string")
        return value


class CourseUpdate(CourseCreate):
    pass


class CourseRead(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    mentor_id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class StudentCourseRead(BaseModel):
    id: int
    title: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class CourseAssignRequest(BaseModel):
    student_ids: List[int] = Field(..., alias="studentIds", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class CourseAssignmentRead(BaseModel):
    id: int
    course_id: int
    student_id: int
    assigned_at: datetime

    model_config = ConfigDict(from_attributes=True)
