"""Schémas Pydantic pour les endpoints de progression."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.course.course_schema import StudentCourseRead


class ProgressRead(BaseModel):
    id: int
    student_id: int
    course_id: int
    chapter_id: int
    completed_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CourseProgressSummary(BaseModel):
    """Progression d'un étudiant sur un cours affecté (clés camelCase côté client)."""

    course: StudentCourseRead
    assigned_at: Optional[datetime] = None
    total_chapters: int = Field(..., serialization_alias="totalChapters")
    completed_chapters: int = Field(..., serialization_alias="completedChapters")
    completion_percentage: int = Field(..., serialization_alias="completionPercentage")
