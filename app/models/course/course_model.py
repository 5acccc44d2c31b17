from __future__ import annotations

from datetime import datetime
from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base_class import Base

if TYPE_CHECKING:
    from app.models.user.user_model import User
    from .chapter_model import Chapter
    from .assignment_model import CourseAssignment
    from app.models.progress.progress_model import Progress
    from app.models.progress.certificate_model import Certificate


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    mentor_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    mentor: Mapped["User"] = relationship(back_populates="courses")
    chapters: Mapped[List["Chapter"]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="Chapter.sequence_order",
    )
    assignments: Mapped[List["CourseAssignment"]] = relationship(back_populates="course", cascade="all, delete-orphan")
    progress_entries: Mapped[List["Progress"]] = relationship(back_populates="course", cascade="all, delete-orphan")
    certificates: Mapped[List["Certificate"]] = relationship(back_populates="course", cascade="all, delete-orphan")

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Course(id={self.id}, title='{self.title}')>"
