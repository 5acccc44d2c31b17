from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base_class import Base

if TYPE_CHECKING:
    from app.models.user.user_model import User
    from app.models.course.course_model import Course
    from app.models.course.chapter_model import Chapter


class Progress(Base):
    """One completed chapter for one student. Rows are never updated."""

    __tablename__ = "progress"
    __table_args__ = (
        UniqueConstraint("student_id", "chapter_id", name="uq_progress_student_chapter"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    student_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    course_id: Mapped[int] = mapped_column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), index=True, nullable=False)
    chapter_id: Mapped[int] = mapped_column(Integer, ForeignKey("chapters.id", ondelete="CASCADE"), index=True, nullable=False)
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    student: Mapped["User"] = relationship(back_populates="progress_entries")
    course: Mapped["Course"] = relationship(back_populates="progress_entries")
    chapter: Mapped["Chapter"] = relationship(back_populates="progress_entries")
