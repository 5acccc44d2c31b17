from sqlalchemy import Integer, String, Boolean, DateTime, func, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.base_class import Base
from typing import List, TYPE_CHECKING
from datetime import datetime
import enum

if TYPE_CHECKING:
    from ..course.course_model import Course
    from ..course.assignment_model import CourseAssignment
    from ..progress.progress_model import Progress
    from ..progress.certificate_model import Certificate

class UserRole(str, enum.Enum):
    STUDENT = "student"
    MENTOR = "mentor"
    ADMIN = "admin"

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="userrole", values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=UserRole.STUDENT,
        server_default=UserRole.STUDENT.value,
    )
    # Seuls les mentors passent par une validation de l'administrateur.
    is_approved: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # --- Relations ---
    courses: Mapped[List["Course"]] = relationship(back_populates="mentor", cascade="all, delete-orphan")
    assignments: Mapped[List["CourseAssignment"]] = relationship(back_populates="student", cascade="all, delete-orphan")
    progress_entries: Mapped[List["Progress"]] = relationship(back_populates="student", cascade="all, delete-orphan")
    certificates: Mapped[List["Certificate"]] = relationship(back_populates="student", cascade="all, delete-orphan")

    @property
    def is_mentor_pending(self) -> bool:
        return self.role == UserRole.MENTOR and not self.is_approved

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
