"""Utility helpers for test factories."""

from __future__ import annotations

from datetime import datetime, timezone

from app.models.course.assignment_model import CourseAssignment
from app.models.course.chapter_model import Chapter
from app.models.course.course_model import Course
from app.models.progress.progress_model import Progress
from app.models.user.user_model import User, UserRole


def create_user(db, **kwargs) -> User:
    defaults = {
        "email": "user@example.com",
        "hashed_password": "x",
        "role": UserRole.STUDENT,
        "is_approved": True,
        "created_at": datetime.now(timezone.utc),
    }
    defaults.update(kwargs)
    user = User(**defaults)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_student(db, email: str = "student@example.com", **kwargs) -> User:
    return create_user(db, email=email, role=UserRole.STUDENT, **kwargs)


def create_mentor(db, email: str = "mentor@example.com", **kwargs) -> User:
    return create_user(db, email=email, role=UserRole.MENTOR, **kwargs)


def create_admin(db, email: str = "admin@example.com", **kwargs) -> User:
    return create_user(db, email=email, role=UserRole.ADMIN, **kwargs)


def create_course(db, mentor: User, *, title: str = "Python Basics", **kwargs) -> Course:
    course = Course(title=title, mentor_id=mentor.id, description=kwargs.pop("description", None), **kwargs)
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


def create_chapters(db, course: Course, sequence_orders: list[int]) -> list[Chapter]:
    chapters = [
        Chapter(course_id=course.id, title=f"Chapter {order}", sequence_order=order)
        for order in sequence_orders
    ]
    db.add_all(chapters)
    db.commit()
    for chapter in chapters:
        db.refresh(chapter)
    return chapters


def assign(db, course: Course, student: User) -> CourseAssignment:
    assignment = CourseAssignment(
        course_id=course.id,
        student_id=student.id,
        assigned_at=datetime.now(timezone.utc),
    )
    db.add(assignment)
    db.commit()
    db.refresh(assignment)
    return assignment


def record_progress(db, student: User, chapter: Chapter) -> Progress:
    progress = Progress(
        student_id=student.id,
        course_id=chapter.course_id,
        chapter_id=chapter.id,
        completed_at=datetime.now(timezone.utc),
    )
    db.add(progress)
    db.commit()
    db.refresh(progress)
    return progress
