# Fichier: app/crud/course_crud.py
import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.crud import user_crud
from app.models.course.assignment_model import CourseAssignment
from app.models.course.chapter_model import Chapter
from app.models.course.course_model import Course
from app.models.user.user_model import UserRole
from app.schemas.course import chapter_schema, course_schema

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def create_course(db: Session, mentor_id: int, course_in: course_schema.CourseCreate) -> Course:
    course = Course(
        title=course_in.title.strip(),
        description=_clean(course_in.description),
        mentor_id=mentor_id,
    )
    db.add(course)
    db.commit()
    db.refresh(course)
    logger.info("Cours %s créé par le mentor %s", course.id, mentor_id)
    return course


def list_courses_for_mentor(db: Session, mentor_id: int) -> List[Course]:
    return (
        db.query(Course)
        .filter(Course.mentor_id == mentor_id)
        .order_by(Course.created_at.desc(), Course.id.desc())
        .all()
    )


def update_course(db: Session, course: Course, course_in: course_schema.CourseUpdate) -> Course:
    course.title = course_in.title.strip()
    course.description = _clean(course_in.description)
    db.commit()
    db.refresh(course)
    return course


def delete_course(db: Session, course: Course) -> None:
    """Supprime le cours; chapitres, affectations, progression et certificats suivent."""
    course_id = course.id
    db.delete(course)
    db.commit()
    logger.info("Cours %s supprimé", course_id)


def sequence_order_taken(db: Session, course_id: int, sequence_order: int) -> bool:
    return (
        db.query(Chapter.id)
        .filter(Chapter.course_id == course_id, Chapter.sequence_order == sequence_order)
        .first()
        is not None
    )


def create_chapter(db: Session, course: Course, chapter_in: chapter_schema.ChapterCreate) -> Chapter:
    message = f"A chapter with sequence_order {chapter_in.sequence_order} already exists for this course"
    if sequence_order_taken(db, course.id, chapter_in.sequence_order):
        raise ConflictError(message)

    chapter = Chapter(
        course_id=course.id,
        title=chapter_in.title.strip(),
        description=_clean(chapter_in.description),
        image_url=_clean(chapter_in.image_url),
        video_url=_clean(chapter_in.video_url),
        sequence_order=chapter_in.sequence_order,
    )
    db.add(chapter)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(message) from exc
    db.refresh(chapter)
    return chapter


def list_chapters(db: Session, course_id: int) -> List[Chapter]:
    return (
        db.query(Chapter)
        .filter(Chapter.course_id == course_id)
        .order_by(Chapter.sequence_order.asc())
        .all()
    )


def assign_students(db: Session, course: Course, student_ids: list[int]) -> List[CourseAssignment]:
    """Affecte le cours à plusieurs étudiants, tout ou rien."""
    if len(set(student_ids)) != len(student_ids):
        raise ValidationError("Duplicate student IDs found in the request")

    users = user_crud.get_users_by_ids(db, student_ids)
    if len(users) != len(student_ids):
        raise NotFoundError("One or more student IDs not found")

    non_students = sorted(user.id for user in users if user.role != UserRole.STUDENT)
    if non_students:
        raise ValidationError(
            f"The following users are not students: {', '.join(str(i) for i in non_students)}"
        )

    already_assigned = sorted(
        row.student_id
        for row in db.query(CourseAssignment.student_id)
        .filter(CourseAssignment.course_id == course.id, CourseAssignment.student_id.in_(student_ids))
        .all()
    )
    if already_assigned:
        raise ConflictError(
            "The following students are already assigned to this course: "
            f"{', '.join(str(i) for i in already_assigned)}"
        )

    now = datetime.now(timezone.utc)
    assignments = [
        CourseAssignment(course_id=course.id, student_id=student_id, assigned_at=now)
        for student_id in student_ids
    ]
    db.add_all(assignments)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("One or more students are already assigned to this course") from exc
    for assignment in assignments:
        db.refresh(assignment)
    logger.info("Cours %s affecté aux étudiants %s", course.id, student_ids)
    return assignments
