"""Endpoints mentor: cours, chapitres et affectations."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.dependencies import get_current_mentor, get_db
from app.core.errors import ForbiddenError, NotFoundError
from app.crud import course_crud
from app.models.course.course_model import Course
from app.models.user.user_model import User
from app.schemas.course import chapter_schema, course_schema
from app.schemas.response_schema import success_response

router = APIRouter()


def _get_owned_course(db: Session, course_id: int, mentor: User, action: str) -> Course:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundError("Course not found")
    if course.mentor_id != mentor.id:
        raise ForbiddenError(f"You do not have permission to {action}")
    return course


def _course_payload(course: Course) -> dict:
    return course_schema.CourseRead.model_validate(course).model_dump(mode="json")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_course(
    course_in: course_schema.CourseCreate,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
) -> dict:
    course = course_crud.create_course(db, current_mentor.id, course_in)
    return success_response("Course created successfully", {"course": _course_payload(course)})


@router.get("/my")
def list_my_courses(
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
) -> dict:
    courses = course_crud.list_courses_for_mentor(db, current_mentor.id)
    return success_response(
        "Courses fetched successfully",
        {"courses": [_course_payload(c) for c in courses], "count": len(courses)},
    )


@router.get("/{course_id}")
def get_course(
    course_id: int,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
) -> dict:
    course = _get_owned_course(db, course_id, current_mentor, "view this course")
    return success_response("Course fetched successfully", {"course": _course_payload(course)})


@router.put("/{course_id}")
def update_course(
    course_id: int,
    course_in: course_schema.CourseUpdate,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
) -> dict:
    course = _get_owned_course(db, course_id, current_mentor, "update this course")
    course = course_crud.update_course(db, course, course_in)
    return success_response("Course updated successfully", {"course": _course_payload(course)})


@router.delete("/{course_id}")
def delete_course(
    course_id: int,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
) -> dict:
    course = _get_owned_course(db, course_id, current_mentor, "delete this course")
    course_crud.delete_course(db, course)
    return success_response("Course deleted successfully", {"deletedCourseId": course_id})


@router.post("/{course_id}/assign", status_code=status.HTTP_201_CREATED)
def assign_course(
    course_id: int,
    payload: course_schema.CourseAssignRequest,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
) -> dict:
    course = _get_owned_course(db, course_id, current_mentor, "assign this course")
    assignments = course_crud.assign_students(db, course, payload.student_ids)
    return success_response(
        "Course assigned to students successfully",
        {
            "assignments": [
                course_schema.CourseAssignmentRead.model_validate(a).model_dump(mode="json")
                for a in assignments
            ],
            "count": len(assignments),
        },
    )


@router.post("/{course_id}/chapters", status_code=status.HTTP_201_CREATED)
def create_chapter(
    course_id: int,
    chapter_in: chapter_schema.ChapterCreate,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
) -> dict:
    course = _get_owned_course(db, course_id, current_mentor, "add chapters to this course")
    chapter = course_crud.create_chapter(db, course, chapter_in)
    return success_response(
        "Chapter created successfully",
        {"chapter": chapter_schema.ChapterRead.model_validate(chapter).model_dump(mode="json")},
    )


@router.get("/{course_id}/chapters")
def list_chapters(
    course_id: int,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
) -> dict:
    course = _get_owned_course(db, course_id, current_mentor, "view chapters of this course")
    chapters = course_crud.list_chapters(db, course.id)
    return success_response(
        "Chapters fetched successfully",
        {
            "course": {"id": course.id, "title": course.title},
            "chapters": [
                chapter_schema.ChapterRead.model_validate(c).model_dump(mode="json") for c in chapters
            ],
            "count": len(chapters),
        },
    )
