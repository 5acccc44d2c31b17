"""Endpoints étudiant: cours affectés et chapitres avec état de verrouillage."""
from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_current_student, get_progress_service
from app.core.errors import NotFoundError
from app.models.user.user_model import User
from app.schemas.course import chapter_schema, course_schema
from app.schemas.response_schema import success_response
from app.services.progress_service import ChapterState, ProgressService

router = APIRouter()


@router.get("/my")
def list_assigned_courses(
    current_student: User = Depends(get_current_student),
    progress_service: ProgressService = Depends(get_progress_service),
) -> dict:
    assignments = progress_service.gateway.list_assignments_for_student(current_student.id)
    if not assignments:
        return success_response("No courses assigned", {"courses": [], "count": 0})

    assigned_at = {a.course_id: a.assigned_at for a in assignments}
    courses = progress_service.gateway.list_courses(list(assigned_at))
    payload = [
        {
            **course_schema.StudentCourseRead.model_validate(course).model_dump(mode="json"),
            "assigned_at": assigned_at[course.id].isoformat() if assigned_at[course.id] else None,
        }
        for course in courses
    ]
    return success_response("Courses fetched successfully", {"courses": payload, "count": len(payload)})


@router.get("/{course_id}")
def get_assigned_course(
    course_id: int,
    current_student: User = Depends(get_current_student),
    progress_service: ProgressService = Depends(get_progress_service),
) -> dict:
    progress_service.ensure_assigned(
        current_student.id,
        course_id,
        "You do not have access to this course. Course is not assigned to you.",
    )
    course = progress_service.gateway.find_course(course_id)
    if course is None:
        raise NotFoundError("Course not found")
    return success_response(
        "Course fetched successfully",
        {"course": course_schema.StudentCourseRead.model_validate(course).model_dump(mode="json")},
    )


@router.get("/{course_id}/chapters")
def list_course_chapters(
    course_id: int,
    current_student: User = Depends(get_current_student),
    progress_service: ProgressService = Depends(get_progress_service),
) -> dict:
    states = progress_service.chapter_states(current_student.id, course_id)
    chapters = [
        chapter_schema.ChapterWithState(
            **chapter_schema.ChapterRead.model_validate(chapter).model_dump(),
            state=state,
            is_locked=state == ChapterState.LOCKED,
            is_completed=state == ChapterState.COMPLETED,
        ).model_dump(mode="json")
        for chapter, state in states
    ]
    return success_response(
        "Chapters fetched successfully",
        {"chapters": chapters, "count": len(chapters)},
    )
