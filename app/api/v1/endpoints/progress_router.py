"""Endpoints de progression: complétion séquentielle des chapitres."""
from fastapi import APIRouter, Depends, status

from app.api.v1.dependencies import get_current_student, get_progress_service
from app.models.user.user_model import User
from app.schemas.course import chapter_schema, course_schema
from app.schemas.progress.progress_schema import CourseProgressSummary, ProgressRead
from app.schemas.response_schema import success_response
from app.services.progress_service import ProgressService

router = APIRouter()


@router.post(
    "/{chapter_id}/complete",
    status_code=status.HTTP_201_CREATED,
    summary="Marquer un chapitre comme terminé",
)
def complete_chapter(
    chapter_id: int,
    current_student: User = Depends(get_current_student),
    progress_service: ProgressService = Depends(get_progress_service),
) -> dict:
    progress, chapter = progress_service.complete_chapter(current_student.id, chapter_id)
    return success_response(
        "Chapter marked as completed successfully",
        {
            "progress": ProgressRead.model_validate(progress).model_dump(mode="json"),
            "chapter": chapter_schema.ChapterBrief.model_validate(chapter).model_dump(mode="json"),
        },
    )


@router.get("/my", summary="Progression sur tous les cours affectés")
def get_my_progress(
    current_student: User = Depends(get_current_student),
    progress_service: ProgressService = Depends(get_progress_service),
) -> dict:
    overview = progress_service.progress_overview(current_student.id)
    if not overview:
        return success_response("No courses assigned", {"progress": [], "totalCourses": 0})

    courses = {
        course.id: course
        for course in progress_service.gateway.list_courses(
            [assignment.course_id for assignment, _ in overview]
        )
    }
    summaries = [
        CourseProgressSummary(
            course=course_schema.StudentCourseRead.model_validate(courses[assignment.course_id]),
            assigned_at=assignment.assigned_at,
            total_chapters=progress.total_chapters,
            completed_chapters=progress.completed_chapters,
            completion_percentage=progress.completion_percentage,
        ).model_dump(mode="json", by_alias=True)
        for assignment, progress in overview
        if assignment.course_id in courses
    ]
    return success_response(
        "Progress fetched successfully",
        {"progress": summaries, "totalCourses": len(summaries)},
    )


@router.get("/course/{course_id}/chapters", summary="Chapitres terminés d'un cours")
def get_completed_chapters(
    course_id: int,
    current_student: User = Depends(get_current_student),
    progress_service: ProgressService = Depends(get_progress_service),
) -> dict:
    completed_ids = progress_service.completed_chapter_ids(current_student.id, course_id)
    return success_response(
        "Completed chapters fetched successfully",
        {"completedChapterIds": completed_ids},
    )
