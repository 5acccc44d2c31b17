import pytest

from app.api.v1.endpoints import progress_router
from app.core.errors import ConflictError, ForbiddenError
from app.services.course_gateway import CourseProgressGateway
from app.services.progress_service import ProgressService
from tests.utils import assign, create_chapters, create_course, create_mentor, create_student


@pytest.fixture()
def progress_service(db_session):
    return ProgressService(CourseProgressGateway(db_session))


@pytest.fixture()
def enrolled(db_session):
    mentor = create_mentor(db_session)
    student = create_student(db_session)
    course = create_course(db_session, mentor)
    chapters = create_chapters(db_session, course, [1, 2])
    assign(db_session, course, student)
    return student, course, chapters


def test_complete_chapter_returns_progress_and_chapter(progress_service, enrolled):
    student, course, chapters = enrolled

    response = progress_router.complete_chapter(
        chapters[0].id, current_student=student, progress_service=progress_service
    )

    assert response["status"] == "success"
    assert response["message"] == "Chapter marked as completed successfully"
    assert response["data"]["chapter"] == {
        "id": chapters[0].id,
        "title": "Chapter 1",
        "sequence_order": 1,
    }
    assert response["data"]["progress"]["course_id"] == course.id


def test_out_of_order_then_duplicate(progress_service, enrolled):
    student, _, chapters = enrolled

    with pytest.raises(ForbiddenError) as exc_info:
        progress_router.complete_chapter(chapters[1].id, current_student=student, progress_service=progress_service)
    assert exc_info.value.status_code == 403
    assert exc_info.value.data == {"missingSequenceOrders": [1]}

    progress_router.complete_chapter(chapters[0].id, current_student=student, progress_service=progress_service)
    with pytest.raises(ConflictError) as conflict:
        progress_router.complete_chapter(chapters[0].id, current_student=student, progress_service=progress_service)
    assert conflict.value.status_code == 409


def test_my_progress_summarises_assigned_courses(progress_service, enrolled):
    student, course, chapters = enrolled
    progress_router.complete_chapter(chapters[0].id, current_student=student, progress_service=progress_service)

    response = progress_router.get_my_progress(current_student=student, progress_service=progress_service)

    assert response["data"]["totalCourses"] == 1
    summary = response["data"]["progress"][0]
    assert summary["course"]["id"] == course.id
    assert summary["totalChapters"] == 2
    assert summary["completedChapters"] == 1
    assert summary["completionPercentage"] == 50


def test_my_progress_without_assignments(db_session, progress_service):
    student = create_student(db_session, email="lonely@example.com")

    response = progress_router.get_my_progress(current_student=student, progress_service=progress_service)

    assert response["message"] == "No courses assigned"
    assert response["data"] == {"progress": [], "totalCourses": 0}


def test_completed_chapters_lists_ids(progress_service, enrolled):
    student, course, chapters = enrolled
    progress_router.complete_chapter(chapters[0].id, current_student=student, progress_service=progress_service)

    response = progress_router.get_completed_chapters(
        course.id, current_student=student, progress_service=progress_service
    )

    assert response["data"] == {"completedChapterIds": [chapters[0].id]}
