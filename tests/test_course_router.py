import pytest

from app.api.v1.endpoints import course_router
from app.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from app.models.course.chapter_model import Chapter
from app.models.progress.progress_model import Progress
from app.schemas.course.chapter_schema import ChapterCreate
from app.schemas.course.course_schema import CourseAssignRequest, CourseCreate, CourseUpdate
from tests.utils import (
    assign,
    create_chapters,
    create_course,
    create_mentor,
    create_student,
    record_progress,
)


@pytest.fixture()
def mentor(db_session):
    return create_mentor(db_session)


@pytest.fixture()
def course(db_session, mentor):
    return create_course(db_session, mentor)


def test_create_and_list_courses(db_session, mentor):
    response = course_router.create_course(
        CourseCreate(title="  Git Essentials ", description=" "), db=db_session, current_mentor=mentor
    )

    created = response["data"]["course"]
    assert created["title"] == "Git Essentials"
    assert created["description"] is None
    assert created["mentor_id"] == mentor.id

    listing = course_router.list_my_courses(db=db_session, current_mentor=mentor)
    assert listing["data"]["count"] == 1


def test_blank_title_is_rejected():
    with pytest.raises(ValueError):
        CourseCreate(title="   ")


def test_other_mentor_cannot_touch_course(db_session, course):
    intruder = create_mentor(db_session, email="intruder@example.com")

    with pytest.raises(ForbiddenError) as exc_info:
        course_router.update_course(
            course.id, CourseUpdate(title="Hijacked"), db=db_session, current_mentor=intruder
        )

    assert exc_info.value.message == "You do not have permission to update this course"


def test_unknown_course_is_not_found(db_session, mentor):
    with pytest.raises(NotFoundError):
        course_router.get_course(404, db=db_session, current_mentor=mentor)


def test_update_course(db_session, mentor, course):
    response = course_router.update_course(
        course.id, CourseUpdate(title="Python Advanced", description="Decorators"), db=db_session, current_mentor=mentor
    )

    assert response["data"]["course"]["title"] == "Python Advanced"
    assert response["data"]["course"]["description"] == "Decorators"


def test_delete_course_removes_dependent_rows(db_session, mentor, course):
    student = create_student(db_session)
    chapters = create_chapters(db_session, course, [1, 2])
    assign(db_session, course, student)
    record_progress(db_session, student, chapters[0])

    response = course_router.delete_course(course.id, db=db_session, current_mentor=mentor)

    assert response["data"] == {"deletedCourseId": course.id}
    assert db_session.query(Chapter).count() == 0
    assert db_session.query(Progress).count() == 0


def test_chapter_sequence_must_be_unique(db_session, mentor, course):
    course_router.create_chapter(
        course.id, ChapterCreate(title="Intro", sequence_order=1), db=db_session, current_mentor=mentor
    )

    with pytest.raises(ConflictError) as exc_info:
        course_router.create_chapter(
            course.id, ChapterCreate(title="Again", sequence_order=1), db=db_session, current_mentor=mentor
        )

    assert "sequence_order 1" in exc_info.value.message


def test_chapters_are_listed_in_sequence(db_session, mentor, course):
    for order in (3, 1, 2):
        course_router.create_chapter(
            course.id, ChapterCreate(title=f"Part {order}", sequence_order=order), db=db_session, current_mentor=mentor
        )

    response = course_router.list_chapters(course.id, db=db_session, current_mentor=mentor)

    assert [c["sequence_order"] for c in response["data"]["chapters"]] == [1, 2, 3]
    assert response["data"]["course"] == {"id": course.id, "title": course.title}


def test_sequence_order_must_be_positive():
    with pytest.raises(ValueError):
        ChapterCreate(title="Zero", sequence_order=0)


def test_assign_students(db_session, mentor, course):
    first = create_student(db_session, email="a@example.com")
    second = create_student(db_session, email="b@example.com")

    response = course_router.assign_course(
        course.id, CourseAssignRequest(studentIds=[first.id, second.id]), db=db_session, current_mentor=mentor
    )

    assert response["data"]["count"] == 2
    assert {a["student_id"] for a in response["data"]["assignments"]} == {first.id, second.id}


def test_assign_rejects_duplicates_and_non_students(db_session, mentor, course):
    student = create_student(db_session)

    with pytest.raises(ValidationError):
        course_router.assign_course(
            course.id, CourseAssignRequest(studentIds=[student.id, student.id]), db=db_session, current_mentor=mentor
        )

    with pytest.raises(ValidationError) as exc_info:
        course_router.assign_course(
            course.id, CourseAssignRequest(studentIds=[student.id, mentor.id]), db=db_session, current_mentor=mentor
        )
    assert exc_info.value.message == f"The following users are not students: {mentor.id}"

    with pytest.raises(NotFoundError):
        course_router.assign_course(
            course.id, CourseAssignRequest(studentIds=[student.id, 999]), db=db_session, current_mentor=mentor
        )


def test_assign_is_all_or_nothing(db_session, mentor, course):
    already = create_student(db_session, email="already@example.com")
    fresh = create_student(db_session, email="fresh@example.com")
    assign(db_session, course, already)

    with pytest.raises(ConflictError) as exc_info:
        course_router.assign_course(
            course.id, CourseAssignRequest(studentIds=[fresh.id, already.id]), db=db_session, current_mentor=mentor
        )

    assert exc_info.value.message.endswith(str(already.id))
    assert len(course.assignments) == 1


def test_empty_assignment_list_is_invalid():
    with pytest.raises(ValueError):
        CourseAssignRequest(studentIds=[])
