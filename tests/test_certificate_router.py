from datetime import datetime, timezone

import pytest

from app.api.v1.endpoints import certificate_router
from app.core.errors import ForbiddenError, UpstreamFailure
from app.services.certificate_service import CertificateService, IssuedCertificate
from app.services.course_gateway import CourseProgressGateway
from tests.utils import (
    assign,
    create_chapters,
    create_course,
    create_mentor,
    create_student,
    record_progress,
)


@pytest.fixture()
def gateway(db_session):
    return CourseProgressGateway(db_session)


@pytest.fixture()
def certificate_service(gateway):
    return CertificateService(gateway)


@pytest.fixture()
def finished(db_session):
    mentor = create_mentor(db_session)
    student = create_student(db_session)
    course = create_course(db_session, mentor, title="Web Development 101")
    for chapter in create_chapters(db_session, course, [1, 2]):
        record_progress(db_session, student, chapter)
    assign(db_session, course, student)
    return student, course


def test_certificate_is_returned_as_pdf_attachment(certificate_service, finished):
    student, course = finished

    response = certificate_router.get_certificate(
        course.id, current_student=student, certificate_service=certificate_service
    )

    assert response.media_type == "application/pdf"
    assert response.body.startswith(b"%PDF")
    assert response.headers["content-disposition"] == (
        f'attachment; filename="certificate-Web-Development-101-{student.id}.pdf"'
    )
    assert "x-certificate-persisted" not in response.headers


def test_incomplete_course_raises_forbidden(db_session, certificate_service):
    mentor = create_mentor(db_session)
    student = create_student(db_session)
    course = create_course(db_session, mentor)
    chapters = create_chapters(db_session, course, [1, 2, 3])
    assign(db_session, course, student)
    record_progress(db_session, student, chapters[0])

    with pytest.raises(ForbiddenError) as exc_info:
        certificate_router.get_certificate(course.id, current_student=student, certificate_service=certificate_service)

    assert exc_info.value.data["completionPercentage"] == 33


def test_degraded_issuance_is_flagged(certificate_service, gateway, finished, monkeypatch):
    student, course = finished

    def _fail(*args, **kwargs):
        raise UpstreamFailure("Failed to store certificate")

    monkeypatch.setattr(gateway, "insert_certificate", _fail)

    response = certificate_router.get_certificate(
        course.id, current_student=student, certificate_service=certificate_service
    )

    assert response.headers["x-certificate-persisted"] == "false"


def test_non_ascii_titles_get_an_encoded_filename():
    issued = IssuedCertificate(
        document=b"%PDF-fake",
        student_id=3,
        course_id=1,
        course_title="Données avancées",
        issued_at=datetime(2026, 1, 5, tzinfo=timezone.utc),
        certificate_id=1,
        persisted=True,
    )

    response = certificate_router.build_certificate_response(issued)

    disposition = response.headers["content-disposition"]
    assert 'filename="certificate-Donnes-avances-3.pdf"' in disposition
    assert "filename*=UTF-8''certificate-Donn%C3%A9es-avanc%C3%A9es-3.pdf" in disposition
