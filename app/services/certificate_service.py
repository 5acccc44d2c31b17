from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from app.core.errors import ConflictError, ForbiddenError, NotFoundError, UpstreamFailure, ValidationError
from app.services.certificate_renderer import render_certificate
from app.services.course_gateway import CourseProgressGateway
from app.services.progress_service import ProgressService

logger = logging.getLogger(__name__)

Renderer = Callable[[str, str, str], bytes]

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def format_issue_date(value: datetime) -> str:
    """``January 5, 2026`` style label used on the document."""
    return f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"


def certificate_filename(course_title: str, student_id: int) -> str:
    slug = re.sub(r"\s+", "-", course_title)
    return f"certificate-{slug}-{student_id}.pdf"


@dataclass(slots=True)
class IssuedCertificate:
    document: bytes
    student_id: int
    course_id: int
    course_title: str
    issued_at: datetime
    certificate_id: int | None
    persisted: bool

    @property
    def issued_on(self) -> str:
        return format_issue_date(self.issued_at)

    @property
    def filename(self) -> str:
        return certificate_filename(self.course_title, self.student_id)


class CertificateService:
    """Eligibility checks and idempotent certificate issuance."""

    def __init__(
        self,
        gateway: CourseProgressGateway,
        progress_service: ProgressService | None = None,
        renderer: Renderer = render_certificate,
    ):
        self.gateway = gateway
        self.progress_service = progress_service or ProgressService(gateway)
        self.renderer = renderer

    def get_or_issue_certificate(self, student_id: int, course_id: int) -> IssuedCertificate:
        self.progress_service.ensure_assigned(student_id, course_id)

        course = self.gateway.find_course(course_id)
        if course is None:
            raise NotFoundError("Course not found")

        student = self.gateway.find_user(student_id)
        if student is None:
            raise NotFoundError("Student not found")

        progress = self.progress_service.compute_course_progress(student_id, course_id)
        if progress.total_chapters == 0:
            raise ValidationError("Course has no chapters. Certificate cannot be generated.")

        if progress.completion_percentage != 100:
            raise ForbiddenError(
                f"Course completion is {progress.completion_percentage}%. "
                "You must complete 100% of the course to generate a certificate.",
                data=progress.to_dict(),
            )

        issued_at, certificate_id, persisted = self._lookup_or_create(student_id, course_id)

        document = self.renderer(student.email, course.title, format_issue_date(issued_at))
        return IssuedCertificate(
            document=document,
            student_id=student_id,
            course_id=course_id,
            course_title=course.title,
            issued_at=issued_at,
            certificate_id=certificate_id,
            persisted=persisted,
        )

    def _lookup_or_create(self, student_id: int, course_id: int) -> tuple[datetime, int | None, bool]:
        existing = self.gateway.find_certificate(student_id, course_id)
        if existing is not None:
            return existing.issued_at, existing.id, True

        now = datetime.now(timezone.utc)
        try:
            created = self.gateway.insert_certificate(student_id, course_id, now)
        except ConflictError:
            # Une requête concurrente a gagné: on réutilise sa date.
            winner = self.gateway.find_certificate(student_id, course_id)
            if winner is not None:
                return winner.issued_at, winner.id, True
            logger.warning(
                "Certificate conflict without stored row (student=%s, course=%s)", student_id, course_id
            )
            return now, None, False
        except UpstreamFailure as exc:
            logger.warning(
                "Certificate for student %s / course %s issued without a stored record: %s",
                student_id,
                course_id,
                exc,
            )
            return now, None, False

        logger.info("Certificat %s émis (student=%s, course=%s)", created.id, student_id, course_id)
        return created.issued_at, created.id, True
