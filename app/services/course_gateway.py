"""Persistence gateway consumed by the progression and certificate engines.

The engines never touch the ORM session directly: they receive a
:class:`CourseProgressGateway` built from the request's session. Every read is
wrapped so that driver errors surface as :class:`UpstreamFailure`, and inserts
translate uniqueness violations into :class:`ConflictError`, the database
constraint being the authoritative guard against duplicate rows.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, UpstreamFailure
from app.models.course.assignment_model import CourseAssignment
from app.models.course.chapter_model import Chapter
from app.models.course.course_model import Course
from app.models.progress.certificate_model import Certificate
from app.models.progress.progress_model import Progress
from app.models.user.user_model import User

logger = logging.getLogger(__name__)


class CourseProgressGateway:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, failure_message: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("%s: %s", failure_message, exc)
            raise UpstreamFailure(failure_message) from exc

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def find_user(self, user_id: int) -> User | None:
        with self._guard("Failed to fetch user"):
            return self.db.get(User, user_id)

    def find_course(self, course_id: int) -> Course | None:
        with self._guard("Failed to fetch course"):
            return self.db.get(Course, course_id)

    def list_courses(self, course_ids: list[int]) -> list[Course]:
        if not course_ids:
            return []
        with self._guard("Failed to fetch courses"):
            return list(
                self.db.scalars(select(Course).where(Course.id.in_(course_ids)).order_by(Course.id.asc()))
            )

    def find_chapter(self, chapter_id: int) -> Chapter | None:
        with self._guard("Failed to fetch chapter"):
            return self.db.get(Chapter, chapter_id)

    def find_assignment(self, course_id: int, student_id: int) -> CourseAssignment | None:
        with self._guard("Failed to fetch course assignment"):
            return self.db.scalar(
                select(CourseAssignment).where(
                    CourseAssignment.course_id == course_id,
                    CourseAssignment.student_id == student_id,
                )
            )

    def list_assignments_for_student(self, student_id: int) -> list[CourseAssignment]:
        with self._guard("Failed to fetch course assignments"):
            return list(
                self.db.scalars(
                    select(CourseAssignment)
                    .where(CourseAssignment.student_id == student_id)
                    .order_by(CourseAssignment.assigned_at.asc(), CourseAssignment.id.asc())
                )
            )

    # ------------------------------------------------------------------
    # Chapters
    # ------------------------------------------------------------------
    def count_chapters(self, course_id: int) -> int:
        with self._guard("Failed to fetch course chapters"):
            return self.db.scalar(
                select(func.count(Chapter.id)).where(Chapter.course_id == course_id)
            ) or 0

    def list_chapters(self, course_id: int) -> list[Chapter]:
        with self._guard("Failed to fetch chapters"):
            return list(
                self.db.scalars(
                    select(Chapter)
                    .where(Chapter.course_id == course_id)
                    .order_by(Chapter.sequence_order.asc())
                )
            )

    def list_chapters_before(self, course_id: int, sequence_order: int) -> list[Chapter]:
        with self._guard("Error validating sequential completion"):
            return list(
                self.db.scalars(
                    select(Chapter)
                    .where(Chapter.course_id == course_id, Chapter.sequence_order < sequence_order)
                    .order_by(Chapter.sequence_order.asc())
                )
            )

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------
    def find_progress(self, student_id: int, chapter_id: int) -> Progress | None:
        with self._guard("Error checking progress"):
            return self.db.scalar(
                select(Progress).where(
                    Progress.student_id == student_id,
                    Progress.chapter_id == chapter_id,
                )
            )

    def list_completed_chapter_ids(self, student_id: int, course_id: int) -> set[int]:
        with self._guard("Failed to fetch completed chapters"):
            return set(
                self.db.scalars(
                    select(Progress.chapter_id).where(
                        Progress.student_id == student_id,
                        Progress.course_id == course_id,
                    )
                )
            )

    def count_progress(self, student_id: int, course_id: int) -> int:
        with self._guard("Failed to fetch course progress"):
            return self.db.scalar(
                select(func.count(Progress.id)).where(
                    Progress.student_id == student_id,
                    Progress.course_id == course_id,
                )
            ) or 0

    def insert_progress(
        self,
        student_id: int,
        course_id: int,
        chapter_id: int,
        completed_at: datetime,
    ) -> Progress:
        progress = Progress(
            student_id=student_id,
            course_id=course_id,
            chapter_id=chapter_id,
            completed_at=completed_at,
        )
        self.db.add(progress)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.info(
                "Progression déjà enregistrée (student=%s, chapter=%s)", student_id, chapter_id
            )
            raise ConflictError("Chapter is already completed") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to mark chapter as completed: %s", exc)
            raise UpstreamFailure("Failed to mark chapter as completed") from exc
        self.db.refresh(progress)
        return progress

    # ------------------------------------------------------------------
    # Certificates
    # ------------------------------------------------------------------
    def find_certificate(self, student_id: int, course_id: int) -> Certificate | None:
        with self._guard("Failed to fetch certificate"):
            return self.db.scalar(
                select(Certificate).where(
                    Certificate.student_id == student_id,
                    Certificate.course_id == course_id,
                )
            )

    def insert_certificate(self, student_id: int, course_id: int, issued_at: datetime) -> Certificate:
        certificate = Certificate(student_id=student_id, course_id=course_id, issued_at=issued_at)
        self.db.add(certificate)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError("Certificate already issued") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise UpstreamFailure("Failed to store certificate") from exc
        self.db.refresh(certificate)
        return certificate
