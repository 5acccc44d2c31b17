import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Sequence

from app.core.errors import ConflictError, ForbiddenError, NotFoundError
from app.models.course.assignment_model import CourseAssignment
from app.models.course.chapter_model import Chapter
from app.models.progress.progress_model import Progress
from app.services.course_gateway import CourseProgressGateway

logger = logging.getLogger(__name__)

NOT_ASSIGNED_MESSAGE = "You are not assigned to this course"


class ChapterState(str, enum.Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"
    COMPLETED = "completed"


@dataclass(slots=True)
class CourseProgress:
    total_chapters: int
    completed_chapters: int
    completion_percentage: int

    def to_dict(self) -> dict[str, int]:
        return {
            "totalChapters": self.total_chapters,
            "completedChapters": self.completed_chapters,
            "completionPercentage": self.completion_percentage,
        }


def completion_percentage(completed: int, total: int) -> int:
    """``round(completed / total * 100)`` rounding halves up; 0 for an empty course."""
    if total <= 0:
        return 0
    ratio = Decimal(completed * 100) / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def missing_predecessors(earlier_chapters: Iterable[Chapter], completed_ids: set[int]) -> list[int]:
    """Sequence numbers of earlier chapters not yet completed, ascending."""
    return sorted(
        chapter.sequence_order for chapter in earlier_chapters if chapter.id not in completed_ids
    )


def derive_chapter_states(
    chapters: Sequence[Chapter], completed_ids: set[int]
) -> list[tuple[Chapter, ChapterState]]:
    """Annotate chapters with their lock state.

    A chapter is unlocked once every chapter with a smaller ``sequence_order``
    in the same course is completed. Nothing here is persisted: the state is
    recomputed from the chapter list and the completed set on every read.
    """
    ordered = sorted(chapters, key=lambda c: (c.sequence_order, c.id))
    states: list[tuple[Chapter, ChapterState]] = []
    for chapter in ordered:
        if chapter.id in completed_ids:
            state = ChapterState.COMPLETED
        else:
            earlier = [c for c in ordered if c.sequence_order < chapter.sequence_order]
            state = ChapterState.LOCKED if missing_predecessors(earlier, completed_ids) else ChapterState.UNLOCKED
        states.append((chapter, state))
    return states


class ProgressService:
    """Chapter unlocking, completion recording and completion percentages."""

    def __init__(self, gateway: CourseProgressGateway):
        self.gateway = gateway

    def is_assigned(self, student_id: int, course_id: int) -> bool:
        return self.gateway.find_assignment(course_id, student_id) is not None

    def ensure_assigned(self, student_id: int, course_id: int, message: str = NOT_ASSIGNED_MESSAGE) -> None:
        if not self.is_assigned(student_id, course_id):
            raise ForbiddenError(message)

    def compute_course_progress(self, student_id: int, course_id: int) -> CourseProgress:
        total = self.gateway.count_chapters(course_id)
        # Les complétions de chapitres supprimés restent comptées.
        completed = self.gateway.count_progress(student_id, course_id)
        return CourseProgress(
            total_chapters=total,
            completed_chapters=completed,
            completion_percentage=completion_percentage(completed, total),
        )

    def complete_chapter(self, student_id: int, chapter_id: int) -> tuple[Progress, Chapter]:
        """Record the completion of ``chapter_id``.

        Checks run in a fixed order: the chapter must exist, the student must
        be assigned to its course, the chapter must not already be completed,
        and when ``sequence_order > 1`` every existing chapter with a smaller
        sequence number must be completed first.
        """
        chapter = self.gateway.find_chapter(chapter_id)
        if chapter is None:
            raise NotFoundError("Chapter not found")

        self.ensure_assigned(student_id, chapter.course_id)

        if self.gateway.find_progress(student_id, chapter_id) is not None:
            raise ConflictError("Chapter is already completed")

        if chapter.sequence_order > 1:
            earlier = self.gateway.list_chapters_before(chapter.course_id, chapter.sequence_order)
            if earlier:
                completed_ids = self.gateway.list_completed_chapter_ids(student_id, chapter.course_id)
                missing = missing_predecessors(earlier, completed_ids)
                if missing:
                    logger.info(
                        "Chapitre %s verrouillé pour l'étudiant %s (manquants: %s)",
                        chapter_id,
                        student_id,
                        missing,
                    )
                    raise ForbiddenError(
                        "You must complete previous chapters first. "
                        f"Missing chapters with sequence_order: {', '.join(str(s) for s in missing)}",
                        data={"missingSequenceOrders": missing},
                    )

        progress = self.gateway.insert_progress(
            student_id=student_id,
            course_id=chapter.course_id,
            chapter_id=chapter_id,
            completed_at=datetime.now(timezone.utc),
        )
        logger.info("Chapitre %s complété par l'étudiant %s", chapter_id, student_id)
        return progress, chapter

    def chapter_states(self, student_id: int, course_id: int) -> list[tuple[Chapter, ChapterState]]:
        self.ensure_assigned(student_id, course_id, "You do not have access to this course")
        chapters = self.gateway.list_chapters(course_id)
        completed_ids = self.gateway.list_completed_chapter_ids(student_id, course_id)
        return derive_chapter_states(chapters, completed_ids)

    def completed_chapter_ids(self, student_id: int, course_id: int) -> list[int]:
        self.ensure_assigned(student_id, course_id)
        return sorted(self.gateway.list_completed_chapter_ids(student_id, course_id))

    def progress_overview(self, student_id: int) -> list[tuple[CourseAssignment, CourseProgress]]:
        """Progress summary for every course assigned to the student."""
        overview: list[tuple[CourseAssignment, CourseProgress]] = []
        for assignment in self.gateway.list_assignments_for_student(student_id):
            overview.append((assignment, self.compute_course_progress(student_id, assignment.course_id)))
        return overview
