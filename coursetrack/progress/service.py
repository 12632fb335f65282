"""Learner progress tracking service layer.

Business logic for:
- Module toggles (atomic set deltas on the completed module set)
- Lesson-level completion flag
- Lesson and course progress aggregation
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from coursetrack.core.database.store import CassandraService
from coursetrack.core.errors import PersistenceError

from .calculator import compute_course_progress, compute_lesson_progress
from .models import LessonProgress
from .schemas import (
    CourseProgressResponse,
    LessonProgressResponse,
    LessonProgressSummary,
)


if TYPE_CHECKING:
    from cassandra.cluster import Session

    from coursetrack.courses.models import Lesson
    from coursetrack.courses.service import CatalogService
    from coursetrack.enrollment.service import EnrollmentService

logger = structlog.get_logger(__name__)


class ProgressService(CassandraService):
    """Service for learner progress tracking."""

    def __init__(
        self,
        session: "Session",
        keyspace: str,
        catalog: "CatalogService",
        enrollment: "EnrollmentService",
    ):
        """Initialize with Cassandra session and the services it reads from."""
        self.catalog = catalog
        self.enrollment = enrollment
        super().__init__(session, keyspace)

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient execution."""
        self._get_lesson_progress = self.session.prepare(f"""
            SELECT user_id, course_id, lesson_id, completed_modules, completed,
                   last_accessed_at
            FROM {self.keyspace}.lesson_progress
            WHERE user_id = ? AND course_id = ? AND lesson_id = ?
        """)

        self._get_course_lesson_progress = self.session.prepare(f"""
            SELECT user_id, course_id, lesson_id, completed_modules, completed,
                   last_accessed_at
            FROM {self.keyspace}.lesson_progress
            WHERE user_id = ? AND course_id = ?
        """)

        # Collection deltas are merged by the store, never read-then-written
        self._add_completed_module = self.session.prepare(f"""
            UPDATE {self.keyspace}.lesson_progress
            SET completed_modules = completed_modules + ?, last_accessed_at = ?
            WHERE user_id = ? AND course_id = ? AND lesson_id = ?
        """)

        self._remove_completed_module = self.session.prepare(f"""
            UPDATE {self.keyspace}.lesson_progress
            SET completed_modules = completed_modules - ?, last_accessed_at = ?
            WHERE user_id = ? AND course_id = ? AND lesson_id = ?
        """)

        self._set_lesson_completed = self.session.prepare(f"""
            UPDATE {self.keyspace}.lesson_progress
            SET completed = ?, last_accessed_at = ?
            WHERE user_id = ? AND course_id = ? AND lesson_id = ?
        """)

    # ==========================================================================
    # Mutations
    # ==========================================================================

    async def toggle_module(
        self,
        user_id: UUID,
        lesson_id: UUID,
        module_id: UUID,
        completed: bool,
        now: datetime | None = None,
    ) -> LessonProgress:
        """Add or remove a module from the learner's completed set.

        Idempotent: adding a present id or removing an absent one is a no-op
        on the set. The lesson-level flag is left untouched.

        Raises:
            NotFoundError: Unknown lesson, or module not part of the lesson
            AccessDeniedError: Learner not enrolled in the lesson's course
            PersistenceError: The delta was not applied
        """
        lesson = await self.catalog.get_lesson(lesson_id)
        await self.enrollment.require_enrollment(user_id, lesson.course_id)
        await self.catalog.get_module(lesson_id, module_id)

        before = await self._load_progress(
            user_id, lesson.course_id, lesson_id
        ) or LessonProgress.empty(user_id, lesson.course_id, lesson_id)
        accessed_at = now or datetime.now(UTC)

        statement = (
            self._add_completed_module if completed else self._remove_completed_module
        )
        await self._write(
            statement,
            [{module_id}, accessed_at, user_id, lesson.course_id, lesson_id],
            operation="toggle_module",
        )

        logger.info(
            "module_toggled",
            user_id=str(user_id),
            lesson_id=str(lesson_id),
            module_id=str(module_id),
            completed=completed,
        )

        modules = (
            before.completed_modules | {module_id}
            if completed
            else before.completed_modules - {module_id}
        )
        return await self._reload_after_write(
            LessonProgress(
                user_id=user_id,
                course_id=lesson.course_id,
                lesson_id=lesson_id,
                completed_modules=modules,
                completed=before.completed,
                last_accessed_at=accessed_at,
            )
        )

    async def set_lesson_completed(
        self,
        user_id: UUID,
        lesson_id: UUID,
        completed: bool,
        now: datetime | None = None,
    ) -> LessonProgress:
        """Set the lesson-level completion flag, independent of module state.

        Raises:
            NotFoundError: Unknown lesson
            AccessDeniedError: Learner not enrolled in the lesson's course
            PersistenceError: The flag was not written
        """
        lesson = await self.catalog.get_lesson(lesson_id)
        await self.enrollment.require_enrollment(user_id, lesson.course_id)

        before = await self._load_progress(
            user_id, lesson.course_id, lesson_id
        ) or LessonProgress.empty(user_id, lesson.course_id, lesson_id)
        accessed_at = now or datetime.now(UTC)

        await self._write(
            self._set_lesson_completed,
            [completed, accessed_at, user_id, lesson.course_id, lesson_id],
            operation="set_lesson_completed",
        )

        logger.info(
            "lesson_completion_set",
            user_id=str(user_id),
            lesson_id=str(lesson_id),
            completed=completed,
        )

        return await self._reload_after_write(
            LessonProgress(
                user_id=user_id,
                course_id=lesson.course_id,
                lesson_id=lesson_id,
                completed_modules=before.completed_modules,
                completed=completed,
                last_accessed_at=accessed_at,
            )
        )

    async def _reload_after_write(self, applied: LessonProgress) -> LessonProgress:
        """Read back a row that was just written.

        The write has already been applied: a failed read returns ``applied``,
        the pre-write row with the mutation applied locally, instead of
        reporting the mutation as failed.
        """
        try:
            progress = await self._load_progress(
                applied.user_id, applied.course_id, applied.lesson_id
            )
        except PersistenceError as e:
            logger.warning(
                "progress_reload_failed",
                user_id=str(applied.user_id),
                lesson_id=str(applied.lesson_id),
                error=e.message,
            )
            return applied
        return progress or applied

    # ==========================================================================
    # Queries
    # ==========================================================================

    async def _load_progress(
        self, user_id: UUID, course_id: str, lesson_id: UUID
    ) -> LessonProgress | None:
        result = await self._read(
            self._get_lesson_progress, [user_id, course_id, lesson_id]
        )
        row = result.one()
        return LessonProgress.from_row(row) if row else None

    async def _load_course_progress(
        self, user_id: UUID, course_id: str
    ) -> dict[UUID, LessonProgress]:
        rows = await self._read(self._get_course_lesson_progress, [user_id, course_id])
        return {row.lesson_id: LessonProgress.from_row(row) for row in rows}

    async def get_lesson_progress(
        self, user_id: UUID, lesson_id: UUID
    ) -> LessonProgressResponse:
        """Get the learner's progress for one lesson (module-count basis)."""
        lesson = await self.catalog.get_lesson(lesson_id)
        await self.enrollment.require_enrollment(user_id, lesson.course_id)

        module_ids = [m.id for m in await self.catalog.list_lesson_modules(lesson_id)]
        progress = await self._load_progress(
            user_id, lesson.course_id, lesson_id
        ) or LessonProgress.empty(user_id, lesson.course_id, lesson_id)

        percentage = compute_lesson_progress(
            progress.completed_modules, progress.completed, module_ids
        )
        return LessonProgressResponse.from_entity(progress, module_ids, percentage)

    async def get_course_progress(
        self, user_id: UUID, course_id: str
    ) -> CourseProgressResponse:
        """Get the learner's progress for an enrolled course.

        Raises:
            AccessDeniedError: Learner not enrolled in the course
        """
        await self.enrollment.require_enrollment(user_id, course_id)
        return await self.course_progress_for(user_id, course_id)

    async def course_progress_for(
        self,
        user_id: UUID,
        course_id: str,
        lessons: list["Lesson"] | None = None,
    ) -> CourseProgressResponse:
        """Compute course progress without an access check.

        Counts lesson-level completion flags over the course's lessons;
        module state is not consulted. Callers that already hold the
        lesson list (rosters, dashboards) pass it in.
        """
        if lessons is None:
            lessons = await self.catalog.list_course_lessons(course_id)
        progress_by_lesson = await self._load_course_progress(user_id, course_id)

        completed_lessons = sum(
            1
            for lesson in lessons
            if lesson.id in progress_by_lesson and progress_by_lesson[lesson.id].completed
        )
        return CourseProgressResponse(
            course_id=course_id,
            percentage=compute_course_progress(completed_lessons, len(lessons)),
            completed_lessons=completed_lessons,
            total_lessons=len(lessons),
        )

    async def get_course_lessons(
        self, user_id: UUID, course_id: str
    ) -> list[LessonProgressSummary]:
        """List an enrolled course's lessons with the learner's progress on each."""
        await self.enrollment.require_enrollment(user_id, course_id)

        lessons = await self.catalog.list_course_lessons(course_id)
        progress_by_lesson = await self._load_course_progress(user_id, course_id)

        summaries = []
        for lesson in lessons:
            module_ids = [m.id for m in await self.catalog.list_lesson_modules(lesson.id)]
            progress = progress_by_lesson.get(lesson.id) or LessonProgress.empty(
                user_id, course_id, lesson.id
            )
            summaries.append(
                LessonProgressSummary(
                    lesson_id=lesson.id,
                    title=lesson.title,
                    order_index=lesson.order_index,
                    total_modules=len(module_ids),
                    completed_modules=len(progress.completed_modules & set(module_ids)),
                    percentage=compute_lesson_progress(
                        progress.completed_modules, progress.completed, module_ids
                    ),
                    completed=progress.completed,
                )
            )
        return summaries
