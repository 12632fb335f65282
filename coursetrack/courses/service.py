"""Course catalog read service.

Business logic for:
- Lesson lookup and per-course lesson listing (display order)
- Module listing per lesson
- Assignment lookup and per-course assignment listing
"""

from uuid import UUID

import structlog

from coursetrack.core.database.store import CassandraService
from coursetrack.core.errors import NotFoundError

from .models import Assignment, Lesson, LessonModule


logger = structlog.get_logger(__name__)


class CatalogService(CassandraService):
    """Service for lessons, modules and assignments."""

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient execution."""
        # Lessons
        self._get_lesson = self.session.prepare(f"""
            SELECT id, course_id, title, order_index
            FROM {self.keyspace}.lessons
            WHERE id = ?
        """)

        self._get_lessons_by_course = self.session.prepare(f"""
            SELECT course_id, order_index, lesson_id, title
            FROM {self.keyspace}.lessons_by_course
            WHERE course_id = ?
        """)

        # Modules
        self._get_modules_by_lesson = self.session.prepare(f"""
            SELECT lesson_id, order_index, module_id, title, resources
            FROM {self.keyspace}.lesson_modules
            WHERE lesson_id = ?
        """)

        # Assignments
        self._get_assignment = self.session.prepare(f"""
            SELECT id, course_id, lesson_id, title, description, assignment_type,
                   due_date, max_score, submission_formats, created_at
            FROM {self.keyspace}.assignments
            WHERE id = ?
        """)

        self._get_assignments_by_course = self.session.prepare(f"""
            SELECT course_id, assignment_id, lesson_id, title, description,
                   assignment_type, due_date, max_score, submission_formats,
                   created_at
            FROM {self.keyspace}.assignments_by_course
            WHERE course_id = ?
        """)

    # ==========================================================================
    # Lessons & Modules
    # ==========================================================================

    async def get_lesson(self, lesson_id: UUID) -> Lesson:
        """Get lesson by ID.

        Raises:
            NotFoundError: If the lesson does not exist
        """
        result = await self._read(self._get_lesson, [lesson_id])
        row = result.one()
        if not row:
            raise NotFoundError(f"Lesson {lesson_id} not found", "lesson_not_found")
        return Lesson.from_row(row)

    async def list_course_lessons(self, course_id: str) -> list[Lesson]:
        """List a course's lessons in display order."""
        rows = await self._read(self._get_lessons_by_course, [course_id])
        return [Lesson.from_course_row(row) for row in rows]

    async def list_lesson_modules(self, lesson_id: UUID) -> list[LessonModule]:
        """List a lesson's modules in display order."""
        rows = await self._read(self._get_modules_by_lesson, [lesson_id])
        return [LessonModule.from_row(row) for row in rows]

    async def get_module(self, lesson_id: UUID, module_id: UUID) -> LessonModule:
        """Get a module that must belong to the given lesson.

        Raises:
            NotFoundError: If the lesson has no such module
        """
        for module in await self.list_lesson_modules(lesson_id):
            if module.id == module_id:
                return module
        logger.debug(
            "module_not_in_lesson",
            lesson_id=str(lesson_id),
            module_id=str(module_id),
        )
        raise NotFoundError(
            f"Module {module_id} not found in lesson {lesson_id}", "module_not_found"
        )

    # ==========================================================================
    # Assignments
    # ==========================================================================

    async def get_assignment(self, assignment_id: UUID) -> Assignment:
        """Get assignment by ID.

        Raises:
            NotFoundError: If the assignment does not exist
        """
        result = await self._read(self._get_assignment, [assignment_id])
        row = result.one()
        if not row:
            raise NotFoundError(
                f"Assignment {assignment_id} not found", "assignment_not_found"
            )
        return Assignment.from_row(row)

    async def list_course_assignments(self, course_id: str) -> list[Assignment]:
        """List every assignment of a course."""
        rows = await self._read(self._get_assignments_by_course, [course_id])
        return [Assignment.from_course_row(row) for row in rows]

    async def list_assignments_for_courses(
        self, course_ids: set[str]
    ) -> list[Assignment]:
        """List assignments across several courses, ordered by due date.

        Undated assignments sort last.
        """
        assignments: list[Assignment] = []
        for course_id in sorted(course_ids):
            assignments.extend(await self.list_course_assignments(course_id))
        return sort_by_due_date(assignments)


def sort_by_due_date(assignments: list[Assignment]) -> list[Assignment]:
    """Order assignments by due date, undated last, then by title."""
    return sorted(
        assignments,
        key=lambda a: (
            a.due_date is None,
            a.due_date.timestamp() if a.due_date else 0.0,
            a.title.lower(),
        ),
    )
