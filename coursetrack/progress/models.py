"""Database models for learner progress tracking.

Cassandra table definitions for:
- Lesson progress: completed module set and lesson-level flag per user

Progress rows are created lazily by the first toggle or completion action
and are never deleted. Partitioning by (user_id, course_id) lets a single
query fetch every lesson row a learner has in one course.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from coursetrack.core.clock import ensure_utc_aware


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

# completed_modules is a set so that toggles are applied as collection deltas
LESSON_PROGRESS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.lesson_progress (
    user_id UUID,
    course_id TEXT,
    lesson_id UUID,
    completed_modules SET<UUID>,
    completed BOOLEAN,
    last_accessed_at TIMESTAMP,
    PRIMARY KEY ((user_id, course_id), lesson_id)
)
"""

PROGRESS_TABLES_CQL = [
    LESSON_PROGRESS_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


class LessonProgress:
    """Lesson progress entity for a specific user.

    ``completed`` is the lesson-level flag. It is set by the learner and may
    disagree with the module set; neither is corrected from the other.

    Attributes:
        user_id: User UUID
        course_id: Course identifier (partition key)
        lesson_id: Lesson UUID
        completed_modules: Module UUIDs ticked off by the learner
        completed: Lesson-level completion flag
        last_accessed_at: Last mutation timestamp
    """

    def __init__(
        self,
        user_id: UUID,
        course_id: str,
        lesson_id: UUID,
        completed_modules: set[UUID] | None = None,
        completed: bool = False,
        last_accessed_at: datetime | None = None,
    ):
        self.user_id = user_id
        self.course_id = course_id
        self.lesson_id = lesson_id
        self.completed_modules = set(completed_modules or ())
        self.completed = completed
        self.last_accessed_at = ensure_utc_aware(last_accessed_at)

    @classmethod
    def empty(cls, user_id: UUID, course_id: str, lesson_id: UUID) -> "LessonProgress":
        """Progress of a lesson the learner has not touched yet."""
        return cls(user_id=user_id, course_id=course_id, lesson_id=lesson_id)

    @classmethod
    def from_row(cls, row: Any) -> "LessonProgress":
        """Create LessonProgress instance from Cassandra row."""
        return cls(
            user_id=row.user_id,
            course_id=row.course_id,
            lesson_id=row.lesson_id,
            # Cassandra returns None for an empty set
            completed_modules=set(row.completed_modules or ()),
            completed=bool(row.completed),
            last_accessed_at=row.last_accessed_at,
        )

    def __repr__(self) -> str:
        return (
            f"<LessonProgress user={self.user_id} lesson={self.lesson_id} "
            f"modules={len(self.completed_modules)} completed={self.completed}>"
        )
