"""Database models for the course catalog.

Cassandra table definitions for:
- Lessons: ordered per course (course identifier is the interest-list key)
- Lesson modules: the smallest completable units, ordered per lesson
- Assignments: by id and by course (dual-write pattern)

The catalog is authored elsewhere; this core only reads it.
"""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from coursetrack.core.clock import ensure_utc_aware


class AssignmentType(str, Enum):
    """Kind of work an assignment expects, discriminating the answers payload."""

    ESSAY = "essay"
    QUIZ = "quiz"
    CODING = "coding"


class SubmissionFormat(str, Enum):
    """File formats a tutor may accept for an assignment."""

    PDF = "PDF"
    DOC = "DOC"
    DOCX = "DOCX"
    TXT = "TXT"
    ZIP = "ZIP"
    LINK = "LINK"
    IMAGE = "IMAGE"


# File extensions satisfying each format (LINK accepts any URL)
FORMAT_EXTENSIONS: dict[SubmissionFormat, frozenset[str]] = {
    SubmissionFormat.PDF: frozenset({".pdf"}),
    SubmissionFormat.DOC: frozenset({".doc"}),
    SubmissionFormat.DOCX: frozenset({".docx"}),
    SubmissionFormat.TXT: frozenset({".txt", ".md"}),
    SubmissionFormat.ZIP: frozenset({".zip"}),
    SubmissionFormat.IMAGE: frozenset({".png", ".jpg", ".jpeg", ".gif", ".webp"}),
    SubmissionFormat.LINK: frozenset(),
}

DEFAULT_MAX_SCORE = 100


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

LESSON_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.lessons (
    id UUID PRIMARY KEY,
    course_id TEXT,
    title TEXT,
    order_index INT
)
"""

# Lookup: lessons of a course in display order
LESSONS_BY_COURSE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.lessons_by_course (
    course_id TEXT,
    order_index INT,
    lesson_id UUID,
    title TEXT,
    PRIMARY KEY (course_id, order_index, lesson_id)
) WITH CLUSTERING ORDER BY (order_index ASC, lesson_id ASC)
"""

LESSON_MODULES_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.lesson_modules (
    lesson_id UUID,
    order_index INT,
    module_id UUID,
    title TEXT,
    resources LIST<TEXT>,
    PRIMARY KEY (lesson_id, order_index, module_id)
) WITH CLUSTERING ORDER BY (order_index ASC, module_id ASC)
"""

ASSIGNMENT_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.assignments (
    id UUID PRIMARY KEY,
    course_id TEXT,
    lesson_id UUID,
    title TEXT,
    description TEXT,
    assignment_type TEXT,
    due_date TIMESTAMP,
    max_score INT,
    submission_formats LIST<TEXT>,
    created_at TIMESTAMP
)
"""

ASSIGNMENTS_BY_COURSE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.assignments_by_course (
    course_id TEXT,
    assignment_id UUID,
    lesson_id UUID,
    title TEXT,
    description TEXT,
    assignment_type TEXT,
    due_date TIMESTAMP,
    max_score INT,
    submission_formats LIST<TEXT>,
    created_at TIMESTAMP,
    PRIMARY KEY (course_id, assignment_id)
)
"""

CATALOG_TABLES_CQL = [
    LESSON_TABLE_CQL,
    LESSONS_BY_COURSE_TABLE_CQL,
    LESSON_MODULES_TABLE_CQL,
    ASSIGNMENT_TABLE_CQL,
    ASSIGNMENTS_BY_COURSE_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


class Lesson:
    """A lesson inside a course.

    Attributes:
        id: Lesson UUID
        course_id: Course identifier
        title: Lesson title
        order_index: Position within the course
    """

    def __init__(
        self,
        id: UUID,
        course_id: str,
        title: str = "",
        order_index: int = 0,
    ):
        self.id = id
        self.course_id = course_id
        self.title = title
        self.order_index = order_index

    @classmethod
    def from_row(cls, row: Any) -> "Lesson":
        """Create Lesson from a ``lessons`` row."""
        return cls(
            id=row.id,
            course_id=row.course_id,
            title=row.title or "",
            order_index=row.order_index or 0,
        )

    @classmethod
    def from_course_row(cls, row: Any) -> "Lesson":
        """Create Lesson from a ``lessons_by_course`` row."""
        return cls(
            id=row.lesson_id,
            course_id=row.course_id,
            title=row.title or "",
            order_index=row.order_index or 0,
        )

    def __repr__(self) -> str:
        return f"<Lesson {self.id} course={self.course_id} #{self.order_index}>"


class LessonModule:
    """A module: the smallest unit a learner ticks off inside a lesson."""

    def __init__(
        self,
        id: UUID,
        lesson_id: UUID,
        title: str = "",
        resources: list[str] | None = None,
        order_index: int = 0,
    ):
        self.id = id
        self.lesson_id = lesson_id
        self.title = title
        self.resources = list(resources or [])
        self.order_index = order_index

    @classmethod
    def from_row(cls, row: Any) -> "LessonModule":
        """Create LessonModule from a ``lesson_modules`` row."""
        return cls(
            id=row.module_id,
            lesson_id=row.lesson_id,
            title=row.title or "",
            resources=row.resources,
            order_index=row.order_index or 0,
        )

    def __repr__(self) -> str:
        return f"<LessonModule {self.id} lesson={self.lesson_id}>"


class Assignment:
    """Graded work attached to a course, optionally to one of its lessons.

    Attributes:
        id: Assignment UUID
        course_id: Course identifier
        lesson_id: Optional lesson UUID
        title: Assignment title
        description: Instructions
        assignment_type: essay, quiz or coding
        due_date: Optional deadline
        max_score: Upper bound for grading (inclusive)
        submission_formats: Accepted file formats (empty = any)
        created_at: Creation timestamp
    """

    def __init__(
        self,
        id: UUID,
        course_id: str,
        title: str = "",
        description: str = "",
        assignment_type: str = AssignmentType.ESSAY.value,
        lesson_id: UUID | None = None,
        due_date: datetime | None = None,
        max_score: int = DEFAULT_MAX_SCORE,
        submission_formats: list[str] | None = None,
        created_at: datetime | None = None,
    ):
        self.id = id
        self.course_id = course_id
        self.lesson_id = lesson_id
        self.title = title
        self.description = description
        self.assignment_type = assignment_type
        self.due_date = ensure_utc_aware(due_date)
        self.max_score = max_score
        self.submission_formats = [f.upper() for f in submission_formats or []]
        self.created_at = ensure_utc_aware(created_at)

    @classmethod
    def from_row(cls, row: Any) -> "Assignment":
        """Create Assignment from an ``assignments`` row."""
        return cls._from_columns(row.id, row)

    @classmethod
    def from_course_row(cls, row: Any) -> "Assignment":
        """Create Assignment from an ``assignments_by_course`` row."""
        return cls._from_columns(row.assignment_id, row)

    @classmethod
    def _from_columns(cls, assignment_id: UUID, row: Any) -> "Assignment":
        return cls(
            id=assignment_id,
            course_id=row.course_id,
            lesson_id=row.lesson_id,
            title=row.title or "",
            description=row.description or "",
            assignment_type=(row.assignment_type or AssignmentType.ESSAY.value).lower(),
            due_date=row.due_date,
            max_score=row.max_score if row.max_score is not None else DEFAULT_MAX_SCORE,
            submission_formats=row.submission_formats,
            created_at=row.created_at,
        )

    def __repr__(self) -> str:
        return f"<Assignment {self.id} course={self.course_id} due={self.due_date}>"
