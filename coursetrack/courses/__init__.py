"""Course catalog: lessons, modules and assignments."""

from .models import (
    CATALOG_TABLES_CQL,
    Assignment,
    AssignmentType,
    Lesson,
    LessonModule,
    SubmissionFormat,
)


__all__ = [
    "CATALOG_TABLES_CQL",
    "Assignment",
    "AssignmentType",
    "Lesson",
    "LessonModule",
    "SubmissionFormat",
]
