"""Learner progress tracking module.

Provides:
- Module toggles and lesson-level completion
- Lesson progress (module-count basis)
- Course progress (lesson-count basis)
"""

from .calculator import compute_course_progress, compute_lesson_progress
from .models import PROGRESS_TABLES_CQL, LessonProgress


__all__ = [
    "PROGRESS_TABLES_CQL",
    "LessonProgress",
    "compute_course_progress",
    "compute_lesson_progress",
]
