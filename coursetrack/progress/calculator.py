"""Progress percentage calculation.

Lesson progress counts modules; course progress counts lessons whose
lesson-level flag is set. The two bases differ on purpose: a lesson whose
modules are all ticked off does not count towards the course until the
learner marks the lesson itself as completed.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID


PERCENT_QUANTUM = Decimal("0.01")


def compute_lesson_progress(
    completed_modules: Iterable[UUID],
    completed: bool,
    module_ids: Iterable[UUID],
) -> int:
    """Percentage of a lesson's modules the learner has completed.

    Only ids that still belong to the lesson are counted, so the result
    stays within [0, 100]. A lesson without modules reports 100 when its
    lesson-level flag is set, else 0.
    """
    modules = set(module_ids)
    if not modules:
        return 100 if completed else 0

    done = len(set(completed_modules) & modules)
    ratio = Decimal(100 * done) / Decimal(len(modules))
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def compute_course_progress(completed_lessons: int, total_lessons: int) -> Decimal:
    """Percentage of a course's lessons flagged as completed (0 when empty)."""
    if total_lessons <= 0:
        return Decimal(0)
    completed_lessons = max(0, min(completed_lessons, total_lessons))
    ratio = Decimal(100 * completed_lessons) / Decimal(total_lessons)
    return ratio.quantize(PERCENT_QUANTUM, rounding=ROUND_HALF_UP)
