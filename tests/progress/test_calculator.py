"""Tests for lesson and course progress percentages."""

from decimal import Decimal
from uuid import uuid4

import pytest

from coursetrack.progress.calculator import (
    compute_course_progress,
    compute_lesson_progress,
)


class TestLessonProgress:
    """Module-count basis."""

    def test_no_modules_done(self) -> None:
        modules = [uuid4(), uuid4()]
        assert compute_lesson_progress(set(), False, modules) == 0

    def test_all_modules_done(self) -> None:
        modules = [uuid4(), uuid4(), uuid4()]
        assert compute_lesson_progress(set(modules), False, modules) == 100

    @pytest.mark.parametrize(
        "done,total,expected",
        [
            (1, 3, 33),
            (2, 3, 67),
            (1, 2, 50),
            (1, 8, 13),  # 12.5 rounds half up
            (5, 8, 63),  # 62.5 rounds half up
        ],
    )
    def test_rounding(self, done: int, total: int, expected: int) -> None:
        modules = [uuid4() for _ in range(total)]
        assert compute_lesson_progress(set(modules[:done]), False, modules) == expected

    def test_lesson_flag_does_not_affect_module_basis(self) -> None:
        """The lesson-level flag is ignored once the lesson has modules."""
        modules = [uuid4(), uuid4()]
        assert compute_lesson_progress(set(), True, modules) == 0

    def test_no_modules_uses_lesson_flag(self) -> None:
        assert compute_lesson_progress(set(), True, []) == 100
        assert compute_lesson_progress(set(), False, []) == 0

    def test_stale_module_ids_are_ignored(self) -> None:
        """Ids no longer in the lesson cannot push the percentage past 100."""
        modules = [uuid4(), uuid4()]
        completed = {modules[0], uuid4(), uuid4()}
        assert compute_lesson_progress(completed, False, modules) == 50


class TestCourseProgress:
    """Lesson-count basis."""

    def test_empty_course(self) -> None:
        assert compute_course_progress(0, 0) == Decimal(0)

    def test_half_completed(self) -> None:
        assert compute_course_progress(1, 2) == Decimal("50.00")

    def test_two_decimal_places(self) -> None:
        assert compute_course_progress(1, 3) == Decimal("33.33")
        assert compute_course_progress(2, 3) == Decimal("66.67")

    def test_clamped(self) -> None:
        assert compute_course_progress(5, 3) == Decimal("100.00")
