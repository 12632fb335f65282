"""Tests for dashboard aggregation."""

from datetime import timedelta
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest

from coursetrack.courses.models import Assignment, Lesson
from coursetrack.dashboard.service import DashboardService
from coursetrack.enrollment.models import UserProfile
from coursetrack.progress.schemas import CourseProgressResponse
from coursetrack.submissions.status import DueUrgency


def course_progress(course_id: str, completed: int, total: int) -> CourseProgressResponse:
    return CourseProgressResponse(
        course_id=course_id,
        percentage=Decimal(100 * completed / total).quantize(Decimal("0.01"))
        if total
        else Decimal(0),
        completed_lessons=completed,
        total_lessons=total,
    )


@pytest.fixture
def enrollment():
    enrollment = Mock()
    enrollment.get_accessible_courses = AsyncMock(return_value={"python", "web"})
    enrollment.list_learners = AsyncMock(return_value=[])
    return enrollment


@pytest.fixture
def catalog():
    catalog = Mock()
    catalog.list_assignments_for_courses = AsyncMock(return_value=[])
    catalog.list_course_lessons = AsyncMock(return_value=[])
    return catalog


@pytest.fixture
def progress():
    progress = Mock()
    progress.course_progress_for = AsyncMock()
    return progress


@pytest.fixture
def submissions():
    submissions = Mock()
    submissions.count_submitted = AsyncMock(return_value=0)
    submissions.list_course_submission_refs = AsyncMock(return_value=[])
    return submissions


@pytest.fixture
def service(enrollment, catalog, progress, submissions) -> DashboardService:
    return DashboardService(
        enrollment=enrollment,
        catalog=catalog,
        progress=progress,
        submissions=submissions,
    )


class TestLearnerDashboard:
    @pytest.mark.asyncio
    async def test_rollup(self, service, catalog, progress, submissions, user_id):
        progress.course_progress_for.side_effect = [
            course_progress("python", 1, 4),
            course_progress("web", 2, 2),
        ]
        catalog.list_assignments_for_courses.return_value = [
            Assignment(id=uuid4(), course_id="python"),
            Assignment(id=uuid4(), course_id="web"),
            Assignment(id=uuid4(), course_id="web"),
        ]
        submissions.count_submitted.return_value = 1

        dashboard = await service.get_learner_dashboard(user_id)

        assert dashboard.enrolled_courses == 2
        assert dashboard.total_lessons == 6
        assert dashboard.completed_lessons == 3
        assert dashboard.pending_assignments == 2
        assert dashboard.overall_progress == Decimal("50.00")
        assert [c.course_id for c in dashboard.courses] == ["python", "web"]

    @pytest.mark.asyncio
    async def test_no_courses(self, service, enrollment, user_id):
        enrollment.get_accessible_courses.return_value = set()

        dashboard = await service.get_learner_dashboard(user_id)

        assert dashboard.enrolled_courses == 0
        assert dashboard.overall_progress == Decimal(0)
        assert dashboard.pending_assignments == 0


class TestTutorDashboard:
    @pytest.mark.asyncio
    async def test_counts_and_upcoming(
        self, service, catalog, submissions, tutor_id, now
    ):
        submissions.list_course_submission_refs.side_effect = [
            [SimpleNamespace(graded_at=None), SimpleNamespace(graded_at=now)],
            [SimpleNamespace(graded_at=None)],
        ]
        soon = Assignment(
            id=uuid4(), course_id="web", title="Soon", due_date=now + timedelta(hours=12)
        )
        later = Assignment(
            id=uuid4(), course_id="python", title="Later", due_date=now + timedelta(days=10)
        )
        past = Assignment(
            id=uuid4(), course_id="web", title="Past", due_date=now - timedelta(days=1)
        )
        undated = Assignment(id=uuid4(), course_id="web", title="Undated")
        catalog.list_assignments_for_courses.return_value = [later, past, undated, soon]

        dashboard = await service.get_tutor_dashboard(tutor_id, now)

        assert dashboard.courses == ["python", "web"]
        assert dashboard.total_submissions == 3
        assert dashboard.ungraded_submissions == 2
        assert [a.title for a in dashboard.upcoming_assignments] == ["Soon", "Later"]
        assert dashboard.upcoming_assignments[0].urgency == DueUrgency.CLOSING_SOON
        assert dashboard.upcoming_assignments[1].urgency == DueUrgency.OPEN


class TestRoster:
    @pytest.mark.asyncio
    async def test_only_shared_courses(
        self, service, enrollment, catalog, progress, tutor_id
    ):
        learner = UserProfile(
            id=uuid4(),
            name="Ana Lima",
            email="ana@example.com",
            courses_of_interest={"web", "design"},
        )
        enrollment.get_accessible_courses.return_value = {"web"}
        enrollment.list_learners.return_value = [learner]
        lessons = [Lesson(id=uuid4(), course_id="web")]
        catalog.list_course_lessons.return_value = lessons
        progress.course_progress_for.return_value = course_progress("web", 1, 1)

        roster = await service.list_course_learners(tutor_id)

        assert len(roster) == 1
        assert roster[0].name == "Ana Lima"
        assert [c.course_id for c in roster[0].courses] == ["web"]
        assert roster[0].courses[0].percentage == Decimal("100.00")
        progress.course_progress_for.assert_awaited_once_with(
            learner.id, "web", lessons=lessons
        )
        enrollment.list_learners.assert_awaited_once_with({"web"})
