"""Dashboard aggregation.

Read-only rollups recomputed on every request from the enrollment, catalog,
progress and submission services. Nothing is materialized or cached: the
interest list and "now" are read afresh each time.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from coursetrack.courses.service import sort_by_due_date
from coursetrack.progress.calculator import compute_course_progress
from coursetrack.submissions.status import due_urgency

from .schemas import (
    LearnerCourseProgress,
    LearnerDashboardResponse,
    RosterEntry,
    TutorDashboardResponse,
    UpcomingAssignment,
)


if TYPE_CHECKING:
    from coursetrack.courses.service import CatalogService
    from coursetrack.enrollment.service import EnrollmentService
    from coursetrack.progress.service import ProgressService
    from coursetrack.submissions.service import SubmissionService

logger = structlog.get_logger(__name__)


class DashboardService:
    """Builds learner and tutor dashboards and the tutor roster."""

    def __init__(
        self,
        enrollment: "EnrollmentService",
        catalog: "CatalogService",
        progress: "ProgressService",
        submissions: "SubmissionService",
        closing_soon_days: int = 1,
        due_soon_days: int = 3,
    ):
        self.enrollment = enrollment
        self.catalog = catalog
        self.progress = progress
        self.submissions = submissions
        self.closing_soon_days = closing_soon_days
        self.due_soon_days = due_soon_days

    async def get_learner_dashboard(self, user_id: UUID) -> LearnerDashboardResponse:
        """Counts and percentages across the learner's enrolled courses."""
        courses = await self.enrollment.get_accessible_courses(user_id)

        course_progress = [
            await self.progress.course_progress_for(user_id, course_id)
            for course_id in sorted(courses)
        ]
        total_lessons = sum(c.total_lessons for c in course_progress)
        completed_lessons = sum(c.completed_lessons for c in course_progress)

        assignments = await self.catalog.list_assignments_for_courses(courses)
        assignment_ids = {a.id for a in assignments}
        submitted = await self.submissions.count_submitted(user_id, assignment_ids)

        return LearnerDashboardResponse(
            enrolled_courses=len(courses),
            total_lessons=total_lessons,
            completed_lessons=completed_lessons,
            pending_assignments=len(assignment_ids) - submitted,
            overall_progress=compute_course_progress(completed_lessons, total_lessons),
            courses=course_progress,
        )

    async def get_tutor_dashboard(
        self, tutor_id: UUID, now: datetime
    ) -> TutorDashboardResponse:
        """Submission counts and upcoming due dates in the tutor's courses."""
        courses = sorted(await self.enrollment.get_accessible_courses(tutor_id))

        total = 0
        ungraded = 0
        for course_id in courses:
            refs = await self.submissions.list_course_submission_refs(course_id)
            total += len(refs)
            ungraded += sum(1 for ref in refs if ref.graded_at is None)

        assignments = await self.catalog.list_assignments_for_courses(set(courses))
        upcoming = [
            UpcomingAssignment(
                assignment_id=a.id,
                course_id=a.course_id,
                title=a.title,
                due_date=a.due_date,
                urgency=due_urgency(
                    a.due_date,
                    now,
                    closing_soon_days=self.closing_soon_days,
                    due_soon_days=self.due_soon_days,
                ),
            )
            for a in sort_by_due_date(assignments)
            if a.due_date is not None and a.due_date >= now
        ]

        return TutorDashboardResponse(
            courses=courses,
            total_submissions=total,
            ungraded_submissions=ungraded,
            upcoming_assignments=upcoming,
        )

    async def list_course_learners(self, tutor_id: UUID) -> list[RosterEntry]:
        """Learners sharing at least one course with the tutor.

        Each entry carries the learner's course progress (lesson-count basis)
        for every course they share with the tutor.
        """
        tutor_courses = await self.enrollment.get_accessible_courses(tutor_id)
        learners = await self.enrollment.list_learners(tutor_courses)

        lessons_by_course = {
            course_id: await self.catalog.list_course_lessons(course_id)
            for course_id in sorted(tutor_courses)
        }

        roster = []
        for learner in learners:
            shared = sorted(learner.courses_of_interest & tutor_courses)
            entries = []
            for course_id in shared:
                progress = await self.progress.course_progress_for(
                    learner.id, course_id, lessons=lessons_by_course[course_id]
                )
                entries.append(LearnerCourseProgress(**progress.model_dump()))
            roster.append(
                RosterEntry(
                    user_id=learner.id,
                    name=learner.name,
                    email=learner.email,
                    courses=entries,
                )
            )

        logger.debug(
            "roster_built",
            tutor_id=str(tutor_id),
            courses=len(tutor_courses),
            learners=len(roster),
        )
        return roster
