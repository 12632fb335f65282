"""Pydantic schemas for dashboards and the tutor roster."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from coursetrack.progress.schemas import CourseProgressResponse
from coursetrack.submissions.status import DueUrgency


# ==============================================================================
# Learner
# ==============================================================================


class LearnerDashboardResponse(BaseModel):
    """Rollup of a learner's enrolled courses.

    ``pending_assignments`` counts assignments without a submission; graded
    and overdue items are not distinguished here.
    """

    enrolled_courses: int
    total_lessons: int
    completed_lessons: int
    pending_assignments: int
    overall_progress: Decimal = Field(description="completed / total lessons * 100")
    courses: list[CourseProgressResponse]


# ==============================================================================
# Tutor
# ==============================================================================


class UpcomingAssignment(BaseModel):
    """An assignment whose due date has not passed yet."""

    assignment_id: UUID
    course_id: str
    title: str
    due_date: datetime
    urgency: DueUrgency


class TutorDashboardResponse(BaseModel):
    """Rollup of a tutor's courses."""

    courses: list[str]
    total_submissions: int
    ungraded_submissions: int
    upcoming_assignments: list[UpcomingAssignment]


class LearnerCourseProgress(BaseModel):
    """A learner's progress in one course shared with the tutor."""

    course_id: str
    percentage: Decimal
    completed_lessons: int
    total_lessons: int


class RosterEntry(BaseModel):
    """A learner in the tutor's courses."""

    user_id: UUID
    name: str
    email: str
    courses: list[LearnerCourseProgress]
