"""Submission status and due-date urgency.

Both are pure functions of their inputs and an explicit ``now``. Nothing
here is stored or memoized: the same submission legitimately changes status
as the clock moves past its due date.
"""

from datetime import datetime, timedelta
from enum import Enum

from .models import Submission


class SubmissionStatus(str, Enum):
    """Derived status of a learner's assignment."""

    PENDING = "PENDING"
    OVERDUE = "OVERDUE"
    SUBMITTED = "SUBMITTED"
    GRADED = "GRADED"


class DueUrgency(str, Enum):
    """How close an assignment is to its due date."""

    OPEN = "open"
    DUE_SOON = "due_soon"
    CLOSING_SOON = "closing_soon"
    CLOSED = "closed"


def derive_status(
    submission: Submission | None,
    due_date: datetime | None,
    now: datetime,
) -> SubmissionStatus:
    """Derive the status of an assignment for one learner.

    Precedence: GRADED (grading timestamp set), SUBMITTED (a submission
    exists), OVERDUE (no submission and the due date has passed), PENDING.
    """
    if submission is not None:
        if submission.graded_at is not None:
            return SubmissionStatus.GRADED
        return SubmissionStatus.SUBMITTED
    if due_date is not None and due_date < now:
        return SubmissionStatus.OVERDUE
    return SubmissionStatus.PENDING


def due_urgency(
    due_date: datetime | None,
    now: datetime,
    closing_soon_days: int = 1,
    due_soon_days: int = 3,
) -> DueUrgency:
    """Label the time left before ``due_date``.

    An assignment without a due date is always open.
    """
    if due_date is None:
        return DueUrgency.OPEN

    remaining = due_date - now
    if remaining < timedelta(0):
        return DueUrgency.CLOSED
    if remaining <= timedelta(days=closing_soon_days):
        return DueUrgency.CLOSING_SOON
    if remaining <= timedelta(days=due_soon_days):
        return DueUrgency.DUE_SOON
    return DueUrgency.OPEN
