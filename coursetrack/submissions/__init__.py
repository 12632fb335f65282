"""Assignment submissions and grading.

Provides:
- Submission upsert per (user, assignment) with tagged-union answers
- Tutor grading with score bounds
- Status derivation (PENDING, OVERDUE, SUBMITTED, GRADED) against an explicit now
"""

from .models import SUBMISSIONS_TABLES_CQL, Submission, submission_id_for
from .status import DueUrgency, SubmissionStatus, derive_status, due_urgency


__all__ = [
    "SUBMISSIONS_TABLES_CQL",
    "DueUrgency",
    "Submission",
    "SubmissionStatus",
    "derive_status",
    "due_urgency",
    "submission_id_for",
]
