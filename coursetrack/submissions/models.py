"""Database models for assignment submissions.

Cassandra table definitions for:
- Submissions: one row per (user, assignment), upserted on resubmission
- Lookup tables: by submission id (tutor grading) and by course (tutor lists)

Architecture: Dual-write pattern. Every write touching more than one table
goes through a LOGGED batch so the tables never disagree.
"""

import json
from datetime import datetime
from typing import Any
from uuid import NAMESPACE_URL, UUID, uuid5

from coursetrack.core.clock import ensure_utc_aware


# Submission ids are derived from (user, assignment): concurrent first
# submits converge on the same row.
SUBMISSION_ID_NAMESPACE = uuid5(NAMESPACE_URL, "urn:coursetrack:submission")


def submission_id_for(user_id: UUID, assignment_id: UUID) -> UUID:
    """Deterministic submission id for a (user, assignment) pair."""
    return uuid5(SUBMISSION_ID_NAMESPACE, f"{user_id}:{assignment_id}")


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

SUBMISSIONS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.submissions (
    user_id UUID,
    assignment_id UUID,
    id UUID,
    course_id TEXT,
    answers TEXT,
    score INT,
    feedback TEXT,
    submitted_at TIMESTAMP,
    graded_at TIMESTAMP,
    PRIMARY KEY (user_id, assignment_id)
)
"""

# Lookup: grading and tutor detail views address submissions by id
SUBMISSIONS_BY_ID_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.submissions_by_id (
    id UUID PRIMARY KEY,
    user_id UUID,
    assignment_id UUID,
    course_id TEXT
)
"""

# Lookup: submissions per course for tutor lists and dashboards
SUBMISSIONS_BY_COURSE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.submissions_by_course (
    course_id TEXT,
    assignment_id UUID,
    user_id UUID,
    id UUID,
    submitted_at TIMESTAMP,
    graded_at TIMESTAMP,
    PRIMARY KEY (course_id, assignment_id, user_id, id)
)
"""

SUBMISSIONS_TABLES_CQL = [
    SUBMISSIONS_TABLE_CQL,
    SUBMISSIONS_BY_ID_TABLE_CQL,
    SUBMISSIONS_BY_COURSE_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


class Submission:
    """A learner's attempt at an assignment.

    Attributes:
        id: Submission UUID (derived from user and assignment)
        user_id: Learner UUID
        assignment_id: Assignment UUID
        course_id: Course identifier of the assignment
        answers: Validated answers payload, stored as a JSON document
        score: Tutor score (None until graded)
        feedback: Tutor feedback (None until graded)
        submitted_at: Last (re)submission timestamp
        graded_at: Last grading timestamp (None until graded)
    """

    def __init__(
        self,
        id: UUID,
        user_id: UUID,
        assignment_id: UUID,
        course_id: str,
        answers: dict[str, Any] | None = None,
        score: int | None = None,
        feedback: str | None = None,
        submitted_at: datetime | None = None,
        graded_at: datetime | None = None,
    ):
        self.id = id
        self.user_id = user_id
        self.assignment_id = assignment_id
        self.course_id = course_id
        self.answers = answers or {}
        self.score = score
        self.feedback = feedback
        self.submitted_at = ensure_utc_aware(submitted_at)
        self.graded_at = ensure_utc_aware(graded_at)

    @property
    def is_graded(self) -> bool:
        """Graded means a grading timestamp exists, whatever score/feedback hold."""
        return self.graded_at is not None

    @classmethod
    def from_row(cls, row: Any) -> "Submission":
        """Create Submission instance from a ``submissions`` row."""
        return cls(
            id=row.id,
            user_id=row.user_id,
            assignment_id=row.assignment_id,
            course_id=row.course_id,
            answers=json.loads(row.answers) if row.answers else {},
            score=row.score,
            feedback=row.feedback,
            submitted_at=row.submitted_at,
            graded_at=row.graded_at,
        )

    def answers_json(self) -> str:
        """Serialize the answers payload for storage."""
        return json.dumps(self.answers, separators=(",", ":"))

    def __repr__(self) -> str:
        return (
            f"<Submission {self.id} user={self.user_id} "
            f"assignment={self.assignment_id} graded={self.is_graded}>"
        )
