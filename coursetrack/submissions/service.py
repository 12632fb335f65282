"""Submission lifecycle service layer.

Business logic for:
- Submitting and resubmitting assignments (upsert per user and assignment)
- Grading by tutors responsible for the course
- Status derivation and assignment listings for learners
- Submission listings for tutors

A submission moves PENDING|OVERDUE -> SUBMITTED on first submit, stays
SUBMITTED on resubmission and becomes GRADED once a tutor grades it. A
learner resubmission replaces answers and submitted_at only: an existing
grade survives it.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID

import structlog
from cassandra.query import BatchStatement, BatchType

from coursetrack.core.database.store import CassandraService
from coursetrack.core.errors import NotFoundError, ValidationError
from coursetrack.courses.service import sort_by_due_date
from coursetrack.events.publisher import EventPublisher, SubmissionEvent

from .models import Submission, submission_id_for
from .schemas import (
    AssignmentResponse,
    AssignmentView,
    LearnerSubmissionView,
    SubmissionResponse,
    TutorSubmissionView,
)
from .status import SubmissionStatus, derive_status, due_urgency
from .validation import AnswersPayload, validate_answers


if TYPE_CHECKING:
    from cassandra.cluster import Session

    from coursetrack.courses.models import Assignment
    from coursetrack.courses.service import CatalogService
    from coursetrack.enrollment.service import EnrollmentService

logger = structlog.get_logger(__name__)

_SUBMISSION_COLUMNS = (
    "user_id, assignment_id, id, course_id, answers, score, feedback, "
    "submitted_at, graded_at"
)


class SubmissionService(CassandraService):
    """Service for assignment submissions and grading."""

    def __init__(
        self,
        session: "Session",
        keyspace: str,
        catalog: "CatalogService",
        enrollment: "EnrollmentService",
        events: EventPublisher,
        closing_soon_days: int = 1,
        due_soon_days: int = 3,
    ):
        """Initialize with Cassandra session and collaborating services."""
        self.catalog = catalog
        self.enrollment = enrollment
        self.events = events
        self.closing_soon_days = closing_soon_days
        self.due_soon_days = due_soon_days
        super().__init__(session, keyspace)

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient execution."""
        self._get_submission = self.session.prepare(f"""
            SELECT {_SUBMISSION_COLUMNS}
            FROM {self.keyspace}.submissions
            WHERE user_id = ? AND assignment_id = ?
        """)

        self._get_user_submissions = self.session.prepare(f"""
            SELECT {_SUBMISSION_COLUMNS}
            FROM {self.keyspace}.submissions
            WHERE user_id = ?
        """)

        self._get_submission_ref = self.session.prepare(f"""
            SELECT id, user_id, assignment_id, course_id
            FROM {self.keyspace}.submissions_by_id
            WHERE id = ?
        """)

        self._get_course_submissions = self.session.prepare(f"""
            SELECT course_id, assignment_id, user_id, id, submitted_at, graded_at
            FROM {self.keyspace}.submissions_by_course
            WHERE course_id = ?
        """)

        # UPDATE (not INSERT) so grading columns are left as they are
        self._upsert_answers = self.session.prepare(f"""
            UPDATE {self.keyspace}.submissions
            SET id = ?, course_id = ?, answers = ?, submitted_at = ?
            WHERE user_id = ? AND assignment_id = ?
        """)

        self._upsert_submission_ref = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.submissions_by_id
            (id, user_id, assignment_id, course_id)
            VALUES (?, ?, ?, ?)
        """)

        self._upsert_course_submitted = self.session.prepare(f"""
            UPDATE {self.keyspace}.submissions_by_course
            SET submitted_at = ?
            WHERE course_id = ? AND assignment_id = ? AND user_id = ? AND id = ?
        """)

        self._update_grade = self.session.prepare(f"""
            UPDATE {self.keyspace}.submissions
            SET score = ?, feedback = ?, graded_at = ?
            WHERE user_id = ? AND assignment_id = ?
        """)

        self._update_course_graded = self.session.prepare(f"""
            UPDATE {self.keyspace}.submissions_by_course
            SET graded_at = ?
            WHERE course_id = ? AND assignment_id = ? AND user_id = ? AND id = ?
        """)

    # ==========================================================================
    # Loading
    # ==========================================================================

    async def _load(self, user_id: UUID, assignment_id: UUID) -> Submission | None:
        result = await self._read(self._get_submission, [user_id, assignment_id])
        row = result.one()
        return Submission.from_row(row) if row else None

    async def _load_by_id(self, submission_id: UUID) -> Submission:
        result = await self._read(self._get_submission_ref, [submission_id])
        ref = result.one()
        submission = await self._load(ref.user_id, ref.assignment_id) if ref else None
        if submission is None:
            raise NotFoundError(
                f"Submission {submission_id} not found", "submission_not_found"
            )
        return submission

    async def _load_user_submissions(self, user_id: UUID) -> dict[UUID, Submission]:
        rows = await self._read(self._get_user_submissions, [user_id])
        return {row.assignment_id: Submission.from_row(row) for row in rows}

    async def _require_assignment_access(
        self, user_id: UUID, assignment_id: UUID
    ) -> "Assignment":
        assignment = await self.catalog.get_assignment(assignment_id)
        await self.enrollment.require_enrollment(user_id, assignment.course_id)
        return assignment

    # ==========================================================================
    # Learner Operations
    # ==========================================================================

    async def submit_assignment(
        self,
        user_id: UUID,
        assignment_id: UUID,
        answers: AnswersPayload,
        now: datetime | None = None,
    ) -> Submission:
        """Create or replace the learner's submission for an assignment.

        The three tables are written in one LOGGED batch: on failure none of
        them changed and the status stays where it was.

        Raises:
            NotFoundError: Unknown assignment
            AccessDeniedError: Learner not enrolled in the assignment's course
            ValidationError: Empty payload, wrong type or unaccepted format
            PersistenceError: The batch was not applied
        """
        assignment = await self._require_assignment_access(user_id, assignment_id)
        validate_answers(assignment, answers)

        submitted_at = now or datetime.now(UTC)
        existing = await self._load(user_id, assignment_id)
        submission_id = submission_id_for(user_id, assignment_id)

        submission = Submission(
            id=submission_id,
            user_id=user_id,
            assignment_id=assignment_id,
            course_id=assignment.course_id,
            answers=answers.model_dump(mode="json"),
            score=existing.score if existing else None,
            feedback=existing.feedback if existing else None,
            submitted_at=submitted_at,
            graded_at=existing.graded_at if existing else None,
        )

        batch = BatchStatement(batch_type=BatchType.LOGGED)
        batch.add(
            self._upsert_answers,
            [
                submission_id,
                assignment.course_id,
                submission.answers_json(),
                submitted_at,
                user_id,
                assignment_id,
            ],
        )
        batch.add(
            self._upsert_submission_ref,
            [submission_id, user_id, assignment_id, assignment.course_id],
        )
        batch.add(
            self._upsert_course_submitted,
            [submitted_at, assignment.course_id, assignment_id, user_id, submission_id],
        )
        await self._write(batch, operation="submit_assignment")

        event = SubmissionEvent.UPDATED if existing else SubmissionEvent.CREATED
        logger.info(
            event.value,
            submission_id=str(submission_id),
            user_id=str(user_id),
            assignment_id=str(assignment_id),
            course_id=assignment.course_id,
            answers_type=answers.type,
        )
        await self.events.publish(event, submission, actor_id=user_id)

        return submission

    async def get_submission_status(
        self,
        assignment_id: UUID,
        user_id: UUID,
        now: datetime,
    ) -> SubmissionStatus:
        """Derive the learner's status for an assignment at ``now``."""
        assignment = await self._require_assignment_access(user_id, assignment_id)
        submission = await self._load(user_id, assignment_id)
        return derive_status(submission, assignment.due_date, now)

    def _assignment_view(
        self,
        assignment: "Assignment",
        submission: Submission | None,
        now: datetime,
    ) -> AssignmentView:
        status = derive_status(submission, assignment.due_date, now)
        return AssignmentView(
            assignment=AssignmentResponse.from_entity(assignment),
            status=status,
            urgency=due_urgency(
                assignment.due_date,
                now,
                closing_soon_days=self.closing_soon_days,
                due_soon_days=self.due_soon_days,
            ),
            submission=SubmissionResponse.from_entity(submission, status)
            if submission
            else None,
        )

    async def get_assignment_view(
        self,
        user_id: UUID,
        assignment_id: UUID,
        now: datetime,
    ) -> AssignmentView:
        """Single assignment with the learner's status and submission."""
        assignment = await self._require_assignment_access(user_id, assignment_id)
        submission = await self._load(user_id, assignment_id)
        return self._assignment_view(assignment, submission, now)

    async def list_assignments(
        self,
        user_id: UUID,
        now: datetime,
    ) -> list[AssignmentView]:
        """Assignments of every enrolled course, by due date (undated last)."""
        courses = await self.enrollment.get_accessible_courses(user_id)
        assignments = await self.catalog.list_assignments_for_courses(courses)
        submissions = await self._load_user_submissions(user_id)
        return [
            self._assignment_view(a, submissions.get(a.id), now) for a in assignments
        ]

    async def count_submitted(self, user_id: UUID, assignment_ids: set[UUID]) -> int:
        """How many of the given assignments the learner has a submission for."""
        submissions = await self._load_user_submissions(user_id)
        return len(assignment_ids & submissions.keys())

    async def list_my_submissions(
        self,
        user_id: UUID,
        now: datetime,
    ) -> list[LearnerSubmissionView]:
        """The learner's submissions in enrolled courses, newest first."""
        courses = await self.enrollment.get_accessible_courses(user_id)
        submissions = await self._load_user_submissions(user_id)

        views = []
        for submission in submissions.values():
            if submission.course_id not in courses:
                continue
            assignment = await self.catalog.get_assignment(submission.assignment_id)
            views.append(
                LearnerSubmissionView(
                    submission=SubmissionResponse.from_entity(
                        submission,
                        derive_status(submission, assignment.due_date, now),
                    ),
                    assignment_title=assignment.title,
                    max_score=assignment.max_score,
                )
            )
        return _newest_first(views)

    # ==========================================================================
    # Tutor Operations
    # ==========================================================================

    async def grade_submission(
        self,
        tutor_id: UUID,
        submission_id: UUID,
        score: int | None = None,
        feedback: str | None = None,
        now: datetime | None = None,
    ) -> Submission:
        """Grade a submission and stamp graded_at.

        An omitted score or feedback keeps its current value. Re-grading
        overwrites and refreshes graded_at. Concurrent graders: last write wins.

        Raises:
            NotFoundError: Unknown submission
            AccessDeniedError: Course not in the tutor's interest list
            ValidationError: Nothing to grade, or score outside [0, max_score]
            PersistenceError: The grade was not applied
        """
        submission = await self._load_by_id(submission_id)
        assignment = await self._require_assignment_access(
            tutor_id, submission.assignment_id
        )

        if score is None and feedback is None:
            raise ValidationError("Provide a score or feedback", "empty_grade")
        if score is not None and not 0 <= score <= assignment.max_score:
            raise ValidationError(
                f"Score must be between 0 and {assignment.max_score}",
                "score_out_of_range",
            )

        graded_at = now or datetime.now(UTC)
        if score is not None:
            submission.score = score
        if feedback is not None:
            submission.feedback = feedback
        submission.graded_at = graded_at

        batch = BatchStatement(batch_type=BatchType.LOGGED)
        batch.add(
            self._update_grade,
            [
                submission.score,
                submission.feedback,
                graded_at,
                submission.user_id,
                submission.assignment_id,
            ],
        )
        batch.add(
            self._update_course_graded,
            [
                graded_at,
                submission.course_id,
                submission.assignment_id,
                submission.user_id,
                submission.id,
            ],
        )
        await self._write(batch, operation="grade_submission")

        logger.info(
            "submission_graded",
            submission_id=str(submission.id),
            tutor_id=str(tutor_id),
            score=submission.score,
            max_score=assignment.max_score,
        )
        await self.events.publish(SubmissionEvent.GRADED, submission, actor_id=tutor_id)

        return submission

    async def _tutor_view(
        self,
        submission: Submission,
        assignment: "Assignment",
        now: datetime,
    ) -> TutorSubmissionView:
        learner = await self.enrollment.get_user(submission.user_id)
        return TutorSubmissionView(
            submission=SubmissionResponse.from_entity(
                submission, derive_status(submission, assignment.due_date, now)
            ),
            learner_name=learner.name if learner else "",
            learner_email=learner.email if learner else "",
            assignment=AssignmentResponse.from_entity(assignment),
        )

    async def get_submission_for_tutor(
        self,
        tutor_id: UUID,
        submission_id: UUID,
        now: datetime,
    ) -> TutorSubmissionView:
        """Single submission for a tutor; course access checked on every read."""
        submission = await self._load_by_id(submission_id)
        assignment = await self._require_assignment_access(
            tutor_id, submission.assignment_id
        )
        return await self._tutor_view(submission, assignment, now)

    async def list_course_submission_refs(self, course_id: str) -> list:
        """Raw ``submissions_by_course`` rows for one course."""
        return list(await self._read(self._get_course_submissions, [course_id]))

    async def list_tutor_submissions(
        self,
        tutor_id: UUID,
        now: datetime,
    ) -> list[TutorSubmissionView]:
        """Submissions across the tutor's courses, newest first."""
        courses = await self.enrollment.get_accessible_courses(tutor_id)

        views = []
        for course_id in sorted(courses):
            assignments = {
                a.id: a for a in await self.catalog.list_course_assignments(course_id)
            }
            for ref in await self.list_course_submission_refs(course_id):
                assignment = assignments.get(ref.assignment_id)
                submission = await self._load(ref.user_id, ref.assignment_id)
                if assignment is None or submission is None:
                    continue
                views.append(await self._tutor_view(submission, assignment, now))
        return _newest_first(views)


def _newest_first(views: list) -> list:
    epoch = datetime.min.replace(tzinfo=UTC)
    return sorted(
        views,
        key=lambda v: v.submission.submitted_at or epoch,
        reverse=True,
    )
