"""Pydantic schemas for assignments and submissions.

Request and response models for:
- Answers payloads (tagged union on assignment type)
- Submitting and grading
- Assignment, submission and tutor views
"""

from datetime import datetime
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from coursetrack.courses.models import Assignment, AssignmentType

from .models import Submission
from .status import DueUrgency, SubmissionStatus


# ==============================================================================
# Answers Payload
# ==============================================================================


class EssayAnswers(BaseModel):
    """Essay: free text, optionally with an uploaded file."""

    type: Literal["essay"] = AssignmentType.ESSAY.value
    text: str = Field("", max_length=50_000)
    file_url: str | None = Field(None, max_length=2048)


class QuizAnswers(BaseModel):
    """Quiz: one answer per question, in question order."""

    type: Literal["quiz"] = AssignmentType.QUIZ.value
    answers: list[str] = Field(default_factory=list, max_length=500)


class CodingAnswers(BaseModel):
    """Coding: an uploaded file (archive or repository link) plus notes."""

    type: Literal["coding"] = AssignmentType.CODING.value
    file_url: str | None = Field(None, max_length=2048)
    notes: str = Field("", max_length=20_000)


Answers = Annotated[
    EssayAnswers | QuizAnswers | CodingAnswers,
    Field(discriminator="type"),
]


# ==============================================================================
# Request Schemas
# ==============================================================================


class SubmitAssignmentRequest(BaseModel):
    """Request to submit (or resubmit) an assignment."""

    answers: Answers


class GradeSubmissionRequest(BaseModel):
    """Request to grade a submission. Omitted fields keep their value."""

    score: int | None = Field(None, description="0..max_score")
    feedback: str | None = Field(None, max_length=20_000)


# ==============================================================================
# Response Schemas
# ==============================================================================


class AssignmentResponse(BaseModel):
    """Assignment as shown to learners and tutors."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    course_id: str
    lesson_id: UUID | None = None
    title: str
    description: str
    assignment_type: AssignmentType
    due_date: datetime | None = None
    max_score: int
    submission_formats: list[str]

    @classmethod
    def from_entity(cls, entity: Assignment) -> "AssignmentResponse":
        """Create response from entity."""
        return cls(
            id=entity.id,
            course_id=entity.course_id,
            lesson_id=entity.lesson_id,
            title=entity.title,
            description=entity.description,
            assignment_type=AssignmentType(entity.assignment_type),
            due_date=entity.due_date,
            max_score=entity.max_score,
            submission_formats=entity.submission_formats,
        )


class SubmissionResponse(BaseModel):
    """A submission with its derived status."""

    id: UUID
    user_id: UUID
    assignment_id: UUID
    course_id: str
    answers: dict[str, Any]
    score: int | None = None
    feedback: str | None = None
    submitted_at: datetime | None = None
    graded_at: datetime | None = None
    status: SubmissionStatus

    @classmethod
    def from_entity(
        cls, entity: Submission, status: SubmissionStatus
    ) -> "SubmissionResponse":
        """Create response from entity."""
        return cls(
            id=entity.id,
            user_id=entity.user_id,
            assignment_id=entity.assignment_id,
            course_id=entity.course_id,
            answers=entity.answers,
            score=entity.score,
            feedback=entity.feedback,
            submitted_at=entity.submitted_at,
            graded_at=entity.graded_at,
            status=status,
        )


class SubmissionStatusResponse(BaseModel):
    """Status of one assignment for the caller."""

    assignment_id: UUID
    status: SubmissionStatus


class AssignmentView(BaseModel):
    """Assignment with the caller's status and submission, if any."""

    assignment: AssignmentResponse
    status: SubmissionStatus
    urgency: DueUrgency
    submission: SubmissionResponse | None = None


class LearnerSubmissionView(BaseModel):
    """Learner feedback list entry."""

    submission: SubmissionResponse
    assignment_title: str
    max_score: int


class TutorSubmissionView(BaseModel):
    """Tutor list/detail entry: submission plus learner and assignment context."""

    submission: SubmissionResponse
    learner_name: str
    learner_email: str
    assignment: AssignmentResponse
