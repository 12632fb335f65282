"""Assignment and submission API endpoints.

Provides routes for:
- Learner assignment listing, detail, status and submission
- Learner feedback list
- Tutor submission list, detail and grading
"""

from uuid import UUID

from fastapi import APIRouter, status

from coursetrack.auth.dependencies import CurrentUser, TutorUser
from coursetrack.core.clock import RequestNow

from .dependencies import SubmissionServiceDep
from .schemas import (
    AssignmentView,
    GradeSubmissionRequest,
    LearnerSubmissionView,
    SubmissionResponse,
    SubmissionStatusResponse,
    SubmitAssignmentRequest,
    TutorSubmissionView,
)
from .status import derive_status


assignments_router = APIRouter(prefix="/v1/assignments", tags=["assignments"])
submissions_router = APIRouter(prefix="/v1/submissions", tags=["submissions"])
tutor_router = APIRouter(prefix="/v1/tutor/submissions", tags=["tutor"])


# ==============================================================================
# Learner: Assignments
# ==============================================================================


@assignments_router.get(
    "",
    response_model=list[AssignmentView],
    summary="List my assignments",
)
async def list_assignments(
    service: SubmissionServiceDep,
    user: CurrentUser,
    now: RequestNow,
) -> list[AssignmentView]:
    """Assignments of every enrolled course with the caller's status."""
    return await service.list_assignments(user.id, now)


@assignments_router.get(
    "/{assignment_id}",
    response_model=AssignmentView,
    summary="Get assignment",
)
async def get_assignment(
    assignment_id: UUID,
    service: SubmissionServiceDep,
    user: CurrentUser,
    now: RequestNow,
) -> AssignmentView:
    """Assignment detail with the caller's status and submission."""
    return await service.get_assignment_view(user.id, assignment_id, now)


@assignments_router.get(
    "/{assignment_id}/status",
    response_model=SubmissionStatusResponse,
    summary="Get submission status",
)
async def get_submission_status(
    assignment_id: UUID,
    service: SubmissionServiceDep,
    user: CurrentUser,
    now: RequestNow,
) -> SubmissionStatusResponse:
    """PENDING, OVERDUE, SUBMITTED or GRADED for the caller."""
    return SubmissionStatusResponse(
        assignment_id=assignment_id,
        status=await service.get_submission_status(assignment_id, user.id, now),
    )


@assignments_router.post(
    "/{assignment_id}/submission",
    response_model=SubmissionResponse,
    status_code=status.HTTP_200_OK,
    summary="Submit assignment",
)
async def submit_assignment(
    assignment_id: UUID,
    data: SubmitAssignmentRequest,
    service: SubmissionServiceDep,
    user: CurrentUser,
    now: RequestNow,
) -> SubmissionResponse:
    """Submit or resubmit. A resubmission keeps any existing grade."""
    submission = await service.submit_assignment(
        user_id=user.id,
        assignment_id=assignment_id,
        answers=data.answers,
        now=now,
    )
    return SubmissionResponse.from_entity(
        submission, derive_status(submission, None, now)
    )


# ==============================================================================
# Learner: Feedback
# ==============================================================================


@submissions_router.get(
    "/mine",
    response_model=list[LearnerSubmissionView],
    summary="List my submissions",
)
async def list_my_submissions(
    service: SubmissionServiceDep,
    user: CurrentUser,
    now: RequestNow,
) -> list[LearnerSubmissionView]:
    """The caller's submissions with scores and feedback, newest first."""
    return await service.list_my_submissions(user.id, now)


# ==============================================================================
# Tutor
# ==============================================================================


@tutor_router.get(
    "",
    response_model=list[TutorSubmissionView],
    summary="List submissions in my courses",
)
async def list_tutor_submissions(
    service: SubmissionServiceDep,
    tutor: TutorUser,
    now: RequestNow,
) -> list[TutorSubmissionView]:
    """Submissions for assignments in the tutor's courses, newest first."""
    return await service.list_tutor_submissions(tutor.id, now)


@tutor_router.get(
    "/{submission_id}",
    response_model=TutorSubmissionView,
    summary="Get submission",
)
async def get_tutor_submission(
    submission_id: UUID,
    service: SubmissionServiceDep,
    tutor: TutorUser,
    now: RequestNow,
) -> TutorSubmissionView:
    """Submission detail; the course must be on the tutor's interest list."""
    return await service.get_submission_for_tutor(tutor.id, submission_id, now)


@tutor_router.patch(
    "/{submission_id}",
    response_model=SubmissionResponse,
    summary="Grade submission",
)
async def grade_submission(
    submission_id: UUID,
    data: GradeSubmissionRequest,
    service: SubmissionServiceDep,
    tutor: TutorUser,
    now: RequestNow,
) -> SubmissionResponse:
    """Set score and/or feedback. Stamps graded_at."""
    submission = await service.grade_submission(
        tutor_id=tutor.id,
        submission_id=submission_id,
        score=data.score,
        feedback=data.feedback,
        now=now,
    )
    return SubmissionResponse.from_entity(
        submission, derive_status(submission, None, now)
    )
