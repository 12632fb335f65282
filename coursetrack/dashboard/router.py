"""Dashboard and tutor roster API endpoints."""

from fastapi import APIRouter

from coursetrack.auth.dependencies import CurrentUser, TutorUser
from coursetrack.core.clock import RequestNow

from .dependencies import DashboardServiceDep
from .schemas import LearnerDashboardResponse, RosterEntry, TutorDashboardResponse


router = APIRouter(prefix="/v1/dashboard", tags=["dashboard"])
roster_router = APIRouter(prefix="/v1/tutor", tags=["tutor"])


@router.get(
    "/learner",
    response_model=LearnerDashboardResponse,
    summary="Learner dashboard",
)
async def learner_dashboard(
    service: DashboardServiceDep,
    user: CurrentUser,
) -> LearnerDashboardResponse:
    """Enrolled courses, lesson totals, pending assignments and overall progress."""
    return await service.get_learner_dashboard(user.id)


@router.get(
    "/tutor",
    response_model=TutorDashboardResponse,
    summary="Tutor dashboard",
)
async def tutor_dashboard(
    service: DashboardServiceDep,
    tutor: TutorUser,
    now: RequestNow,
) -> TutorDashboardResponse:
    """Submission counts and upcoming assignments in the tutor's courses."""
    return await service.get_tutor_dashboard(tutor.id, now)


@roster_router.get(
    "/learners",
    response_model=list[RosterEntry],
    summary="List my learners",
)
async def list_learners(
    service: DashboardServiceDep,
    tutor: TutorUser,
) -> list[RosterEntry]:
    """Learners in the tutor's courses with their course progress."""
    return await service.list_course_learners(tutor.id)
