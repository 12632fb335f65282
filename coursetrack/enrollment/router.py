"""Enrollment API endpoints."""

from fastapi import APIRouter

from coursetrack.auth.dependencies import CurrentUser

from .dependencies import EnrollmentServiceDep
from .schemas import AccessibleCoursesResponse


router = APIRouter(prefix="/v1/enrollment", tags=["enrollment"])


@router.get(
    "/courses",
    response_model=AccessibleCoursesResponse,
    summary="List my courses",
)
async def get_accessible_courses(
    service: EnrollmentServiceDep,
    user: CurrentUser,
) -> AccessibleCoursesResponse:
    """Courses on the caller's interest list, recomputed on every call."""
    courses = await service.get_accessible_courses(user.id)
    return AccessibleCoursesResponse(courses=sorted(courses))
