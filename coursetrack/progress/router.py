"""Learner progress API endpoints.

Provides routes for:
- Module toggles
- Lesson-level completion
- Lesson, course and per-course lesson list progress queries

Course access is enforced by the service on every call.
"""

from uuid import UUID

from fastapi import APIRouter, status

from coursetrack.auth.dependencies import CurrentUser
from coursetrack.core.clock import RequestNow
from coursetrack.core.errors import parse_course_id

from .dependencies import ProgressServiceDep
from .schemas import (
    CourseProgressResponse,
    LessonCompletionResponse,
    LessonProgressResponse,
    LessonProgressSummary,
    ModuleToggleResponse,
    SetLessonCompletedRequest,
    ToggleModuleRequest,
)


router = APIRouter(prefix="/v1/progress", tags=["progress"])


# ==============================================================================
# Mutation Endpoints
# ==============================================================================


@router.post(
    "/module",
    response_model=ModuleToggleResponse,
    status_code=status.HTTP_200_OK,
    summary="Toggle module completion",
)
async def toggle_module(
    data: ToggleModuleRequest,
    progress_service: ProgressServiceDep,
    user: CurrentUser,
    now: RequestNow,
) -> ModuleToggleResponse:
    """Mark a module as done (or not done) for the caller.

    Does not change the lesson-level completion flag. On failure the
    client must revert any optimistic update.
    """
    progress = await progress_service.toggle_module(
        user_id=user.id,
        lesson_id=data.lesson_id,
        module_id=data.module_id,
        completed=data.completed,
        now=now,
    )
    return ModuleToggleResponse(
        lesson_id=progress.lesson_id,
        completed_modules=sorted(progress.completed_modules, key=str),
    )


@router.post(
    "/lesson",
    response_model=LessonCompletionResponse,
    status_code=status.HTTP_200_OK,
    summary="Set lesson completion",
)
async def set_lesson_completed(
    data: SetLessonCompletedRequest,
    progress_service: ProgressServiceDep,
    user: CurrentUser,
    now: RequestNow,
) -> LessonCompletionResponse:
    """Set the lesson-level completion flag regardless of module state."""
    progress = await progress_service.set_lesson_completed(
        user_id=user.id,
        lesson_id=data.lesson_id,
        completed=data.completed,
        now=now,
    )
    return LessonCompletionResponse(
        lesson_id=progress.lesson_id,
        completed=progress.completed,
    )


# ==============================================================================
# Progress Query Endpoints
# ==============================================================================


@router.get(
    "/lessons/{lesson_id}",
    response_model=LessonProgressResponse,
    summary="Get lesson progress",
)
async def get_lesson_progress(
    lesson_id: UUID,
    progress_service: ProgressServiceDep,
    user: CurrentUser,
) -> LessonProgressResponse:
    """Get the caller's completed modules and percentage for a lesson."""
    return await progress_service.get_lesson_progress(user.id, lesson_id)


@router.get(
    "/courses/{course_id}",
    response_model=CourseProgressResponse,
    summary="Get course progress",
)
async def get_course_progress(
    course_id: str,
    progress_service: ProgressServiceDep,
    user: CurrentUser,
) -> CourseProgressResponse:
    """Get the caller's course percentage (completed lessons / total lessons)."""
    return await progress_service.get_course_progress(
        user.id, parse_course_id(course_id)
    )


@router.get(
    "/courses/{course_id}/lessons",
    response_model=list[LessonProgressSummary],
    summary="List course lessons with progress",
)
async def get_course_lessons(
    course_id: str,
    progress_service: ProgressServiceDep,
    user: CurrentUser,
) -> list[LessonProgressSummary]:
    """List the course's lessons in order with the caller's progress on each."""
    return await progress_service.get_course_lessons(
        user.id, parse_course_id(course_id)
    )
