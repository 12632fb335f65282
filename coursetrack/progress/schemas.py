"""Pydantic schemas for learner progress tracking.

Request and response models for:
- Module toggles and lesson-level completion
- Lesson and course progress queries
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .models import LessonProgress


# ==============================================================================
# Mutation Schemas
# ==============================================================================


class ToggleModuleRequest(BaseModel):
    """Request to mark a module as done or not done."""

    lesson_id: UUID = Field(..., description="Lesson UUID")
    module_id: UUID = Field(..., description="Module UUID")
    completed: bool = Field(True, description="True to add, False to remove")


class SetLessonCompletedRequest(BaseModel):
    """Request to set the lesson-level completion flag."""

    lesson_id: UUID = Field(..., description="Lesson UUID")
    completed: bool


class ModuleToggleResponse(BaseModel):
    """Completed module set after a toggle."""

    lesson_id: UUID
    completed_modules: list[UUID]


class LessonCompletionResponse(BaseModel):
    """Lesson-level flag after an update."""

    lesson_id: UUID
    completed: bool


# ==============================================================================
# Query Schemas
# ==============================================================================


class LessonProgressResponse(BaseModel):
    """Progress of one lesson for the caller."""

    model_config = ConfigDict(from_attributes=True)

    lesson_id: UUID
    course_id: str
    completed_modules: list[UUID]
    completed: bool
    percentage: int = Field(ge=0, le=100, description="Module-count basis")
    total_modules: int
    last_accessed_at: datetime | None = None

    @classmethod
    def from_entity(
        cls,
        entity: LessonProgress,
        module_ids: list[UUID],
        percentage: int,
    ) -> "LessonProgressResponse":
        """Create response from entity, keeping only the lesson's own modules."""
        return cls(
            lesson_id=entity.lesson_id,
            course_id=entity.course_id,
            completed_modules=[m for m in module_ids if m in entity.completed_modules],
            completed=entity.completed,
            percentage=percentage,
            total_modules=len(module_ids),
            last_accessed_at=entity.last_accessed_at,
        )


class CourseProgressResponse(BaseModel):
    """Course progress on the lesson-count basis."""

    course_id: str
    percentage: Decimal = Field(description="0-100, two decimal places")
    completed_lessons: int
    total_lessons: int


class LessonProgressSummary(BaseModel):
    """One row of a learner's lesson list for a course."""

    lesson_id: UUID
    title: str
    order_index: int
    total_modules: int
    completed_modules: int
    percentage: int
    completed: bool
