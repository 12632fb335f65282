"""Pydantic schemas for enrollment."""

from pydantic import BaseModel


class AccessibleCoursesResponse(BaseModel):
    """Courses the caller may access, derived from their interest list."""

    courses: list[str]
