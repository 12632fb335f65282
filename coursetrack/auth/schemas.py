"""Pydantic schemas for the authenticated caller."""

from uuid import UUID

from pydantic import BaseModel

from .permissions import UserRole


class Principal(BaseModel):
    """The (user id, role) pair supplied by the identity provider."""

    id: UUID
    role: UserRole
