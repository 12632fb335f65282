"""Caller identity: bearer token validation and role checks."""

from .permissions import UserRole, has_permission, is_at_least_tutor
from .schemas import Principal


__all__ = ["Principal", "UserRole", "has_permission", "is_at_least_tutor"]
