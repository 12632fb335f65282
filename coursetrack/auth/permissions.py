"""Role-based access control.

Hierarchical roles:
- ADMIN (level 3): Platform administration
- TUTOR (level 2): Grades submissions in the courses on their interest list
- LEARNER (level 1): Works through the courses on their interest list
"""

from enum import Enum


class UserRole(str, Enum):
    """User roles with hierarchical levels.

    Higher level = more permissions.
    """

    LEARNER = "learner"
    TUTOR = "tutor"
    ADMIN = "admin"


ROLE_HIERARCHY: dict[UserRole, int] = {
    UserRole.LEARNER: 1,
    UserRole.TUTOR: 2,
    UserRole.ADMIN: 3,
}


def get_role_level(role: UserRole | str) -> int:
    """Get the permission level for a role.

    Unknown roles map to 0 (no permissions). Role strings are matched
    case-insensitively since identity providers often send ``LEARNER``.
    """
    if isinstance(role, str):
        try:
            role = UserRole(role.lower())
        except ValueError:
            return 0
    return ROLE_HIERARCHY.get(role, 0)


def has_permission(user_role: UserRole | str, required_role: UserRole | str) -> bool:
    """Check if user has at least the required permission level.

    Examples:
        >>> has_permission(UserRole.ADMIN, UserRole.TUTOR)
        True
        >>> has_permission("learner", "tutor")
        False
    """
    return get_role_level(user_role) >= get_role_level(required_role)


def is_at_least_tutor(role: UserRole | str) -> bool:
    """Check if role is TUTOR or higher (ADMIN)."""
    return has_permission(role, UserRole.TUTOR)
