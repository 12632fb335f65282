"""FastAPI dependencies for authentication.

Provides dependency injection for:
- Current caller extraction from the bearer JWT
- Role-based access control
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError

from coursetrack.auth.permissions import UserRole, has_permission
from coursetrack.auth.schemas import Principal
from coursetrack.auth.security import decode_access_token
from coursetrack.core.context import set_user_id, set_user_role


def get_token_from_header(request: Request) -> str | None:
    """Extract Bearer token from Authorization header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    expected_parts = 2
    parts = auth_header.split()
    if len(parts) != expected_parts or parts[0].lower() != "bearer":
        return None

    return parts[1]


async def get_current_user(
    token: Annotated[str | None, Depends(get_token_from_header)],
) -> Principal:
    """Resolve the authenticated (user id, role) pair.

    Raises:
        HTTPException(401): If token is missing, invalid, or expired
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token not provided",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = decode_access_token(token)
        principal = Principal(
            id=UUID(str(payload["sub"])),
            role=UserRole(str(payload["role"]).lower()),
        )
    except (JWTError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    # Bind caller to the logging context
    set_user_id(principal.id)
    set_user_role(principal.role.value)

    return principal


def require_permission(required_role: UserRole):
    """Create dependency requiring at least a permission level.

    Uses hierarchical comparison: ADMIN >= TUTOR >= LEARNER
    """

    async def permission_checker(
        user: Annotated[Principal, Depends(get_current_user)],
    ) -> Principal:
        if not has_permission(user.role, required_role):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return permission_checker


# ==============================================================================
# Type Aliases for Cleaner Code
# ==============================================================================

CurrentUser = Annotated[Principal, Depends(get_current_user)]
TutorUser = Annotated[Principal, Depends(require_permission(UserRole.TUTOR))]
