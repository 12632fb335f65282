# Core infrastructure
from coursetrack.core.context import (
    RequestContext,
    clear_context,
    get_context,
    get_request_id,
    get_user_id,
    set_request_id,
    set_user_id,
    set_user_role,
)
from coursetrack.core.errors import (
    AccessDeniedError,
    CoursetrackError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from coursetrack.core.logging import configure_structlog, get_logger
from coursetrack.core.middleware import RequestContextMiddleware


__all__ = [
    "AccessDeniedError",
    "CoursetrackError",
    "NotFoundError",
    "PersistenceError",
    "RequestContext",
    "RequestContextMiddleware",
    "ValidationError",
    "clear_context",
    "configure_structlog",
    "get_context",
    "get_logger",
    "get_request_id",
    "get_user_id",
    "set_request_id",
    "set_user_id",
    "set_user_role",
]
