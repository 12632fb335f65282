"""Domain error taxonomy shared by every service.

Services raise these; ``main`` maps them to HTTP responses in one place.
"""

from fastapi import status


class CoursetrackError(Exception):
    """Base domain error."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, code: str = "coursetrack_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(CoursetrackError):
    """Rejected input: empty submission, out-of-range score, malformed id."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)


class NotFoundError(CoursetrackError):
    """A lesson, module, assignment or submission id did not resolve."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str, code: str = "not_found"):
        super().__init__(message, code)


class AccessDeniedError(CoursetrackError):
    """Caller is not enrolled in, or not responsible for, the course."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(
        self,
        message: str = "You do not have access to this course",
        code: str = "access_denied",
    ):
        super().__init__(message, code)


class PersistenceError(CoursetrackError):
    """A store operation failed without completing.

    Mutations raising this left no partial state behind and may be retried
    by the caller.
    """

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(
        self,
        message: str = "The operation could not be saved, please retry",
        code: str = "persistence_error",
    ):
        super().__init__(message, code)


def parse_course_id(value: str) -> str:
    """Normalize a course identifier, raising ValidationError when blank."""
    course_id = (value or "").strip()
    if not course_id:
        raise ValidationError("Course identifier must not be empty")
    return course_id
