"""Database models for course enrollment.

Enrollment is not stored as a relation: a user may access a course exactly
when the course identifier is on the user's interest list
(``users.courses_of_interest``). Removing the identifier revokes access
immediately; progress and submissions are left in place.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from coursetrack.auth.permissions import UserRole
from coursetrack.core.clock import ensure_utc_aware


USERS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.users (
    id UUID PRIMARY KEY,
    email TEXT,
    name TEXT,
    role TEXT,
    courses_of_interest SET<TEXT>,
    created_at TIMESTAMP
)
"""

# Values index on the set, for "who is enrolled in X" (CONTAINS) queries
USERS_INTEREST_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS users_courses_of_interest_idx
ON {keyspace}.users (courses_of_interest)
"""

ENROLLMENT_TABLES_CQL = [
    USERS_TABLE_CQL,
    USERS_INTEREST_INDEX_CQL,
]


class UserProfile:
    """The slice of a user record the enrollment rules read.

    Attributes:
        id: User UUID
        email: Contact email (roster display)
        name: Display name (roster display)
        role: learner, tutor or admin
        courses_of_interest: Course identifiers the user may access
        created_at: Account creation timestamp
    """

    def __init__(
        self,
        id: UUID,
        email: str = "",
        name: str = "",
        role: str = UserRole.LEARNER.value,
        courses_of_interest: set[str] | None = None,
        created_at: datetime | None = None,
    ):
        self.id = id
        self.email = email
        self.name = name
        self.role = role
        self.courses_of_interest = set(courses_of_interest or ())
        self.created_at = ensure_utc_aware(created_at)

    @classmethod
    def from_row(cls, row: Any) -> "UserProfile":
        """Create UserProfile instance from Cassandra row."""
        return cls(
            id=row.id,
            email=row.email or "",
            name=row.name or "",
            role=(row.role or UserRole.LEARNER.value).lower(),
            # Cassandra returns None for an empty set
            courses_of_interest=set(row.courses_of_interest or ()),
            created_at=row.created_at,
        )

    def __repr__(self) -> str:
        return f"<UserProfile {self.id} {self.role} courses={len(self.courses_of_interest)}>"
