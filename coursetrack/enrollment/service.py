"""Enrollment resolution.

The single place where course access is decided. Every access check reads the
interest list afresh; nothing is cached across calls.
"""

from uuid import UUID

import structlog

from coursetrack.auth.permissions import UserRole
from coursetrack.core.database.store import CassandraService
from coursetrack.core.errors import AccessDeniedError

from .models import UserProfile


logger = structlog.get_logger(__name__)


class EnrollmentService(CassandraService):
    """Derives accessible courses from users' interest lists."""

    def _prepare_statements(self) -> None:
        self._get_user = self.session.prepare(f"""
            SELECT id, email, name, role, courses_of_interest, created_at
            FROM {self.keyspace}.users
            WHERE id = ?
        """)

        self._get_users_by_course = self.session.prepare(f"""
            SELECT id, email, name, role, courses_of_interest, created_at
            FROM {self.keyspace}.users
            WHERE courses_of_interest CONTAINS ?
        """)

    async def get_user(self, user_id: UUID) -> UserProfile | None:
        """Load a user's profile, None when unknown."""
        result = await self._read(self._get_user, [user_id])
        row = result.one()
        return UserProfile.from_row(row) if row else None

    async def get_accessible_courses(self, user_id: UUID) -> set[str]:
        """Return the course identifiers the user may access.

        An unknown user has no courses; callers treat that as access denied.
        """
        user = await self.get_user(user_id)
        if user is None:
            logger.debug("enrollment_unknown_user", user_id=str(user_id))
            return set()
        return user.courses_of_interest

    async def is_enrolled(self, user_id: UUID, course_id: str) -> bool:
        """Check whether the course is on the user's interest list."""
        return course_id in await self.get_accessible_courses(user_id)

    async def require_enrollment(self, user_id: UUID, course_id: str) -> None:
        """Raise AccessDeniedError unless the user may access the course."""
        if not await self.is_enrolled(user_id, course_id):
            logger.info(
                "course_access_denied",
                user_id=str(user_id),
                course_id=course_id,
            )
            raise AccessDeniedError

    async def list_learners(self, course_ids: set[str]) -> list[UserProfile]:
        """List learners enrolled in any of the given courses.

        Each learner appears once even when several courses match.
        """
        learners: dict[UUID, UserProfile] = {}
        for course_id in sorted(course_ids):
            rows = await self._read(self._get_users_by_course, [course_id])
            for row in rows:
                profile = UserProfile.from_row(row)
                if profile.role == UserRole.LEARNER.value:
                    learners.setdefault(profile.id, profile)
        return sorted(learners.values(), key=lambda u: (u.name.lower(), str(u.id)))
