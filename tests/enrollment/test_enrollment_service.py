"""Tests for enrollment resolution."""

from types import SimpleNamespace
from uuid import uuid4

import pytest

from coursetrack.core.errors import AccessDeniedError
from coursetrack.enrollment.service import EnrollmentService


def _user_row(user_id, courses, role="learner", name="Ada"):
    return SimpleNamespace(
        id=user_id,
        email=f"{name.lower()}@example.com",
        name=name,
        role=role,
        courses_of_interest=courses,
        created_at=None,
    )


@pytest.fixture
def service(mock_session):
    return EnrollmentService(session=mock_session, keyspace="test_keyspace")


class TestAccessibleCourses:
    """The interest list is the access set."""

    @pytest.mark.asyncio
    async def test_returns_interest_list(self, service, mock_session, result_set, user_id):
        mock_session.aexecute.return_value = result_set(
            [_user_row(user_id, {"web_development", "data_science"})]
        )

        courses = await service.get_accessible_courses(user_id)

        assert courses == {"web_development", "data_science"}

    @pytest.mark.asyncio
    async def test_unknown_user_has_no_courses(self, service, mock_session, result_set):
        mock_session.aexecute.return_value = result_set([])

        assert await service.get_accessible_courses(uuid4()) == set()

    @pytest.mark.asyncio
    async def test_null_interest_list(self, service, mock_session, result_set, user_id):
        mock_session.aexecute.return_value = result_set([_user_row(user_id, None)])

        assert await service.get_accessible_courses(user_id) == set()

    @pytest.mark.asyncio
    async def test_recomputed_on_every_check(
        self, service, mock_session, result_set, user_id
    ):
        """Removing a course from the list revokes access on the next call."""
        mock_session.aexecute.side_effect = [
            result_set([_user_row(user_id, {"web_development"})]),
            result_set([_user_row(user_id, set())]),
        ]

        assert await service.is_enrolled(user_id, "web_development") is True
        assert await service.is_enrolled(user_id, "web_development") is False
        assert mock_session.aexecute.await_count == 2


class TestRequireEnrollment:
    @pytest.mark.asyncio
    async def test_denied(self, service, mock_session, result_set, user_id):
        mock_session.aexecute.return_value = result_set(
            [_user_row(user_id, {"data_science"})]
        )

        with pytest.raises(AccessDeniedError):
            await service.require_enrollment(user_id, "web_development")

    @pytest.mark.asyncio
    async def test_allowed(self, service, mock_session, result_set, user_id):
        mock_session.aexecute.return_value = result_set(
            [_user_row(user_id, {"web_development"})]
        )

        await service.require_enrollment(user_id, "web_development")


class TestListLearners:
    @pytest.mark.asyncio
    async def test_learners_deduplicated_and_sorted(
        self, service, mock_session, result_set
    ):
        zoe = _user_row(uuid4(), {"a", "b"}, name="Zoe")
        ada = _user_row(uuid4(), {"a"}, name="Ada")
        tutor = _user_row(uuid4(), {"a"}, role="tutor", name="Tom")
        mock_session.aexecute.side_effect = [
            result_set([zoe, ada, tutor]),
            result_set([zoe]),
        ]

        learners = await service.list_learners({"a", "b"})

        assert [u.name for u in learners] == ["Ada", "Zoe"]
