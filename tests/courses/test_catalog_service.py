"""Tests for the course catalog service."""

from datetime import datetime, timedelta
from types import SimpleNamespace
from uuid import uuid4

import pytest

from coursetrack.core.errors import NotFoundError
from coursetrack.courses.models import Assignment
from coursetrack.courses.service import CatalogService, sort_by_due_date


def assignment_row(**overrides):
    row = {
        "id": uuid4(),
        "course_id": "web_development",
        "lesson_id": None,
        "title": "Portfolio",
        "description": "",
        "assignment_type": "CODING",
        "due_date": datetime(2026, 3, 12, 9, 0),  # naive, as Cassandra returns
        "max_score": None,
        "submission_formats": ["zip", "link"],
        "created_at": None,
    }
    row.update(overrides)
    return SimpleNamespace(**row)


@pytest.fixture
def service(mock_session):
    return CatalogService(session=mock_session, keyspace="test_keyspace")


class TestLessons:
    @pytest.mark.asyncio
    async def test_get_lesson_not_found(self, service, mock_session, result_set):
        mock_session.aexecute.return_value = result_set([])

        with pytest.raises(NotFoundError) as exc_info:
            await service.get_lesson(uuid4())
        assert exc_info.value.code == "lesson_not_found"

    @pytest.mark.asyncio
    async def test_list_course_lessons(self, service, mock_session, result_set):
        first, second = uuid4(), uuid4()
        mock_session.aexecute.return_value = result_set(
            [
                SimpleNamespace(
                    course_id="web_development", order_index=0, lesson_id=first, title="HTML"
                ),
                SimpleNamespace(
                    course_id="web_development", order_index=1, lesson_id=second, title="CSS"
                ),
            ]
        )

        lessons = await service.list_course_lessons("web_development")

        assert [lesson.id for lesson in lessons] == [first, second]
        statement, params = mock_session.aexecute.call_args.args
        assert "lessons_by_course" in statement
        assert params == ["web_development"]

    @pytest.mark.asyncio
    async def test_module_must_belong_to_lesson(self, service, mock_session, result_set):
        lesson_id = uuid4()
        mock_session.aexecute.return_value = result_set(
            [
                SimpleNamespace(
                    lesson_id=lesson_id,
                    order_index=0,
                    module_id=uuid4(),
                    title="Intro",
                    resources=None,
                )
            ]
        )

        with pytest.raises(NotFoundError) as exc_info:
            await service.get_module(lesson_id, uuid4())
        assert exc_info.value.code == "module_not_found"


class TestAssignments:
    def test_from_row_normalizes(self) -> None:
        assignment = Assignment.from_row(assignment_row())

        assert assignment.assignment_type == "coding"
        assert assignment.max_score == 100
        assert assignment.submission_formats == ["ZIP", "LINK"]
        assert assignment.due_date.tzinfo is not None

    @pytest.mark.asyncio
    async def test_get_assignment_not_found(self, service, mock_session, result_set):
        mock_session.aexecute.return_value = result_set([])

        with pytest.raises(NotFoundError):
            await service.get_assignment(uuid4())

    def test_sort_by_due_date_undated_last(self) -> None:
        base = datetime(2026, 3, 1, 12, 0)
        late = Assignment.from_row(assignment_row(title="B", due_date=base + timedelta(days=2)))
        undated = Assignment.from_row(assignment_row(title="A", due_date=None))
        soon = Assignment.from_row(assignment_row(title="C", due_date=base))

        assert [a.title for a in sort_by_due_date([late, undated, soon])] == ["C", "B", "A"]
