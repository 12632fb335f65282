"""Tests for submission event publishing."""

import json
from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from coursetrack.events.publisher import EventPublisher, SubmissionEvent
from coursetrack.submissions.models import Submission


CHANNEL = "events:submissions"


@pytest.fixture
def submission(user_id) -> Submission:
    return Submission(
        id=uuid4(),
        user_id=user_id,
        assignment_id=uuid4(),
        course_id="web_development",
        score=17,
        submitted_at=datetime(2026, 3, 9, tzinfo=UTC),
        graded_at=datetime(2026, 3, 10, tzinfo=UTC),
    )


@pytest.fixture
def redis_client():
    client = Mock()
    client.publish = AsyncMock(return_value=1)
    return client


def test_message_shape(submission, tutor_id):
    message = EventPublisher.build_message(
        SubmissionEvent.GRADED, submission, actor_id=tutor_id
    )

    assert message["type"] == "submission_graded"
    assert message["data"]["submission_id"] == str(submission.id)
    assert message["data"]["course_id"] == "web_development"
    assert message["data"]["score"] == 17
    assert message["data"]["graded"] is True
    assert message["data"]["actor_id"] == str(tutor_id)
    datetime.fromisoformat(message["occurred_at"])


@pytest.mark.asyncio
async def test_publish(redis_client, submission):
    publisher = EventPublisher(redis_client, CHANNEL)

    assert await publisher.publish(SubmissionEvent.CREATED, submission) is True

    channel, payload = redis_client.publish.await_args.args
    assert channel == CHANNEL
    assert json.loads(payload)["type"] == "submission_created"


@pytest.mark.asyncio
async def test_publish_without_redis(submission):
    publisher = EventPublisher(None, CHANNEL)

    assert await publisher.publish(SubmissionEvent.UPDATED, submission) is False


@pytest.mark.asyncio
async def test_publish_failure_is_swallowed(redis_client, submission):
    redis_client.publish.side_effect = RedisConnectionError("connection refused")
    publisher = EventPublisher(redis_client, CHANNEL)

    assert await publisher.publish(SubmissionEvent.GRADED, submission) is False
