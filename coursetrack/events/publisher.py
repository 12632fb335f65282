"""Submission lifecycle events over Redis Pub/Sub.

Collaborators (notification and email senders) subscribe to the channel and
act on ``submission_created``, ``submission_updated`` and
``submission_graded``. Publishing is best-effort: a mutation that has been
persisted is never failed because its event could not be delivered.
"""

import json
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

import structlog
from redis.exceptions import RedisError


if TYPE_CHECKING:
    import redis.asyncio as redis

    from coursetrack.submissions.models import Submission

logger = structlog.get_logger(__name__)


class SubmissionEvent(str, Enum):
    """Submission lifecycle event types."""

    CREATED = "submission_created"
    UPDATED = "submission_updated"
    GRADED = "submission_graded"


class EventPublisher:
    """Publishes submission events to a Redis channel."""

    def __init__(self, redis: "redis.Redis | None", channel: str):
        self.redis = redis
        self.channel = channel

    @staticmethod
    def build_message(
        event: SubmissionEvent,
        submission: "Submission",
        actor_id: Any | None = None,
    ) -> dict[str, Any]:
        """Build the JSON message for an event."""
        return {
            "type": event.value,
            "occurred_at": datetime.now(UTC).isoformat(),
            "data": {
                "submission_id": str(submission.id),
                "user_id": str(submission.user_id),
                "assignment_id": str(submission.assignment_id),
                "course_id": submission.course_id,
                "score": submission.score,
                "graded": submission.is_graded,
                "actor_id": str(actor_id) if actor_id else None,
            },
        }

    async def publish(
        self,
        event: SubmissionEvent,
        submission: "Submission",
        actor_id: Any | None = None,
    ) -> bool:
        """Publish an event. Returns False when it could not be delivered."""
        message = self.build_message(event, submission, actor_id)

        if not self.redis:
            logger.debug("event_not_published", event=event.value, reason="no_redis")
            return False

        try:
            await self.redis.publish(self.channel, json.dumps(message))
        except (RedisError, OSError) as e:
            logger.warning(
                "event_publish_failed",
                event=event.value,
                submission_id=str(submission.id),
                error=str(e),
            )
            return False

        logger.debug("event_published", event=event.value, channel=self.channel)
        return True
