"""Request-scoped clock.

Due-date status depends on "now"; it is resolved once per request and passed
explicitly to services so that one request sees one instant and nothing is
memoized across requests.
"""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import Depends, Request


def get_request_now(request: Request) -> datetime:
    """Return the instant stamped on the request by the context middleware."""
    now = getattr(request.state, "now", None)
    return now if now is not None else datetime.now(UTC)


RequestNow = Annotated[datetime, Depends(get_request_now)]


def ensure_utc_aware(dt: datetime | None) -> datetime | None:
    """Ensure datetime is UTC-aware (Cassandra returns naive datetimes)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt
