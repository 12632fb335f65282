"""Course enrollment derived from user interest lists.

Provides:
- Interest-list backed access resolution
- Learner lookup per course (tutor roster)
"""

from .models import ENROLLMENT_TABLES_CQL, UserProfile


__all__ = [
    "ENROLLMENT_TABLES_CQL",
    "UserProfile",
]
