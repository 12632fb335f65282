"""Submission lifecycle events."""

from .publisher import EventPublisher, SubmissionEvent


__all__ = ["EventPublisher", "SubmissionEvent"]
