"""Boundary validation of answers payloads against their assignment.

Shape is checked by the request schemas; these checks need the assignment
(its type and accepted formats) and raise domain ValidationErrors carrying a
message the learner can act on.
"""

from pathlib import PurePosixPath
from urllib.parse import urlparse

from coursetrack.courses.models import FORMAT_EXTENSIONS, Assignment, SubmissionFormat
from coursetrack.core.errors import ValidationError

from .schemas import CodingAnswers, EssayAnswers, QuizAnswers


AnswersPayload = EssayAnswers | QuizAnswers | CodingAnswers

KNOWN_EXTENSIONS = frozenset().union(*FORMAT_EXTENSIONS.values())


def _blank(value: str | None) -> bool:
    return not (value and value.strip())


def ensure_not_empty(answers: AnswersPayload) -> None:
    """Reject a payload carrying neither a file nor any written content."""
    if isinstance(answers, QuizAnswers):
        if all(_blank(a) for a in answers.answers):
            raise ValidationError("Answer at least one question", "empty_submission")
        return

    written = answers.text if isinstance(answers, EssayAnswers) else answers.notes
    if _blank(answers.file_url) and _blank(written):
        raise ValidationError("Upload a file or add notes", "empty_submission")


def ensure_accepted_format(file_url: str, formats: list[str]) -> None:
    """Check a file URL against the assignment's accepted formats.

    The URL comes from file storage and may be relative or carry no
    extension. It is only rejected when its extension belongs to a known
    format the assignment does not accept. An empty format list and LINK
    accept any URL.
    """
    if not formats:
        return

    accepted = {SubmissionFormat(f) for f in formats if f in SubmissionFormat.__members__}
    if SubmissionFormat.LINK in accepted:
        return

    suffix = PurePosixPath(urlparse(file_url.strip()).path).suffix.lower()
    if suffix not in KNOWN_EXTENSIONS:
        return

    if not any(suffix in FORMAT_EXTENSIONS[fmt] for fmt in accepted):
        allowed = ", ".join(sorted(f.value for f in accepted)) or "none"
        raise ValidationError(
            f"File type not accepted, allowed formats: {allowed}",
            "unsupported_format",
        )


def validate_answers(assignment: Assignment, answers: AnswersPayload) -> None:
    """Validate an answers payload for ``assignment``.

    Raises:
        ValidationError: Wrong payload type, empty payload or file format
            the assignment does not accept
    """
    if answers.type != assignment.assignment_type:
        raise ValidationError(
            f"This is a {assignment.assignment_type} assignment, "
            f"got {answers.type} answers",
            "answers_type_mismatch",
        )

    ensure_not_empty(answers)

    file_url = getattr(answers, "file_url", None)
    if not _blank(file_url):
        ensure_accepted_format(file_url, assignment.submission_formats)
