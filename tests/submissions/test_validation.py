"""Tests for answers payload validation."""

from uuid import uuid4

import pytest
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from coursetrack.core.errors import ValidationError
from coursetrack.courses.models import Assignment
from coursetrack.submissions.schemas import (
    Answers,
    CodingAnswers,
    EssayAnswers,
    QuizAnswers,
)
from coursetrack.submissions.validation import (
    ensure_accepted_format,
    validate_answers,
)


def _assignment(assignment_type: str = "essay", formats=None) -> Assignment:
    return Assignment(
        id=uuid4(),
        course_id="web_development",
        title="Build a landing page",
        assignment_type=assignment_type,
        submission_formats=formats,
    )


class TestAnswersUnion:
    """The payload is discriminated by its type tag."""

    def test_parses_by_type(self) -> None:
        adapter = TypeAdapter(Answers)
        assert isinstance(adapter.validate_python({"type": "essay"}), EssayAnswers)
        assert isinstance(
            adapter.validate_python({"type": "quiz", "answers": ["a"]}), QuizAnswers
        )
        assert isinstance(adapter.validate_python({"type": "coding"}), CodingAnswers)

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            TypeAdapter(Answers).validate_python({"type": "video"})


class TestNotEmpty:
    """At least a file or some written content is required."""

    def test_empty_coding_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Upload a file or add notes"):
            validate_answers(_assignment("coding"), CodingAnswers(notes="   "))

    def test_coding_notes_only_accepted(self) -> None:
        validate_answers(_assignment("coding"), CodingAnswers(notes="see repo"))

    def test_coding_file_only_accepted(self) -> None:
        validate_answers(
            _assignment("coding"),
            CodingAnswers(file_url="https://files.example.com/solution.zip"),
        )

    def test_empty_essay_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_answers(_assignment("essay"), EssayAnswers())
        assert exc_info.value.code == "empty_submission"

    def test_essay_text_only_accepted(self) -> None:
        validate_answers(_assignment("essay"), EssayAnswers(text="My essay"))

    def test_blank_quiz_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Answer at least one question"):
            validate_answers(_assignment("quiz"), QuizAnswers(answers=["", " "]))

    def test_quiz_keeps_answer_order(self) -> None:
        answers = QuizAnswers(answers=["b", "", "d"])
        validate_answers(_assignment("quiz"), answers)
        assert answers.answers == ["b", "", "d"]


class TestTypeMatch:
    def test_mismatched_type_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_answers(_assignment("quiz"), EssayAnswers(text="essay"))
        assert exc_info.value.code == "answers_type_mismatch"


class TestAcceptedFormats:
    """File URLs are checked against the assignment's formats."""

    def test_any_format_when_list_empty(self) -> None:
        ensure_accepted_format("https://files.example.com/a.exe", [])

    def test_matching_extension(self) -> None:
        ensure_accepted_format("https://files.example.com/essay.PDF?sig=1", ["PDF"])

    def test_rejected_extension(self) -> None:
        with pytest.raises(ValidationError, match="allowed formats: DOCX, PDF"):
            ensure_accepted_format("https://files.example.com/essay.txt", ["PDF", "DOCX"])

    def test_link_accepts_any_http_url(self) -> None:
        ensure_accepted_format("https://github.com/learner/project", ["LINK"])

    def test_relative_storage_url_accepted(self) -> None:
        ensure_accepted_format("/uploads/submissions/u1/report.pdf", [])
        ensure_accepted_format("/uploads/submissions/u1/report.pdf", ["PDF"])

    def test_relative_storage_url_with_wrong_extension(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ensure_accepted_format("/uploads/submissions/u1/report.zip", ["PDF"])
        assert exc_info.value.code == "unsupported_format"

    def test_extensionless_url_accepted(self) -> None:
        ensure_accepted_format("https://cdn.example.com/files/8f3a2b", ["PDF"])

    def test_unknown_extension_accepted(self) -> None:
        ensure_accepted_format("https://cdn.example.com/files/report.v2", ["PDF"])

    def test_file_only_submission_with_storage_url(self) -> None:
        validate_answers(
            _assignment("coding"),
            CodingAnswers(file_url="/uploads/submissions/u1/report.pdf"),
        )
        validate_answers(
            _assignment("essay", formats=["PDF"]),
            EssayAnswers(file_url="https://cdn.example.com/files/8f3a2b"),
        )

    def test_validate_answers_checks_format(self) -> None:
        assignment = _assignment("essay", formats=["pdf"])
        with pytest.raises(ValidationError):
            validate_answers(
                assignment,
                EssayAnswers(file_url="https://files.example.com/essay.docx"),
            )
