"""Answer normalisation and display rules per question type."""
from __future__ import annotations

import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Tuple

from questions.models import Question

ALLOWED_FILE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "pdf", "doc", "docx"})
MAX_FILE_BYTES = 10 * 1024 * 1024
EMPTY_DISPLAY = "—"

REQUIRED = "Required"


class AnswerError(ValueError):
    pass


def _option_values(question: Question) -> List[str]:
    return [option.value for option in question.options.all()]


def _clean_checkbox(question: Question, value: Any) -> List[str]:
    if value in (None, ""):
        return []
    if not isinstance(value, list):
        raise AnswerError("Expected a list of option values.")
    values = [str(item) for item in value]
    allowed = _option_values(question)
    unknown = [item for item in values if item not in allowed]
    if unknown:
        raise AnswerError(f"Unknown option(s): {', '.join(unknown)}.")
    return values


def _clean_files(question: Question, value: Any) -> List[Dict[str, Any]]:
    if value in (None, ""):
        return []
    if not isinstance(value, list):
        raise AnswerError("Expected a list of file descriptions.")
    if len(value) > 1 and not question.file_multiple:
        raise AnswerError("Only one file may be attached.")
    files: List[Dict[str, Any]] = []
    for item in value:
        if not isinstance(item, dict) or not item.get("name"):
            raise AnswerError("Each file needs a name.")
        name = str(item["name"])
        extension = name.rsplit(".", 1)[-1].lower() if "." in name else ""
        if extension not in ALLOWED_FILE_EXTENSIONS:
            allowed = ",".join(f".{ext}" for ext in sorted(ALLOWED_FILE_EXTENSIONS))
            raise AnswerError(f"Only {allowed} allowed.")
        try:
            size = int(item.get("size") or 0)
        except (TypeError, ValueError):
            raise AnswerError("File size must be a number of bytes.") from None
        if size > MAX_FILE_BYTES:
            raise AnswerError(f"Each file must be <= {MAX_FILE_BYTES // (1024 * 1024)} MB.")
        files.append({"name": name, "size": size, "type": str(item.get("type") or "")})
    return files


def _clean_scalar(question: Question, value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, dict)):
        raise AnswerError("Expected a single value.")
    text = str(value).strip()
    if not text:
        return ""
    if question.question_type in (Question.RADIO, Question.SELECT):
        if text not in _option_values(question):
            raise AnswerError(f"Unknown option: {text}.")
    elif question.question_type == Question.NUMBER:
        try:
            Decimal(text)
        except InvalidOperation:
            raise AnswerError("Enter a number.") from None
    elif question.question_type == Question.DATE:
        try:
            datetime.date.fromisoformat(text)
        except ValueError:
            raise AnswerError("Enter a date as YYYY-MM-DD.") from None
    return text


def clean_answer(question: Question, value: Any) -> Any:
    """Normalise one raw answer, raising ``AnswerError`` when it is unusable."""

    if question.question_type == Question.CHECKBOX:
        cleaned: Any = _clean_checkbox(question, value)
    elif question.question_type == Question.FILE:
        cleaned = _clean_files(question, value)
    else:
        cleaned = _clean_scalar(question, value)
    if question.required and not cleaned:
        raise AnswerError(REQUIRED)
    return cleaned


def clean_answers(
    questions: Iterable[Question], raw: Dict[str, Any]
) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """Validate a respondent's answers against the questions placed on a form.

    Returns ``(answers, errors)`` keyed by question id as a string. Every
    question on the form gets an entry in ``answers``; keys in ``raw`` that
    are not on the form are reported as errors.
    """

    by_id = {str(question.pk): question for question in questions}
    answers: Dict[str, Any] = {}
    errors: Dict[str, str] = {}
    for key in raw:
        if str(key) not in by_id:
            errors[str(key)] = "Question is not on this form."
    for key, question in by_id.items():
        try:
            answers[key] = clean_answer(question, raw.get(key))
        except AnswerError as exc:
            errors[key] = str(exc)
    return answers, errors


def display_value(question: Question, value: Any) -> str:
    """Human-readable form of a stored answer, mapping option values to labels."""

    labels: Dict[str, str] = {}
    if question.has_options:
        labels = {option.value: option.label for option in question.options.all()}
    if question.question_type == Question.CHECKBOX:
        items = value if isinstance(value, list) else []
        shown = [labels[str(item)] for item in items if str(item) in labels]
        return ", ".join(shown) if shown else EMPTY_DISPLAY
    if question.question_type in (Question.RADIO, Question.SELECT):
        text = "" if value is None else str(value)
        return labels.get(text) or text or EMPTY_DISPLAY
    if question.question_type == Question.FILE:
        files = value if isinstance(value, list) else []
        if not files:
            return EMPTY_DISPLAY
        return ", ".join(
            str(item.get("name", "[file]")) if isinstance(item, dict) else "[file]" for item in files
        )
    text = "" if value is None else str(value)
    return text or EMPTY_DISPLAY
