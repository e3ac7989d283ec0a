"""Structural checks for questions and whole feedback form definitions.

`validate_question` turns an untrusted mapping (API payload or extractor
output) into a typed question; `validate_form` checks an ordered question
list before it may be stored.
"""
# app/services/form_validation.py
from typing import Any, Iterable, Mapping, Optional
from pydantic import ValidationError

from mentorfeed.app.core.errors import DuplicateQuestionId, EmptyForm, InvalidQuestion
from mentorfeed.app.schemas.question import QUESTION_TYPES, Question, question_adapter


def _describe(err: ValidationError) -> str:
    first = err.errors()[0]
    loc = [str(part) for part in first.get("loc", ()) if str(part) not in QUESTION_TYPES]
    where = ".".join(loc)
    if first.get("type") in ("union_tag_invalid", "union_tag_not_found"):
        return f"type must be one of: {', '.join(QUESTION_TYPES)}"
    msg = first.get("msg", "invalid value")
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    return f"{where}: {msg}" if where else msg


def validate_question(candidate: Any, position: Optional[int] = None) -> Question:
    """Validate a single candidate question.

    Args:
        candidate: A mapping in wire shape (`id`, `type`, `label`, ...).
        position: 1-based position in the parent form, used in the message.

    Returns:
        Question: The typed question model.

    Raises:
        InvalidQuestion: The candidate is not a well-formed question.
    """
    label = candidate.get("label") if isinstance(candidate, Mapping) else None
    question_id = candidate.get("id") if isinstance(candidate, Mapping) else None
    label = label if isinstance(label, str) and label.strip() else None
    question_id = question_id if isinstance(question_id, str) else None

    try:
        return question_adapter.validate_python(candidate)
    except ValidationError as e:
        prefix = "Question"
        if position is not None:
            prefix += f" {position}"
        if label:
            prefix += f' "{label}"'
        raise InvalidQuestion(f"{prefix} is invalid: {_describe(e)}", position=position, label=label, question_id=question_id) from e


def validate_form(candidates: Iterable[Any]) -> list[Question]:
    """Validate an ordered list of candidate questions as one form.

    Raises:
        EmptyForm: The list is empty.
        InvalidQuestion: The first malformed question.
        DuplicateQuestionId: Two questions share an id.
    """
    candidates = list(candidates or [])
    if not candidates:
        raise EmptyForm()

    questions: list[Question] = []
    seen: set[str] = set()
    for idx, candidate in enumerate(candidates, start=1):
        question = validate_question(candidate, position=idx)
        if question.id in seen:
            raise DuplicateQuestionId(question.id)
        seen.add(question.id)
        questions.append(question)
    return questions
