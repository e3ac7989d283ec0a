# app/services/answer_validation.py
import math
from typing import Any, Iterable, Mapping

from mentorfeed.app.core.errors import InvalidOptionValue, InvalidRatingValue, MissingRequiredAnswer
from mentorfeed.app.schemas.question import ChoiceQuestion, Question, RatingQuestion


def is_blank(value: Any) -> bool:
    return value is None or value == ""


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (OverflowError, ValueError):
        # integers beyond float range are never inside a rating interval
        return None
    return None if math.isnan(number) else number


def validate_answers(questions: Iterable[Question], answers: Mapping[str, Any]) -> None:
    """Check a submitted answer map against the form's questions, in form order.

    Answers keyed by ids that are not in the form are left alone.
    """
    for question in questions:
        answer = answers.get(question.id)

        if is_blank(answer):
            if question.required:
                raise MissingRequiredAnswer(question.id, question.label)
            continue

        if isinstance(question, RatingQuestion):
            number = _as_number(answer)
            if number is None or not (question.min_rating <= number <= question.max_rating):
                raise InvalidRatingValue(question.id, question.label, question.min_rating, question.max_rating)

        elif isinstance(question, ChoiceQuestion):
            if not isinstance(answer, str) or answer not in question.options:
                raise InvalidOptionValue(question.id, question.label)
