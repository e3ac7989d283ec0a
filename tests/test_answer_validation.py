"""
Tests for answer validation against a form's questions
"""
import pytest

from mentorfeed.app.core.errors import InvalidOptionValue, InvalidRatingValue, MissingRequiredAnswer
from mentorfeed.app.services.answer_validation import validate_answers
from mentorfeed.app.services.form_validation import validate_form


@pytest.fixture
def questions():
    return validate_form([
        {'id': 'rate', 'type': 'rating', 'label': 'Overall', 'required': True, 'minRating': 1, 'maxRating': 5},
        {'id': 'topic', 'type': 'select', 'label': 'Topic', 'options': ['Career', 'Tech']},
        {'id': 'goal', 'type': 'radio', 'label': 'Goal met', 'required': True, 'options': ['Yes', 'No']},
        {'id': 'notes', 'type': 'textarea', 'label': 'Notes'},
    ])


def test_complete_valid_answers_pass(questions):
    validate_answers(questions, {'rate': 4, 'topic': 'Tech', 'goal': 'Yes', 'notes': 'x' * 5000})


@pytest.mark.parametrize('missing', [None, '', 'absent'])
def test_missing_required_answer(questions, missing):
    answers = {'goal': 'Yes'}
    if missing != 'absent':
        answers['rate'] = missing
    with pytest.raises(MissingRequiredAnswer) as exc:
        validate_answers(questions, answers)
    assert exc.value.field == 'rate'
    assert exc.value.message == 'Answer required for question: Overall'


def test_questions_checked_in_form_order(questions):
    # the bad rating comes before the missing required radio answer
    with pytest.raises(InvalidRatingValue):
        validate_answers(questions, {'rate': 9})


@pytest.mark.parametrize('value', [1, 5, 3.5, '2', ' 4 '])
def test_rating_inside_closed_interval(questions, value):
    validate_answers(questions, {'rate': value, 'goal': 'No'})


@pytest.mark.parametrize('value', [0, 6, '6', 'five', True, 'nan', [3]])
def test_rating_outside_interval_or_not_a_number(questions, value):
    with pytest.raises(InvalidRatingValue) as exc:
        validate_answers(questions, {'rate': value, 'goal': 'No'})
    assert exc.value.field == 'rate'
    assert 'Must be between 1 and 5' in exc.value.message


@pytest.mark.parametrize('value', [10 ** 400, -(10 ** 400), '1e400'])
def test_rating_beyond_float_range(questions, value):
    with pytest.raises(InvalidRatingValue) as exc:
        validate_answers(questions, {'rate': value, 'goal': 'No'})
    assert exc.value.field == 'rate'


@pytest.mark.parametrize('value', ['tech', 'Tech ', 'Sports', 1])
def test_option_must_match_exactly(questions, value):
    with pytest.raises(InvalidOptionValue) as exc:
        validate_answers(questions, {'rate': 3, 'goal': 'Yes', 'topic': value})
    assert exc.value.field == 'topic'


def test_optional_questions_may_be_blank(questions):
    validate_answers(questions, {'rate': 3, 'goal': 'Yes', 'topic': '', 'notes': None})


def test_unknown_answer_ids_are_ignored(questions):
    validate_answers(questions, {'rate': 3, 'goal': 'Yes', 'stale-question': 'whatever'})
