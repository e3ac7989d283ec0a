"""
Tests for whole-form validation
"""
import pytest

from mentorfeed.app.core.errors import DuplicateQuestionId, EmptyForm, InvalidQuestion
from mentorfeed.app.services.form_validation import validate_form


def _text(qid, label='Question'):
    return {'id': qid, 'type': 'text', 'label': label}


def test_empty_form_is_rejected():
    with pytest.raises(EmptyForm):
        validate_form([])


def test_returns_typed_questions_in_order():
    questions = validate_form([_text('a'), {'id': 'b', 'type': 'radio', 'label': 'R', 'options': ['x']}, _text('c')])
    assert [q.id for q in questions] == ['a', 'b', 'c']
    assert questions[1].type == 'radio'


def test_duplicate_ids_are_rejected():
    with pytest.raises(DuplicateQuestionId) as exc:
        validate_form([_text('a'), _text('b'), _text('a')])
    assert exc.value.field == 'a'
    assert '(duplicate: a)' in exc.value.message


def test_first_invalid_question_aborts():
    with pytest.raises(InvalidQuestion) as exc:
        validate_form([
            _text('a'),
            {'id': 'b', 'type': 'select', 'label': 'Broken select', 'options': []},
            {'id': 'c', 'type': 'rating', 'label': 'Broken rating', 'minRating': 5, 'maxRating': 1},
        ])
    assert exc.value.position == 2
    assert exc.value.label == 'Broken select'


def test_invalid_question_reported_before_later_duplicate():
    with pytest.raises(InvalidQuestion):
        validate_form([_text('a'), {'id': 'b', 'type': 'nope', 'label': 'x'}, _text('a')])
