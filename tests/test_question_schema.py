"""
Tests for the question model and single-question validation
"""
import pytest

from mentorfeed.app.core.errors import InvalidQuestion
from mentorfeed.app.schemas.question import (
    RadioQuestion, RatingQuestion, SelectQuestion, TextQuestion, TextareaQuestion, question_to_wire,
)
from mentorfeed.app.services.form_validation import validate_question


class TestAcceptedQuestions:
    def test_text_and_textarea(self):
        assert isinstance(validate_question({'id': 'a', 'type': 'text', 'label': 'Name'}), TextQuestion)
        q = validate_question({'id': 'b', 'type': 'textarea', 'label': 'Notes', 'required': True})
        assert isinstance(q, TextareaQuestion)
        assert q.required is True

    def test_required_defaults_to_false(self):
        assert validate_question({'id': 'a', 'type': 'text', 'label': 'Name'}).required is False

    @pytest.mark.parametrize('kind, model', [('select', SelectQuestion), ('radio', RadioQuestion)])
    def test_choice_questions_keep_option_order(self, kind, model):
        q = validate_question({'id': 'c', 'type': kind, 'label': 'Pick', 'options': ['b', 'a', 'c']})
        assert isinstance(q, model)
        assert q.options == ['b', 'a', 'c']

    def test_rating_uses_camel_case_on_the_wire(self):
        q = validate_question({'id': 'r', 'type': 'rating', 'label': 'Score', 'minRating': 1, 'maxRating': 10})
        assert isinstance(q, RatingQuestion)
        assert (q.min_rating, q.max_rating) == (1, 10)
        assert question_to_wire(q) == {
            'id': 'r', 'type': 'rating', 'label': 'Score', 'required': False, 'minRating': 1, 'maxRating': 10,
        }

    def test_fields_of_other_kinds_are_dropped(self):
        q = validate_question({'id': 't', 'type': 'text', 'label': 'Name', 'options': ['x'], 'minRating': 1})
        assert question_to_wire(q) == {'id': 't', 'type': 'text', 'label': 'Name', 'required': False}

    def test_label_at_length_bound(self):
        assert validate_question({'id': 'a', 'type': 'text', 'label': 'x' * 500})


class TestRejectedQuestions:
    @pytest.mark.parametrize('candidate', [
        {'id': 'a', 'type': 'checkbox', 'label': 'Pick'},
        {'id': 'a', 'label': 'No type'},
        {'id': 'a', 'type': 'text', 'label': ''},
        {'id': 'a', 'type': 'text', 'label': '   '},
        {'id': 'a', 'type': 'text', 'label': 'x' * 501},
        {'id': '', 'type': 'text', 'label': 'Empty id'},
        {'id': 'a', 'type': 'select', 'label': 'Pick'},
        {'id': 'a', 'type': 'radio', 'label': 'Pick', 'options': []},
        {'id': 'a', 'type': 'rating', 'label': 'Score', 'maxRating': 5},
        {'id': 'a', 'type': 'rating', 'label': 'Score', 'minRating': 'low', 'maxRating': 5},
        {'id': 'a', 'type': 'rating', 'label': 'Score', 'minRating': True, 'maxRating': 5},
        {'id': 'a', 'type': 'rating', 'label': 'Score', 'minRating': 1, 'maxRating': '5'},
        {'id': 'a', 'type': 'rating', 'label': 'Score', 'minRating': 5, 'maxRating': 5},
        {'id': 'a', 'type': 'rating', 'label': 'Score', 'minRating': 0, 'maxRating': 5},
        {'id': 'a', 'type': 'rating', 'label': 'Score', 'minRating': 1, 'maxRating': 11},
        'not an object',
    ])
    def test_invalid_candidates(self, candidate):
        with pytest.raises(InvalidQuestion):
            validate_question(candidate)

    def test_message_names_position_and_label(self):
        with pytest.raises(InvalidQuestion) as exc:
            validate_question({'id': 'q7', 'type': 'radio', 'label': 'Favourite topic', 'options': []}, position=3)
        err = exc.value
        assert err.message.startswith('Question 3 "Favourite topic" is invalid')
        assert 'options' in err.message
        assert err.field == 'q7'
        assert err.details == {'position': 3, 'label': 'Favourite topic'}

    def test_unknown_type_lists_recognised_kinds(self):
        with pytest.raises(InvalidQuestion) as exc:
            validate_question({'id': 'a', 'type': 'slider', 'label': 'Pick'})
        assert 'text, textarea, select, radio, rating' in exc.value.message

    def test_min_not_below_max_message(self):
        with pytest.raises(InvalidQuestion) as exc:
            validate_question({'id': 'a', 'type': 'rating', 'label': 'Score', 'minRating': 4, 'maxRating': 2})
        assert 'minRating must be less than maxRating' in exc.value.message
