"""Question builder: validation and dense ordering"""

import pytest

from modules.surveys.builder import QuestionBuilder, normalize_options, validate_draft
from utils.exceptions import ValidationError, NotFound


def draft(text, question_type='text_input', **extra):
    data = {'question_text': text, 'question_type': question_type}
    data.update(extra)
    return data


def order_of(builder):
    return [q['order_index'] for q in builder.questions]


def texts(builder):
    return [q['question_text'] for q in builder.questions]


@pytest.fixture
def builder():
    return QuestionBuilder([draft('First'), draft('Second'), draft('Third'), draft('Fourth')])


def test_append_assigns_dense_indices(builder):
    assert order_of(builder) == [0, 1, 2, 3]
    assert len({q['id'] for q in builder.questions}) == 4


def test_delete_closes_the_gap(builder):
    builder.delete(builder.questions[1]['id'])

    assert texts(builder) == ['First', 'Third', 'Fourth']
    assert order_of(builder) == [0, 1, 2]


def test_move_swaps_with_neighbour(builder):
    assert builder.move(2, -1) is True
    assert texts(builder) == ['First', 'Third', 'Second', 'Fourth']
    assert order_of(builder) == [0, 1, 2, 3]


def test_move_at_bounds_is_a_no_op(builder):
    assert builder.move(0, -1) is False
    assert builder.move(3, 1) is False
    assert texts(builder) == ['First', 'Second', 'Third', 'Fourth']


def test_move_rejects_bad_arguments(builder):
    with pytest.raises(ValidationError):
        builder.move(9, 1)
    with pytest.raises(ValidationError):
        builder.move(0, 2)


def test_indices_stay_dense_after_mixed_operations(builder):
    builder.move(0, 1)
    builder.delete(builder.questions[0]['id'])
    builder.append(draft('Fifth'))
    builder.move(3, -1)
    builder.delete(builder.questions[-1]['id'])

    assert order_of(builder) == list(range(len(builder)))


def test_edit_keeps_id_and_position(builder):
    target = builder.questions[2]
    edited = builder.edit(target['id'], draft('Third, reworded', 'textarea'))

    assert edited['id'] == target['id']
    assert edited['order_index'] == 2
    assert builder.questions[2]['question_type'] == 'textarea'


def test_unknown_draft_id():
    with pytest.raises(NotFound):
        QuestionBuilder().delete('draft-42')


def test_duplicate_draft_ids_rejected():
    b = QuestionBuilder([draft('One', id='q1')])
    with pytest.raises(ValidationError):
        b.append(draft('Two', id='q1'))


def test_choice_questions_need_two_options():
    with pytest.raises(ValidationError):
        validate_draft(draft('Pick', 'multiple_choice', options=['Only one']))


def test_options_get_generated_ids():
    options = normalize_options(['Library', {'id': 'o1', 'label': 'Lab'}, 'Gym'])

    assert [o['label'] for o in options] == ['Library', 'Lab', 'Gym']
    assert len({o['id'] for o in options}) == 3
    assert options[1]['id'] == 'o1'


def test_empty_option_label_rejected():
    with pytest.raises(ValidationError):
        normalize_options(['Library', '  '])


def test_rating_defaults_and_bounds():
    rating = validate_draft(draft('Rate', 'rating_scale'))
    assert (rating['min_rating'], rating['max_rating']) == (1, 5)

    rating = validate_draft(draft('Rate', 'rating_scale', min_rating=0, max_rating=10))
    assert (rating['min_rating'], rating['max_rating']) == (0, 10)

    with pytest.raises(ValidationError):
        validate_draft(draft('Rate', 'rating_scale', min_rating=5, max_rating=5))


def test_question_text_and_type_validated():
    with pytest.raises(ValidationError):
        validate_draft(draft('   '))
    with pytest.raises(ValidationError):
        validate_draft(draft('Essay', 'essay'))
