"""
Responses Module - Answer Shapes
Question type -> input widget, and the answer value each type accepts.
"""

from utils.exceptions import ValidationError


# Total mapping from question type to the widget that collects its answer
WIDGETS = {
    'rating_scale': 'rating',
    'multiple_choice': 'single_select',
    'dropdown': 'dropdown',
    'checkbox': 'multi_select',
    'text_input': 'text',
    'textarea': 'textarea',
}


def widget_for(question_type):
    """Widget for a question type; unknown types are a programming error"""
    try:
        return WIDGETS[question_type]
    except KeyError:
        raise ValueError(f'No widget for question type {question_type!r}')


def is_missing(value):
    """No answer given: None, blank text or an empty selection"""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _rating(question, value):
    if isinstance(value, bool):
        raise ValidationError('Rating must be a whole number')
    if isinstance(value, str) and value.strip().lstrip('-').isdigit():
        value = int(value.strip())
    if not isinstance(value, int):
        raise ValidationError('Rating must be a whole number')

    low, high = question.rating_bounds
    if not low <= value <= high:
        raise ValidationError(f'Rating must be between {low} and {high}')
    return value


def _single_choice(question, value):
    value = str(value)
    if value not in question.option_ids:
        raise ValidationError('Selected option does not exist')
    return value


def _multi_choice(question, value):
    if not isinstance(value, (list, tuple)):
        raise ValidationError('Select one or more options')
    allowed = question.option_ids
    selected = []
    for item in value:
        item = str(item)
        if item not in allowed:
            raise ValidationError('Selected option does not exist')
        if item not in selected:
            selected.append(item)
    return selected


def _text(question, value):
    if not isinstance(value, str):
        raise ValidationError('Answer must be text')
    return value.strip()


_SHAPES = {
    'rating_scale': _rating,
    'multiple_choice': _single_choice,
    'dropdown': _single_choice,
    'checkbox': _multi_choice,
    'text_input': _text,
    'textarea': _text,
}


def clean_answer(question, value):
    """
    Checks an answer against its question's type

    Args:
        question (Question): Answered question
        value: Raw value from the client

    Returns:
        Normalised value, or None when unanswered

    Raises:
        ValidationError: value does not fit the question type
    """
    if is_missing(value):
        return None
    return _SHAPES[question.question_type](question, value)


def missing_required(questions, answers):
    """Required questions without an answer, in display order"""
    return [
        q for q in questions
        if q.is_required and is_missing(answers.get(q.id))
    ]
