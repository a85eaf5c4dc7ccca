"""
Surveys Module - Question Builder
In-memory ordered list of question drafts, saved with the survey in one go.

Every operation leaves order_index as a dense 0..n-1 sequence.
"""

from modules.surveys.models import (
    QUESTION_TYPES, CHOICE_TYPES, DEFAULT_MIN_RATING, DEFAULT_MAX_RATING
)
from utils.exceptions import ValidationError, NotFound


def normalize_options(options):
    """
    Normalises an option list to [{'id': str, 'label': str}, ...]

    Accepts plain strings or {'id', 'label'} objects; missing ids are
    generated as o1, o2, ... skipping ids already in use.

    Raises:
        ValidationError: fewer than two options or an empty label
    """
    options = list(options or [])
    if len(options) < 2:
        raise ValidationError('Choice questions need at least two options')

    labels = []
    given_ids = []
    for opt in options:
        if isinstance(opt, dict):
            label = opt.get('label')
            opt_id = opt.get('id')
        else:
            label = opt
            opt_id = None
        label = str(label).strip() if label is not None else ''
        if not label:
            raise ValidationError('Option text cannot be empty')
        labels.append(label)
        given_ids.append(str(opt_id) if opt_id not in (None, '') else None)

    used = {i for i in given_ids if i is not None}
    if len(used) != len([i for i in given_ids if i is not None]):
        raise ValidationError('Option ids must be unique')

    normalized = []
    counter = 1
    for label, opt_id in zip(labels, given_ids):
        if opt_id is None:
            while f'o{counter}' in used:
                counter += 1
            opt_id = f'o{counter}'
            used.add(opt_id)
        normalized.append({'id': opt_id, 'label': label})
    return normalized


def _parse_bound(value, default, name):
    if value is None or value == '':
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{name} must be a whole number')


def validate_draft(draft):
    """
    Validates one question draft and returns its normalised form

    Args:
        draft (dict): question_text, question_type, is_required, options,
            min_rating, max_rating (id is kept as given)

    Returns:
        dict: Normalised draft (without order_index)

    Raises:
        ValidationError
    """
    if not isinstance(draft, dict):
        raise ValidationError('Question must be an object')

    text = (draft.get('question_text') or '').strip()
    if not text:
        raise ValidationError('Question text cannot be empty')

    question_type = draft.get('question_type') or 'multiple_choice'
    if question_type not in QUESTION_TYPES:
        raise ValidationError(f'Unknown question type: {question_type}')

    normalized = {
        'id': draft.get('id'),
        'question_text': text,
        'question_type': question_type,
        'is_required': bool(draft.get('is_required', False)),
        'options': None,
        'min_rating': None,
        'max_rating': None,
    }

    if question_type in CHOICE_TYPES:
        normalized['options'] = normalize_options(draft.get('options'))

    if question_type == 'rating_scale':
        settings = draft.get('settings') or {}
        low = _parse_bound(draft.get('min_rating', settings.get('min_rating')), DEFAULT_MIN_RATING, 'min_rating')
        high = _parse_bound(draft.get('max_rating', settings.get('max_rating')), DEFAULT_MAX_RATING, 'max_rating')
        if low >= high:
            raise ValidationError('min_rating must be lower than max_rating')
        normalized['min_rating'] = low
        normalized['max_rating'] = high

    return normalized


class QuestionBuilder:
    """Ordered, validated list of question drafts"""

    def __init__(self, drafts=None):
        self._items = []
        self._next_key = 1
        for draft in drafts or []:
            self.append(draft)

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(self.questions)

    @property
    def questions(self):
        return [dict(item) for item in self._items]

    def _new_key(self):
        key = f'draft-{self._next_key}'
        self._next_key += 1
        return key

    def _index_of(self, draft_id):
        for index, item in enumerate(self._items):
            if item['id'] == draft_id:
                return index
        raise NotFound(f'Question {draft_id} is not in the builder')

    def _renumber(self):
        for index, item in enumerate(self._items):
            item['order_index'] = index

    def append(self, draft):
        """Validates and appends a draft at the end of the list"""
        item = validate_draft(draft)
        if item['id'] is None:
            item['id'] = self._new_key()
        elif any(existing['id'] == item['id'] for existing in self._items):
            raise ValidationError(f'Duplicate question id: {item["id"]}')
        item['order_index'] = len(self._items)
        self._items.append(item)
        return dict(item)

    def edit(self, draft_id, draft):
        """Replaces the draft with the given id, keeping its id and position"""
        index = self._index_of(draft_id)
        item = validate_draft(draft)
        item['id'] = draft_id
        item['order_index'] = self._items[index]['order_index']
        self._items[index] = item
        return dict(item)

    def delete(self, draft_id):
        """Removes a draft and closes the gap in order indices"""
        index = self._index_of(draft_id)
        del self._items[index]
        self._renumber()

    def move(self, index, direction):
        """
        Swaps the draft at index with its neighbour

        Args:
            index (int): Position of the draft
            direction (int): -1 (up) or +1 (down)

        Returns:
            bool: False when the move would leave the list bounds
        """
        if direction not in (-1, 1):
            raise ValidationError('direction must be -1 or 1')
        if not 0 <= index < len(self._items):
            raise ValidationError(f'No question at position {index}')

        target = index + direction
        if not 0 <= target < len(self._items):
            return False

        self._items[index], self._items[target] = self._items[target], self._items[index]
        self._renumber()
        return True

    def to_payload(self):
        """Drafts ready to persist, in order"""
        return self.questions
