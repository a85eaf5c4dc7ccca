"""
Reports Module - Aggregation
Builds the report document of a survey from its questions and answers.

build_report() does no I/O: it only reads the attributes of the objects it
is given (ORM rows or plain dicts), so the same document feeds the JSON
endpoint and every export format.
"""

from modules.surveys.models import CHOICE_TYPES


def _get(obj, name, default=None):
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def percent(count, total):
    """count / total as a rounded percentage; 0 when there are no responses"""
    if not total:
        return 0
    return round(count / total * 100)


def count_responses(answers):
    """
    Number of distinct responses among the answers

    Answers without a response id count as one response each.
    """
    seen = set()
    loose = 0
    for answer in answers:
        response_id = _get(answer, 'response_id')
        if response_id is None:
            loose += 1
        else:
            seen.add(response_id)
    return len(seen) + loose


def _selected_ids(question_type, value):
    if value is None:
        return []
    if question_type == 'checkbox':
        return [str(v) for v in value] if isinstance(value, (list, tuple)) else [str(value)]
    return [str(value)]


def _choice_section(question, answers, total):
    question_type = _get(question, 'question_type')
    counts = {}
    for answer in answers:
        for option_id in _selected_ids(question_type, _get(answer, 'value')):
            counts[option_id] = counts.get(option_id, 0) + 1

    results = []
    for option in _get(question, 'options') or []:
        count = counts.get(option['id'], 0)
        results.append({
            'option_id': option['id'],
            'option': option['label'],
            'count': count,
            'percent': percent(count, total),
        })
    return {'results': results}


def _rating_section(question, answers, total):
    values = [_get(a, 'value') for a in answers]
    values = [v for v in values if isinstance(v, (int, float)) and not isinstance(v, bool)]
    return {
        'count': len(values),
        'average': round(sum(values) / len(values), 2) if values else None,
    }


def _text_section(question, answers, total):
    values = [_get(a, 'value') for a in answers]
    values = [v for v in values if isinstance(v, str) and v.strip()]
    return {
        'count': len(values),
        'answers': values,
    }


def _section_for(question, answers, total):
    question_type = _get(question, 'question_type')
    if question_type in CHOICE_TYPES:
        body = _choice_section(question, answers, total)
        kind = 'distribution'
    elif question_type == 'rating_scale':
        body = _rating_section(question, answers, total)
        kind = 'rating'
    else:
        body = _text_section(question, answers, total)
        kind = 'text'

    section = {
        'question_id': _get(question, 'id'),
        'question_text': _get(question, 'question_text'),
        'question_type': question_type,
        'kind': kind,
    }
    section.update(body)
    return section


def build_report(survey, questions, answers, per_page=5):
    """
    Report document of a survey

    Args:
        survey: Survey (id, title, description, status)
        questions: Questions of the survey, any order
        answers: Every answer of the survey (question_id, response_id, value)
        per_page (int): Question sections per page

    Returns:
        dict: {
            'survey': {...},
            'summary': {'total_responses', 'question_count'},
            'pages': [{'number': 1, 'sections': [...]}, ...]
        }
    """
    if per_page < 1:
        raise ValueError('per_page must be at least 1')

    answers = list(answers)
    total = count_responses(answers)

    by_question = {}
    for answer in answers:
        by_question.setdefault(_get(answer, 'question_id'), []).append(answer)

    ordered = sorted(questions, key=lambda q: (_get(q, 'order_index') or 0, _get(q, 'id') or 0))
    sections = [_section_for(q, by_question.get(_get(q, 'id'), []), total) for q in ordered]

    pages = [
        {'number': index // per_page + 1, 'sections': sections[index:index + per_page]}
        for index in range(0, len(sections), per_page)
    ]

    return {
        'survey': {
            'id': _get(survey, 'id'),
            'title': _get(survey, 'title'),
            'description': _get(survey, 'description'),
            'status': _get(survey, 'status'),
        },
        'summary': {
            'total_responses': total,
            'question_count': len(sections),
        },
        'pages': pages,
    }
