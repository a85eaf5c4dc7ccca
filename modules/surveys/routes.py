"""
Surveys Module - Routes
Survey list, details, save, delete and status actions
"""

from flask import jsonify, request
from flask_login import current_user

from modules.auth.session import get_session
from modules.surveys import surveys_bp
from modules.surveys.filters import filter_surveys
from modules.surveys.lifecycle import ACTIONS, TRANSITIONS
from modules.surveys.services import (
    visible_surveys_query, get_survey, ensure_can_view,
    save_survey, delete_survey, transition_survey
)
from utils.decorators import staff_required


def _payload():
    return request.get_json(silent=True) or {}


def _truthy(value):
    return value is True or str(value).lower() in ('1', 'true', 'yes')


@surveys_bp.route('/')
@staff_required
def surveys_list():
    """
    Surveys visible to the caller, filtered by search text and status
    GET /surveys/?q=campus&status=active
    """
    identity = get_session()
    surveys = visible_surveys_query(identity).all()

    for survey in surveys:
        survey.check_and_update_status()

    query = request.args.get('q', '')
    status = request.args.get('status', 'all')
    filtered = filter_surveys(surveys, query=query, status=status)

    return jsonify({
        'success': True,
        'surveys': [s.to_dict() for s in filtered],
        'total': len(surveys),
        'filters': {'q': query, 'status': status}
    })


@surveys_bp.route('/<int:survey_id>')
@staff_required
def survey_detail(survey_id):
    """Survey with its ordered questions and allowed next statuses"""
    identity = get_session()
    survey = get_survey(survey_id)
    ensure_can_view(identity, survey)
    survey.check_and_update_status()

    data = survey.to_dict(include_questions=True)
    data['next_statuses'] = sorted(TRANSITIONS[survey.status])

    return jsonify({
        'success': True,
        'survey': data
    })


@surveys_bp.route('/', methods=['POST'])
@staff_required
def survey_create():
    """
    Create a survey with its questions

    Request JSON:
    {
        "title": "...",
        "description": "...",
        "status": "draft",          # ignored for staff, saved as pending
        "is_anonymous": false,
        "start_date": "2026-01-01T09:00",
        "end_date": null,
        "questions": [{"question_text": "...", "question_type": "rating_scale", ...}]
    }
    """
    identity = get_session()
    survey = save_survey(identity, current_user, _payload())

    return jsonify({
        'success': True,
        'survey': survey.to_dict(include_questions=True)
    }), 201


@surveys_bp.route('/<int:survey_id>', methods=['PUT'])
@staff_required
def survey_update(survey_id):
    """Replace a draft or pending survey's details and questions"""
    identity = get_session()
    survey = get_survey(survey_id)
    survey = save_survey(identity, current_user, _payload(), survey=survey)

    return jsonify({
        'success': True,
        'survey': survey.to_dict(include_questions=True)
    })


@surveys_bp.route('/<int:survey_id>', methods=['DELETE'])
@staff_required
def survey_delete(survey_id):
    """
    Delete a survey with its questions and collected responses
    Requires {"confirm": true} in the body or ?confirm=1
    """
    identity = get_session()
    survey = get_survey(survey_id)

    confirmed = _truthy(_payload().get('confirm')) or _truthy(request.args.get('confirm'))
    affected = delete_survey(identity, current_user, survey, confirmed)

    return jsonify({
        'success': True,
        'deleted': affected
    })


@surveys_bp.route('/<int:survey_id>/status', methods=['POST'])
@staff_required
def survey_status(survey_id):
    """
    Apply a status action
    Request JSON: {"action": "publish" | "submit" | "approve" | "reject" | "close" | "archive"}
    """
    identity = get_session()
    survey = get_survey(survey_id)
    action = _payload().get('action')

    survey = transition_survey(identity, current_user, survey, action)

    return jsonify({
        'success': True,
        'survey': survey.to_dict(),
        'actions': sorted(ACTIONS)
    })
