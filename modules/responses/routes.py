"""
Responses Module - Routes
Available surveys, survey form, submission and the respondent's history
"""

from flask import jsonify, request
from flask_login import current_user

from modules.auth.roles import Role
from modules.responses import responses_bp
from modules.responses.answers import widget_for
from modules.responses.models import SurveyResponse
from modules.responses.services import (
    available_surveys, answered_survey_ids, get_open_survey, submit_response
)
from utils.decorators import role_required


@responses_bp.route('/available')
@role_required(Role.STUDENT)
def available():
    """
    Surveys the student can answer right now
    Each entry carries 'completed' when the student already responded
    """
    answered = answered_survey_ids(current_user.id)
    surveys = []
    for survey in available_surveys():
        data = survey.to_dict()
        data['completed'] = survey.id in answered
        surveys.append(data)

    return jsonify({
        'success': True,
        'surveys': surveys
    })


@responses_bp.route('/surveys/<int:survey_id>')
@role_required(Role.STUDENT)
def survey_form(survey_id):
    """Survey with ordered questions, each annotated with its input widget"""
    survey = get_open_survey(survey_id)

    questions = []
    for question in survey.get_questions_ordered():
        data = question.to_dict()
        data['widget'] = widget_for(question.question_type)
        questions.append(data)

    data = survey.to_dict()
    data['questions'] = questions

    return jsonify({
        'success': True,
        'survey': data,
        'already_answered': (
            not survey.is_anonymous and survey.id in answered_survey_ids(current_user.id)
        )
    })


@responses_bp.route('/surveys/<int:survey_id>', methods=['POST'])
@role_required(Role.STUDENT)
def survey_submit(survey_id):
    """
    Submit answers

    Request JSON:
    {
        "answers": {"12": 4, "13": "o2", "14": ["o1", "o3"], "15": "Great course"}
    }
    """
    survey = get_open_survey(survey_id)
    payload = request.get_json(silent=True) or {}

    response = submit_response(survey, current_user, payload.get('answers'))

    return jsonify({
        'success': True,
        'response': response.to_dict()
    }), 201


@responses_bp.route('/mine')
@role_required(Role.STUDENT)
def my_responses():
    """Responses submitted by the current user, newest first"""
    responses = (
        SurveyResponse.query
        .filter_by(user_id=current_user.id)
        .order_by(SurveyResponse.submitted_at.desc(), SurveyResponse.id.desc())
        .all()
    )

    return jsonify({
        'success': True,
        'responses': [r.to_dict() for r in responses]
    })
