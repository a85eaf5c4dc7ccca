"""
Responses Module - Services
Survey availability and response submission
"""

from datetime import datetime

from flask import current_app
from sqlalchemy.exc import IntegrityError

from extensions import db
from modules.responses.answers import clean_answer, missing_required
from modules.responses.models import SurveyResponse, SurveyAnswer
from modules.surveys.models import Survey
from utils.exceptions import ValidationError, NotFound, ConflictError


def available_surveys(now=None):
    """Active surveys whose response window contains now"""
    now = now or datetime.utcnow()
    surveys = Survey.query.filter_by(status='active').order_by(Survey.created_at.desc()).all()

    available = []
    for survey in surveys:
        if survey.check_and_update_status():
            continue
        if survey.is_open_at(now):
            available.append(survey)
    return available


def answered_survey_ids(user_id):
    rows = db.session.query(SurveyResponse.survey_id).filter_by(user_id=user_id).distinct().all()
    return {row[0] for row in rows}


def has_answered(survey, user):
    query = SurveyResponse.query.filter_by(survey_id=survey.id, user_id=user.id)
    return db.session.query(query.exists()).scalar()


def get_open_survey(survey_id):
    survey = db.session.get(Survey, survey_id)
    if survey is None:
        raise NotFound('Survey not found')
    survey.check_and_update_status()
    if not survey.can_respond:
        raise NotFound('This survey is not accepting responses')
    return survey


def _answers_by_question(raw):
    """
    Accepts {"<question_id>": value} or [{"question_id": .., "value": ..}]

    Returns:
        dict: {question_id (int): value}
    """
    if raw is None:
        return {}

    if isinstance(raw, list):
        pairs = []
        for item in raw:
            if not isinstance(item, dict) or 'question_id' not in item:
                raise ValidationError('Each answer needs a question_id')
            pairs.append((item['question_id'], item.get('value')))
    elif isinstance(raw, dict):
        pairs = raw.items()
    else:
        raise ValidationError('answers must be an object or a list')

    answers = {}
    for key, value in pairs:
        try:
            answers[int(key)] = value
        except (TypeError, ValueError):
            raise ValidationError(f'Invalid question id: {key}')
    return answers


def submit_response(survey, user, raw_answers):
    """
    Stores one response with an answer row per question

    Every check runs before anything is written; the response and its
    answers are inserted as one batch and committed together.

    Returns:
        SurveyResponse

    Raises:
        ValidationError: required question unanswered, unknown question or
            an answer that does not fit its question type
        ConflictError: the user already answered this (non-anonymous) survey
    """
    questions = survey.get_questions_ordered()
    answers = _answers_by_question(raw_answers)

    unknown = set(answers) - {q.id for q in questions}
    if unknown:
        raise ValidationError('Answers reference questions outside this survey',
                              details={'question_ids': sorted(unknown)})

    missing = missing_required(questions, answers)
    if missing:
        raise ValidationError(
            'Please answer all required questions before submitting.',
            details={'missing': [q.id for q in missing]}
        )

    cleaned = {}
    errors = {}
    for question in questions:
        try:
            cleaned[question.id] = clean_answer(question, answers.get(question.id))
        except ValidationError as e:
            errors[str(question.id)] = e.message
    if errors:
        raise ValidationError('Some answers are invalid', details=errors)

    if not survey.is_anonymous and has_answered(survey, user):
        raise ConflictError('You have already answered this survey')

    response = SurveyResponse(user_id=None if survey.is_anonymous else user.id)

    try:
        # In the session before it joins Survey.responses
        db.session.add(response)
        with db.session.no_autoflush:
            response.survey = survey
            rows = [
                SurveyAnswer(response=response, survey=survey, question=question, value=cleaned[question.id])
                for question in questions
            ]
        db.session.add_all(rows)
        db.session.commit()
    except IntegrityError:
        # A concurrent submission by the same user committed first
        db.session.rollback()
        raise ConflictError('You have already answered this survey')
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Response to survey {survey.id} failed: {e}')
        raise

    current_app.logger.info(f'Response {response.id} stored for survey {survey.id} ({len(rows)} answers)')
    return response
