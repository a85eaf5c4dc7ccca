"""
Surveys Module - Services
Survey mutations: save, delete, status transitions.

Every policy is applied here, at save time, never taken from the client:
the staff 'pending' override, ownership, and the status state machine.
"""

from flask import current_app

from extensions import db
from modules.auth.roles import Role
from modules.notifications.services import notify_role, notify_users, dispatch_emails
from modules.surveys.builder import QuestionBuilder
from modules.surveys.forms import SurveyDetailsForm
from modules.surveys.lifecycle import (
    INITIAL_STATUSES, can_transition, check_transition, effective_status, resolve_target
)
from modules.surveys.models import Survey, Question
from utils.activity_logger import log_activity, log_survey_status_change
from utils.exceptions import ValidationError, PermissionDenied, NotFound, InvalidTransition


# ============================================
# Lookup & Access
# ============================================

def visible_surveys_query(identity):
    """Admins see every survey, everybody else only their own"""
    query = Survey.query
    if identity.role is not Role.ADMIN:
        query = query.filter(Survey.created_by == identity.id)
    return query.order_by(Survey.created_at.desc(), Survey.id.desc())


def get_survey(survey_id):
    survey = db.session.get(Survey, survey_id)
    if survey is None:
        raise NotFound('Survey not found')
    return survey


def ensure_can_view(identity, survey):
    if identity.role is Role.ADMIN or survey.created_by == identity.id:
        return
    raise PermissionDenied('You do not have access to this survey')


def ensure_can_manage(identity, survey):
    """Admins manage any survey; staff only their own; students none"""
    if identity.role is Role.ADMIN:
        return
    if identity.role is Role.STAFF and survey.created_by == identity.id:
        return
    raise PermissionDenied('You cannot modify this survey')


# ============================================
# Save (create / update)
# ============================================

def _parse_details(identity, payload):
    exclude = ('questions',)
    if identity.role is Role.STAFF:
        exclude += ('status',)
    form = SurveyDetailsForm.from_payload(payload, exclude=exclude)
    if not form.validate():
        raise ValidationError('Survey details are invalid', details=form.errors)
    return form


def _build_questions(payload):
    drafts = payload.get('questions') or []
    if not isinstance(drafts, list):
        raise ValidationError('questions must be a list')

    builder = QuestionBuilder()
    for index, draft in enumerate(drafts):
        try:
            builder.append(draft)
        except ValidationError as e:
            raise ValidationError(f'Question {index + 1}: {e.message}', details={'index': index})
    return builder


def _replace_questions(survey, builder):
    survey.questions.clear()
    db.session.flush()
    for draft in builder.to_payload():
        survey.questions.append(Question(
            question_text=draft['question_text'],
            question_type=draft['question_type'],
            is_required=draft['is_required'],
            options=draft['options'],
            min_rating=draft['min_rating'],
            max_rating=draft['max_rating'],
            order_index=draft['order_index'],
        ))


def _notify_status(survey, actor, new_status):
    """Notifications that follow a status change; returns the new rows"""
    notifications = []
    if new_status == 'pending':
        notifications += notify_role(
            Role.ADMIN,
            f'Survey "{survey.title}" was submitted for approval by {actor.full_name}.',
            exclude_user_id=actor.id
        )
    elif new_status == 'active':
        notifications += notify_role(Role.STUDENT, f'New survey available: "{survey.title}".')
        if survey.created_by != actor.id and survey.owner is not None:
            notifications += notify_users([survey.owner], f'Your survey "{survey.title}" was approved.')
    elif new_status == 'draft' and survey.created_by != actor.id and survey.owner is not None:
        notifications += notify_users([survey.owner], f'Your survey "{survey.title}" was sent back to draft.')
    return notifications


def save_survey(identity, actor, payload, survey=None):
    """
    Creates or updates a survey with its full question list in one transaction

    Args:
        identity (SessionIdentity): Caller
        actor (User): Caller's user row
        payload (dict): Details plus 'questions'
        survey (Survey|None): Survey to update, None to create

    Returns:
        Survey
    """
    payload = payload or {}

    if identity.role is Role.STUDENT:
        raise PermissionDenied('Students cannot create or edit surveys')

    if survey is not None:
        ensure_can_manage(identity, survey)
        if not survey.is_editable:
            raise InvalidTransition(f'A {survey.status} survey can no longer be edited')

    form = _parse_details(identity, payload)
    builder = _build_questions(payload)

    # An update without a status keeps the current one
    requested = form.status.data or (survey.status if survey is not None else None)
    status = effective_status(identity.role, requested)
    if status not in INITIAL_STATUSES:
        raise ValidationError(f'A survey cannot be saved as {status}')

    if status != 'draft' and len(builder) == 0:
        raise ValidationError('Add at least one question before publishing')

    old_status = survey.status if survey is not None else None
    if survey is not None and status != old_status and not can_transition(old_status, status):
        raise InvalidTransition(f'Cannot move a survey from {old_status} to {status}')

    is_new = survey is None
    if is_new:
        survey = Survey(created_by=actor.id)
        db.session.add(survey)

    survey.title = form.title.data.strip()
    survey.description = (form.description.data or '').strip() or None
    survey.is_anonymous = form.is_anonymous.data
    survey.start_date = form.start_date.data
    survey.end_date = form.end_date.data
    survey.status = status

    try:
        _replace_questions(survey, builder)
        db.session.flush()

        notifications = []
        if status != old_status:
            notifications = _notify_status(survey, actor, status)

        log_activity(
            user=actor,
            action='survey_created' if is_new else 'survey_updated',
            entity_type='survey',
            entity_id=survey.id,
            old_value={'status': old_status} if old_status else None,
            new_value={'title': survey.title, 'status': status, 'questions': len(builder)},
            commit=False
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    dispatch_emails(notifications)
    current_app.logger.info(f'Survey {survey.id} saved by user {actor.id} with status {status}')
    return survey


# ============================================
# Delete
# ============================================

def delete_survey(identity, actor, survey, confirmed):
    """
    Deletes a survey with its questions, responses and answers

    Args:
        confirmed (bool): Explicit confirmation from the client

    Returns:
        dict: Rows removed per table, counted inside the same transaction
    """
    from modules.responses.models import SurveyResponse, SurveyAnswer

    ensure_can_manage(identity, survey)
    if not confirmed:
        raise ValidationError('Deleting a survey is irreversible; send "confirm": true')

    survey_id = survey.id
    try:
        affected = {
            'surveys': 1,
            'questions': Question.query.filter_by(survey_id=survey_id).count(),
            'responses': SurveyResponse.query.filter_by(survey_id=survey_id).count(),
            'answers': SurveyAnswer.query.filter_by(survey_id=survey_id).count(),
        }

        db.session.delete(survey)
        db.session.flush()

        remaining = (
            Question.query.filter_by(survey_id=survey_id).count()
            + SurveyResponse.query.filter_by(survey_id=survey_id).count()
            + SurveyAnswer.query.filter_by(survey_id=survey_id).count()
        )
        if remaining:
            raise RuntimeError(f'Cascade delete of survey {survey_id} left {remaining} rows')

        log_activity(
            user=actor,
            action='survey_deleted',
            entity_type='survey',
            entity_id=survey_id,
            old_value={'title': survey.title, **affected},
            commit=False
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(f'Survey {survey_id} deleted by user {actor.id}: {affected}')
    return affected


# ============================================
# Status Transitions
# ============================================

def transition_survey(identity, actor, survey, action):
    """
    Applies a status action after validating it against the state machine

    Returns:
        Survey
    """
    ensure_can_manage(identity, survey)

    target = resolve_target(action, identity.role)
    check_transition(survey, target, identity.role, len(survey.questions))

    old_status = survey.status
    survey.status = target

    try:
        notifications = _notify_status(survey, actor, target)
        log_survey_status_change(actor, survey, old_status, target, commit=False)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    dispatch_emails(notifications)
    current_app.logger.info(f'Survey {survey.id}: {old_status} -> {target} by user {actor.id}')
    return survey
