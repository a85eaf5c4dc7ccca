"""
Activity Logger Utility
Records user activity in the audit trail
"""

import json
from flask import current_app, has_request_context, request
from extensions import db


def log_activity(user=None, action=None, entity_type=None, entity_id=None, old_value=None,
                 new_value=None, commit=True):
    """
    Records one audit entry

    Args:
        user: User object (None for system actions)
        action (str): Action name (e.g. 'survey_created', 'user_updated')
        entity_type (str): Entity type (e.g. 'survey', 'user')
        entity_id (int): Entity ID
        old_value (dict): Previous value (stored as JSON)
        new_value (dict): New value (stored as JSON)
        commit (bool): False when the caller commits the entry with its own transaction

    Returns:
        ActivityLog: The entry, or None on failure
    """
    # Imported here: modules.admin loads its routes, which import this module
    from modules.admin.models import ActivityLog

    try:
        ip_address = None
        user_agent = None

        if has_request_context():
            ip_address = request.remote_addr
            user_agent = request.headers.get('User-Agent', '')[:500]

        activity_log = ActivityLog(
            user_id=user.id if user else None,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            old_value=json.dumps(old_value, ensure_ascii=False, default=str) if old_value else None,
            new_value=json.dumps(new_value, ensure_ascii=False, default=str) if new_value else None,
            ip_address=ip_address,
            user_agent=user_agent
        )

        db.session.add(activity_log)
        if commit:
            db.session.commit()

        return activity_log

    except Exception as e:
        # Audit failures are logged, not raised
        current_app.logger.error(f'ActivityLogger: {e}')
        if commit:
            db.session.rollback()
        return None


def log_login(user):
    """Records a sign-in"""
    return log_activity(
        user=user,
        action='login',
        entity_type='user',
        entity_id=user.id
    )


def log_logout(user):
    """Records a sign-out"""
    return log_activity(
        user=user,
        action='logout',
        entity_type='user',
        entity_id=user.id
    )


def log_survey_status_change(user, survey, old_status, new_status, commit=True):
    """
    Records a survey status change

    Args:
        user: User object
        survey: Survey object
        old_status (str): Previous status
        new_status (str): New status
    """
    return log_activity(
        user=user,
        action='survey_status_change',
        entity_type='survey',
        entity_id=survey.id,
        old_value={'status': old_status},
        new_value={'status': new_status},
        commit=commit
    )
