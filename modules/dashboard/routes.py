"""
Dashboard Module - Routes
Landing view per role with summary widgets
"""

from datetime import datetime, timedelta

from flask import jsonify, redirect, url_for, current_app
from flask_login import current_user
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from modules.auth.models import User
from modules.auth.roles import Role
from modules.auth.session import get_session
from modules.dashboard import dashboard_bp
from modules.responses.models import SurveyResponse
from modules.responses.services import available_surveys, answered_survey_ids
from modules.surveys.models import Survey
from utils.decorators import login_required, role_required


RECENT_LIMIT = 5
ACTIVE_USER_DAYS = 7

ROLE_DASHBOARDS = {
    Role.ADMIN: 'dashboard.admin',
    Role.STAFF: 'dashboard.staff',
    Role.STUDENT: 'dashboard.student',
}


def _widget(name, loader, fallback):
    """Runs a read-only widget query; logs and returns the fallback on failure"""
    try:
        return loader()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f'Dashboard widget {name} failed: {e}')
        return fallback


@dashboard_bp.route('/')
@login_required
def index():
    """Redirects to the dashboard of the current role"""
    identity = get_session()
    return redirect(url_for(ROLE_DASHBOARDS[identity.role]))


@dashboard_bp.route('/admin')
@role_required(Role.ADMIN)
def admin():
    """Totals across the whole system plus recent activity"""
    since = datetime.utcnow() - timedelta(days=ACTIVE_USER_DAYS)

    def stats():
        return {
            'total_users': User.query.count(),
            'active_users': User.query.filter(User.last_login >= since).count(),
            'total_surveys': Survey.query.count(),
            'total_responses': SurveyResponse.query.count(),
        }

    def recent_surveys():
        surveys = Survey.query.order_by(Survey.created_at.desc(), Survey.id.desc()).limit(RECENT_LIMIT).all()
        return [s.to_dict() for s in surveys]

    def recent_users():
        users = User.query.order_by(User.created_at.desc(), User.id.desc()).limit(RECENT_LIMIT).all()
        return [u.to_dict() for u in users]

    return jsonify({
        'success': True,
        'stats': _widget('admin_stats', stats, {}),
        'recent_surveys': _widget('recent_surveys', recent_surveys, []),
        'recent_users': _widget('recent_users', recent_users, [])
    })


@dashboard_bp.route('/staff')
@role_required(Role.STAFF)
def staff():
    """Own surveys, responses collected by them, surveys waiting for approval"""
    def stats():
        own = Survey.query.filter_by(created_by=current_user.id)
        responses = (
            db.session.query(func.count(SurveyResponse.id))
            .join(Survey, Survey.id == SurveyResponse.survey_id)
            .filter(Survey.created_by == current_user.id)
            .scalar()
        )
        return {
            'my_surveys': own.count(),
            'total_responses': responses or 0,
            'pending_reviews': own.filter(Survey.status == 'pending').count(),
            'active_surveys': own.filter(Survey.status == 'active').count(),
        }

    def recent_surveys():
        surveys = (
            Survey.query.filter_by(created_by=current_user.id)
            .order_by(Survey.created_at.desc(), Survey.id.desc())
            .limit(RECENT_LIMIT)
            .all()
        )
        return [s.to_dict() for s in surveys]

    return jsonify({
        'success': True,
        'stats': _widget('staff_stats', stats, {}),
        'recent_surveys': _widget('staff_recent_surveys', recent_surveys, [])
    })


@dashboard_bp.route('/student')
@role_required(Role.STUDENT)
def student():
    """Surveys still to answer and surveys already completed"""
    def overview():
        answered = answered_survey_ids(current_user.id)
        surveys = available_surveys()
        return {
            'available': [s.to_dict() for s in surveys if s.id not in answered],
            'completed_count': len(answered),
        }

    data = _widget('student_overview', overview, {'available': [], 'completed_count': 0})

    return jsonify({
        'success': True,
        'available_surveys': data['available'],
        'stats': {
            'available': len(data['available']),
            'completed': data['completed_count'],
        }
    })
