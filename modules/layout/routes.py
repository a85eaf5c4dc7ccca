"""
Layout Module - Routes
Shell data: profile, role menu, latest notifications
"""

from flask import jsonify, current_app
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from modules.auth.session import get_session, identity_to_dict
from modules.layout import layout_bp
from modules.layout.navigation import menu_links
from modules.notifications.models import Notification
from utils.decorators import login_required


LATEST_NOTIFICATIONS = 5


def _profile():
    """Profile for the header; None when it cannot be read"""
    try:
        user = current_user._get_current_object()
        department = user.department.name if user.department else None
        return {
            'id': user.id,
            'full_name': user.full_name,
            'email': user.email,
            'role': user.role,
            'department': department,
        }
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f'Profile fetch failed for user {current_user.id}: {e}')
        return None


def _latest_notifications():
    """Latest notifications and unread count; empty when they cannot be read"""
    try:
        notifications = (
            Notification.query
            .filter_by(user_id=current_user.id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(LATEST_NOTIFICATIONS)
            .all()
        )
        unread = Notification.query.filter_by(user_id=current_user.id, read=False).count()
        return [n.to_dict() for n in notifications], unread
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f'Notifications fetch failed for user {current_user.id}: {e}')
        return [], 0


@layout_bp.route('/')
@login_required
def shell():
    """
    Everything the shell renders around a gated view
    GET /layout/
    """
    identity = get_session()
    notifications, unread = _latest_notifications()

    return jsonify({
        'success': True,
        'identity': identity_to_dict(identity),
        'profile': _profile(),
        'menu': menu_links(identity.role),
        'notifications': notifications,
        'unread_count': unread
    })


@layout_bp.route('/menu')
@login_required
def menu():
    """Navigation for the current role"""
    identity = get_session()
    return jsonify({
        'success': True,
        'role': identity.role.value,
        'menu': menu_links(identity.role)
    })
