"""
Notifications Module - Routes
Listing notifications and marking them read
"""

from flask import jsonify, request
from flask_login import current_user

from extensions import db
from modules.notifications import notifications_bp
from modules.notifications.models import Notification
from modules.notifications.services import unread_count
from utils.decorators import login_required
from utils.exceptions import NotFound


@notifications_bp.route('/')
@login_required
def notifications_list():
    """
    Notifications of the current user, newest first
    GET /notifications/?unread=1
    """
    query = Notification.query.filter_by(user_id=current_user.id)
    if request.args.get('unread') in ('1', 'true'):
        query = query.filter_by(read=False)

    notifications = query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()

    return jsonify({
        'success': True,
        'notifications': [n.to_dict() for n in notifications],
        'unread_count': unread_count(current_user.id)
    })


@notifications_bp.route('/<int:notification_id>/read', methods=['POST'])
@login_required
def mark_read(notification_id):
    """Marks one notification as read"""
    notification = Notification.query.filter_by(id=notification_id, user_id=current_user.id).first()
    if notification is None:
        raise NotFound('Notification not found')

    notification.read = True
    db.session.commit()

    return jsonify({
        'success': True,
        'notification': notification.to_dict(),
        'unread_count': unread_count(current_user.id)
    })


@notifications_bp.route('/read-all', methods=['POST'])
@login_required
def mark_all_read():
    """Marks every notification of the current user as read"""
    updated = Notification.query.filter_by(user_id=current_user.id, read=False).update({'read': True})
    db.session.commit()

    return jsonify({
        'success': True,
        'updated': updated,
        'unread_count': 0
    })
