"""
Notifications Module - Services
Creating notifications and fanning them out by email
"""

from flask import current_app

from extensions import db, executor
from modules.auth.models import User
from modules.notifications.models import Notification


def notify_users(users, message):
    """
    Adds one notification per user to the current transaction

    The caller commits; emails go out through dispatch_emails() afterwards.

    Returns:
        list[Notification]
    """
    notifications = []
    for user in users:
        notification = Notification(user_id=user.id, message=message)
        notification.user = user
        db.session.add(notification)
        notifications.append(notification)
    return notifications


def notify_role(role, message, exclude_user_id=None):
    """Notifies every active user with the given role"""
    query = User.query.filter(User.role == role.value, User.is_active.is_(True))
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return notify_users(query.all(), message)


def dispatch_emails(notifications):
    """
    Queues emails for committed notifications when NOTIFY_BY_EMAIL is on

    Returns:
        bool: True if a background job was queued
    """
    if not notifications or not current_app.config.get('NOTIFY_BY_EMAIL'):
        return False

    from utils.email_sender import send_notification_emails

    by_message = {}
    for notification in notifications:
        by_message.setdefault(notification.message, []).append(notification.user.email)

    for message, recipients in by_message.items():
        executor.submit(send_notification_emails, recipients, message)

    current_app.logger.info(f'Queued notification emails for {len(notifications)} recipients')
    return True


def unread_count(user_id):
    return Notification.query.filter_by(user_id=user_id, read=False).count()
