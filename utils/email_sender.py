"""
Email Sender Module
Plain-text notification emails
"""

import logging

from flask import current_app
from flask_mail import Message
from extensions import mail

logger = logging.getLogger(__name__)


def send_email(to, subject, body):
    """
    Sends one plain-text email

    Args:
        to (str): Recipient address
        subject (str): Subject line
        body (str): Message body

    Returns:
        bool: True if the message was handed to the mail server
    """
    msg = Message(
        subject=subject,
        recipients=[to],
        sender=current_app.config['MAIL_DEFAULT_SENDER'],
        body=body
    )

    try:
        mail.send(msg)
        return True
    except Exception as e:
        logger.error(f'Email sending to {to} failed: {e}')
        return False


def send_notification_emails(recipients, message):
    """
    Sends the same notification to several addresses

    Runs inside an executor job, outside the request that queued it.

    Returns:
        int: Number of emails sent
    """
    app_name = current_app.config.get('APP_NAME', 'InsightHub')
    subject = f'{app_name}: new notification'

    sent = 0
    for address in recipients:
        if send_email(address, subject, message):
            sent += 1

    logger.info(f'Notification emails sent: {sent}/{len(recipients)}')
    return sent
