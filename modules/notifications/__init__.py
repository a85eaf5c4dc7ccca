"""
Notifications Module
In-app notifications
"""

from flask import Blueprint

notifications_bp = Blueprint('notifications', __name__)

from modules.notifications import routes
