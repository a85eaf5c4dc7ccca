"""
Auth Module
Authentication: login, logout, session
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

# Routes imported last to avoid circular imports
from modules.auth import routes
