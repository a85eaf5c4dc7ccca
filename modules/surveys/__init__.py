"""
Surveys Module
Survey CRUD, question builder and status transitions
"""

from flask import Blueprint

surveys_bp = Blueprint('surveys', __name__)

from modules.surveys import routes
