"""
Responses Module
Answering surveys
"""

from flask import Blueprint

responses_bp = Blueprint('responses', __name__)

from modules.responses import routes
