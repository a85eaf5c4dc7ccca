"""
Layout Module
Data for the persistent application shell (header, navigation)
"""

from flask import Blueprint

layout_bp = Blueprint('layout', __name__)

from modules.layout import routes
