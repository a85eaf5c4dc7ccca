"""
Reports Module
Per-question result aggregation and exports
"""

from flask import Blueprint

reports_bp = Blueprint('reports', __name__)

from modules.reports import routes
