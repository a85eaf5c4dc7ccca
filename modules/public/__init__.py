"""
Public Module
Pages reachable without signing in
"""

from flask import Blueprint

public_bp = Blueprint('public', __name__)

from modules.public import routes
