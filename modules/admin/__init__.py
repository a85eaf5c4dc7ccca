"""
Admin Module
User and department management
"""

from flask import Blueprint

admin_bp = Blueprint('admin', __name__)

# Routes imported last to avoid circular imports
from modules.admin import users
from modules.admin import departments
from modules.admin import activity
from modules.admin import models  # activity log model
