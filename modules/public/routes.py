"""
Public Routes
Landing page data for signed-out visitors
"""

from flask import jsonify, request, url_for, current_app

from modules.auth.session import get_session, identity_to_dict
from modules.public import public_bp


@public_bp.route('/')
@public_bp.route('/landing')
def landing():
    """
    Landing page

    Carries the preserved origin ('next') so the client can return to it
    after signing in.
    """
    identity = get_session()
    return jsonify({
        'success': True,
        'app_name': current_app.config.get('APP_NAME', 'InsightHub'),
        'identity': identity_to_dict(identity),
        'login_url': url_for('auth.login'),
        'next': request.args.get('next'),
        'dashboard_url': url_for('dashboard.index') if identity else None
    })
