"""
Auth Module - Routes
Authentication endpoints: login, logout, current session
"""

from flask import jsonify, request, current_app, url_for
from flask_login import login_user, logout_user, current_user
from flask_wtf.csrf import generate_csrf

from extensions import limiter
from modules.auth import auth_bp
from modules.auth.models import User
from modules.auth.forms import LoginForm
from modules.auth.session import resolve_identity, get_session, identity_to_dict


# =============================================
# Helper Functions
# =============================================

def is_safe_next(target):
    """Only same-site relative paths are honoured as post-login targets"""
    return bool(target) and target.startswith('/') and not target.startswith('//')


def default_landing_for(identity):
    """Post-login destination when no origin was preserved: the role's dashboard"""
    from modules.dashboard.routes import ROLE_DASHBOARDS
    return url_for(ROLE_DASHBOARDS[identity.role])


def _login_limit():
    return current_app.config['LOGIN_RATE_LIMIT']


# =============================================
# Routes
# =============================================

@auth_bp.route('/login', methods=['POST'])
@limiter.limit(_login_limit)
def login():
    """
    Sign in with email and password

    Request JSON:
    {
        "email": "...",
        "password": "...",
        "remember_me": false,
        "next": "/surveys/"
    }
    """
    payload = request.get_json(silent=True) or request.form.to_dict()
    form = LoginForm.from_payload(payload)

    if not form.validate():
        return jsonify({
            'success': False,
            'errors': form.errors
        }), 401

    email = form.email.data.lower().strip()
    user = User.get_by_email(email)

    if user is None or not user.check_password(form.password.data):
        current_app.logger.info(f'Failed login for {email}')
        return jsonify({
            'success': False,
            'errors': {'form': ['Invalid email or password.']}
        }), 401

    if not user.is_active:
        return jsonify({
            'success': False,
            'errors': {'form': ['Your account has been deactivated. Contact an administrator.']}
        }), 401

    identity = resolve_identity(user)
    if identity is None:
        current_app.logger.warning(f'Login refused for {email}: role could not be resolved')
        return jsonify({
            'success': False,
            'errors': {'form': ['Your account has no valid role. Contact an administrator.']}
        }), 401

    login_user(user, remember=form.remember_me.data)
    user.update_last_login()

    next_page = payload.get('next') or request.args.get('next')
    if not is_safe_next(next_page):
        next_page = default_landing_for(identity)

    return jsonify({
        'success': True,
        'identity': identity_to_dict(identity),
        'redirect_url': next_page
    })


@auth_bp.route('/logout', methods=['GET', 'POST'])
def logout():
    """Sign out and return to the landing page"""
    if current_user.is_authenticated:
        logout_user()
    return jsonify({
        'success': True,
        'redirect_url': url_for('public.landing')
    })


@auth_bp.route('/session')
def session_info():
    """
    Current session as seen by the client

    The server resolves the session synchronously, so `loading` is always false.
    """
    identity = get_session()
    return jsonify({
        'loading': False,
        'identity': identity_to_dict(identity),
        'csrf_token': generate_csrf()
    })
