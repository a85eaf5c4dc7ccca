"""
Utility Decorators
Access-control decorators built on the route guard
"""

from functools import wraps
from flask import jsonify, redirect, request, url_for

from modules.auth.roles import Role
from modules.auth.session import get_session
from utils.route_guard import GuardDecision, decide


def _landing_redirect():
    """Redirect to the landing page, keeping the origin for after login"""
    return redirect(url_for('public.landing', next=request.full_path.rstrip('?')))


def role_required(*roles):
    """
    Decorator gating a view by session presence and role

    Usage:
        @role_required()                    # any signed-in role
        @role_required('admin')
        @role_required(Role.ADMIN, Role.STAFF)

    Args:
        *roles: Allowed roles (Role members or their values)

    Returns:
        Decorator function
    """
    required = frozenset(Role.parse(r) for r in roles)
    if None in required:
        raise ValueError(f'Unknown role in {roles!r}')

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            identity = get_session()
            role = identity.role if identity else None

            decision = decide(False, identity, role, required)

            if decision is GuardDecision.INTERSTITIAL:
                return jsonify({'loading': True}), 202
            if decision is GuardDecision.REDIRECT_LANDING:
                return _landing_redirect()
            if decision is GuardDecision.REDIRECT_DEFAULT:
                return redirect(url_for('dashboard.index'))

            return f(*args, **kwargs)
        decorated_function.required_roles = required
        return decorated_function
    return decorator


def login_required(f):
    """
    Decorator requiring any authenticated role
    Shortcut for @role_required()
    """
    return role_required()(f)


def admin_required(f):
    """
    Decorator requiring the admin role
    Shortcut for @role_required('admin')
    """
    return role_required(Role.ADMIN)(f)


def staff_required(f):
    """Decorator allowing admin and staff"""
    return role_required(Role.ADMIN, Role.STAFF)(f)
