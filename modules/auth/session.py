"""
Auth Module - Session Store
Resolves the authenticated identity together with its role.

A request either sees a complete identity (id, name, email and role) or no
identity at all. Users whose role cannot be resolved, or who were
deactivated, are treated as signed out.
"""

from collections import namedtuple

from flask import current_app
from flask_login import current_user, user_logged_in, user_logged_out

from extensions import db, login_manager
from modules.auth.models import User
from modules.auth.roles import Role


SessionIdentity = namedtuple('SessionIdentity', ['id', 'display_name', 'email', 'role'])


def identity_to_dict(identity):
    if identity is None:
        return None
    return {
        'id': identity.id,
        'display_name': identity.display_name,
        'email': identity.email,
        'role': identity.role.value,
    }


def resolve_identity(user):
    """
    Builds the session identity for a user row

    Args:
        user (User|None): Loaded user

    Returns:
        SessionIdentity|None: None when there is no usable session
    """
    if user is None or not user.is_active:
        return None

    role = Role.parse(user.role)
    if role is None:
        return None

    return SessionIdentity(
        id=user.id,
        display_name=user.full_name,
        email=user.email,
        role=role,
    )


def load_user(user_id):
    """Flask-Login user loader: returns the user only if its identity resolves"""
    try:
        user_pk = int(user_id)
    except (TypeError, ValueError):
        return None

    try:
        user = db.session.get(User, user_pk)
    except LookupError:
        # stored role is outside the Enum
        db.session.rollback()
        current_app.logger.warning(f'Session rejected for user {user_pk}: unknown role')
        return None

    if resolve_identity(user) is None:
        if user is not None:
            current_app.logger.warning(f'Session rejected for user {user_pk}: inactive or unknown role')
        return None
    return user


def get_session():
    """
    Current request identity (read-only for views)

    Returns:
        SessionIdentity|None
    """
    if not current_user or not current_user.is_authenticated:
        return None
    return resolve_identity(current_user._get_current_object())


def _on_user_logged_in(sender, user, **extra):
    from utils.activity_logger import log_login
    log_login(user)


def _on_user_logged_out(sender, user, **extra):
    from utils.activity_logger import log_logout
    if user is not None and getattr(user, 'is_authenticated', False):
        log_logout(user)


def init_session_store(app):
    """Registers the user loader and subscribes to session-change signals"""
    login_manager.user_loader(load_user)
    user_logged_in.connect(_on_user_logged_in, app)
    user_logged_out.connect(_on_user_logged_out, app)
