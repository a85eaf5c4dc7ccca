"""
Admin Users Module
User management in the admin panel
"""

from flask import request, jsonify, current_app
from flask_login import current_user
from sqlalchemy import or_

from extensions import db
from modules.admin import admin_bp
from modules.admin.forms import UserForm
from modules.auth.models import User, Department
from modules.auth.roles import Role
from utils.activity_logger import log_activity
from utils.decorators import admin_required
from utils.exceptions import ValidationError, NotFound, ConflictError


def _get_user(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound('User not found')
    return user


def _validated_form(payload):
    form = UserForm.from_payload(payload)
    if not form.validate():
        raise ValidationError('User details are invalid', details=form.errors)
    return form


def _check_department(department_id):
    if department_id is not None and db.session.get(Department, department_id) is None:
        raise ValidationError('Department does not exist', details={'department_id': ['Unknown department']})


def _check_email_free(email, user_id=None):
    query = User.query.filter(User.email == email)
    if user_id is not None:
        query = query.filter(User.id != user_id)
    if query.first() is not None:
        raise ConflictError('This email address is already used by another user')


@admin_bp.route('/users')
@admin_required
def users_list():
    """
    All users, filtered by search text and role
    GET /admin/users?search=ann&role=staff&status=active
    """
    search = request.args.get('search', '').strip()
    role_filter = request.args.get('role', '')
    status_filter = request.args.get('status', '')

    query = User.query

    if role_filter and role_filter != 'all':
        query = query.filter(User.role == role_filter)

    if status_filter == 'active':
        query = query.filter(User.is_active.is_(True))
    elif status_filter == 'inactive':
        query = query.filter(User.is_active.is_(False))

    if search:
        search_term = f'%{search}%'
        query = query.filter(
            or_(
                User.full_name.ilike(search_term),
                User.email.ilike(search_term)
            )
        )

    users = query.order_by(User.created_at.desc(), User.id.desc()).all()

    return jsonify({
        'success': True,
        'users': [u.to_dict() for u in users],
        'counts': {
            role.value: User.query.filter(User.role == role.value).count()
            for role in Role
        }
    })


@admin_bp.route('/users', methods=['POST'])
@admin_required
def user_create():
    """
    Create a user account

    Request JSON: {"full_name", "email", "role", "department_id", "is_active", "password"}
    """
    payload = request.get_json(silent=True) or {}
    form = _validated_form(payload)

    if not form.password.data:
        raise ValidationError('Password is required', details={'password': ['Password is required']})

    email = form.email.data.lower().strip()
    _check_email_free(email)
    _check_department(form.department_id.data)

    user = User(
        full_name=form.full_name.data.strip(),
        email=email,
        role=form.role.data,
        department_id=form.department_id.data,
        is_active=form.is_active.data if 'is_active' in payload else True
    )
    user.set_password(form.password.data)

    try:
        db.session.add(user)
        db.session.flush()
        log_activity(
            user=current_user,
            action='user_created',
            entity_type='user',
            entity_id=user.id,
            new_value={'email': user.email, 'role': user.role},
            commit=False
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(f'User {user.email} created by admin {current_user.id}')

    return jsonify({
        'success': True,
        'user': user.to_dict()
    }), 201


@admin_bp.route('/users/<int:user_id>', methods=['PUT'])
@admin_required
def user_update(user_id):
    """
    Update a user account
    Fields left out of the body keep their current value; an empty password keeps the current one
    """
    user = _get_user(user_id)
    payload = request.get_json(silent=True) or {}

    current = user.to_dict()
    merged = {key: current.get(key) for key in ('full_name', 'email', 'role', 'department_id', 'is_active')}
    merged.update(payload)
    form = _validated_form(merged)

    email = form.email.data.lower().strip()
    _check_email_free(email, user_id=user.id)
    _check_department(form.department_id.data)

    if user.id == current_user.id:
        if form.role.data != user.role:
            raise ValidationError('You cannot change your own role')
        if not form.is_active.data:
            raise ValidationError('You cannot deactivate your own account')

    old_value = {'email': user.email, 'role': user.role, 'is_active': user.is_active}

    user.full_name = form.full_name.data.strip()
    user.email = email
    user.role = form.role.data
    user.department_id = form.department_id.data
    user.is_active = form.is_active.data
    if form.password.data:
        user.set_password(form.password.data)

    try:
        log_activity(
            user=current_user,
            action='user_updated',
            entity_type='user',
            entity_id=user.id,
            old_value=old_value,
            new_value={'email': user.email, 'role': user.role, 'is_active': user.is_active},
            commit=False
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return jsonify({
        'success': True,
        'user': user.to_dict()
    })


@admin_bp.route('/users/<int:user_id>', methods=['DELETE'])
@admin_required
def user_delete(user_id):
    """
    Delete a user account
    Requires {"confirm": true}; users owning surveys must be deactivated instead
    """
    user = _get_user(user_id)
    payload = request.get_json(silent=True) or {}

    if payload.get('confirm') is not True and request.args.get('confirm') not in ('1', 'true'):
        raise ValidationError('Deleting a user is irreversible; send "confirm": true')

    if user.id == current_user.id:
        raise ValidationError('You cannot delete your own account')

    if user.surveys.count():
        raise ConflictError('This user owns surveys; deactivate the account instead')

    try:
        user_email = user.email
        db.session.delete(user)
        log_activity(
            user=current_user,
            action='user_deleted',
            entity_type='user',
            entity_id=user_id,
            old_value={'email': user_email},
            commit=False
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(f'User {user_email} deleted by admin {current_user.id}')

    return jsonify({
        'success': True,
        'message': f'User {user_email} has been deleted.'
    })
