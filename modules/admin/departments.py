"""
Admin Departments Module
Department list and creation
"""

from flask import request, jsonify
from flask_login import current_user

from extensions import db
from modules.admin import admin_bp
from modules.admin.forms import DepartmentForm
from modules.auth.models import Department
from utils.activity_logger import log_activity
from utils.decorators import admin_required
from utils.exceptions import ValidationError, ConflictError


@admin_bp.route('/departments')
@admin_required
def departments_list():
    """All departments with their member counts"""
    departments = Department.query.order_by(Department.name.asc()).all()

    items = []
    for department in departments:
        data = department.to_dict()
        data['user_count'] = department.users.count()
        items.append(data)

    return jsonify({
        'success': True,
        'departments': items
    })


@admin_bp.route('/departments', methods=['POST'])
@admin_required
def department_create():
    """
    Create a department
    Request JSON: {"name": "Computer Science"}
    """
    form = DepartmentForm.from_payload(request.get_json(silent=True) or {})
    if not form.validate():
        raise ValidationError('Department details are invalid', details=form.errors)

    name = form.name.data.strip()
    if Department.query.filter_by(name=name).first() is not None:
        raise ConflictError(f'Department "{name}" already exists')

    department = Department(name=name)
    try:
        db.session.add(department)
        db.session.flush()
        log_activity(
            user=current_user,
            action='department_created',
            entity_type='department',
            entity_id=department.id,
            new_value={'name': name},
            commit=False
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return jsonify({
        'success': True,
        'department': department.to_dict()
    }), 201
