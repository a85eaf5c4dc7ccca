"""
Admin Activity Module
Audit trail listing
"""

from flask import request, jsonify, current_app

from modules.admin import admin_bp
from modules.admin.models import ActivityLog
from utils.decorators import admin_required


@admin_bp.route('/activity')
@admin_required
def activity_list():
    """
    Audit entries, newest first
    GET /admin/activity?action=user_created&entity_type=user&page=2
    """
    page = request.args.get('page', 1, type=int)
    per_page = current_app.config.get('ITEMS_PER_PAGE', 20)
    action = request.args.get('action', '').strip()
    entity_type = request.args.get('entity_type', '').strip()

    query = ActivityLog.query
    if action:
        query = query.filter(ActivityLog.action == action)
    if entity_type:
        query = query.filter(ActivityLog.entity_type == entity_type)

    query = query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
    pagination = query.paginate(page=page, per_page=per_page, error_out=False)

    return jsonify({
        'success': True,
        'entries': [entry.to_dict() for entry in pagination.items],
        'page': pagination.page,
        'pages': pagination.pages,
        'total': pagination.total
    })
