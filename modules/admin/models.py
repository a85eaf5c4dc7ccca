"""
Admin Module - Models
Audit trail of user activity
"""

import json
from datetime import datetime
from extensions import db


class ActivityLog(db.Model):
    """
    User activity log
    Table: activity_logs
    """
    __tablename__ = 'activity_logs'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    action = db.Column(db.String(100), nullable=False)  # 'login', 'survey_status_change', ...
    entity_type = db.Column(db.String(50), nullable=True)  # 'survey', 'user', ...
    entity_id = db.Column(db.Integer, nullable=True)
    old_value = db.Column(db.Text, nullable=True)  # JSON
    new_value = db.Column(db.Text, nullable=True)  # JSON
    ip_address = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.String(500), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    user = db.relationship('User', backref=db.backref('activity_logs', lazy='dynamic'))

    def __repr__(self):
        return f'<ActivityLog {self.id}: {self.action} by user={self.user_id}>'

    @property
    def user_name(self):
        """Actor name, or 'System' for unattended actions"""
        if self.user:
            return self.user.full_name
        return 'System'

    @property
    def formatted_action(self):
        """Human readable action name"""
        action_names = {
            'login': 'Sign in',
            'logout': 'Sign out',
            'survey_created': 'Survey created',
            'survey_updated': 'Survey updated',
            'survey_deleted': 'Survey deleted',
            'survey_status_change': 'Survey status change',
            'user_created': 'User created',
            'user_updated': 'User updated',
            'user_deleted': 'User deleted',
            'department_created': 'Department created',
        }
        return action_names.get(self.action, self.action)

    @staticmethod
    def _load_value(raw):
        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            return raw

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'user_name': self.user_name,
            'action': self.action,
            'action_label': self.formatted_action,
            'entity_type': self.entity_type,
            'entity_id': self.entity_id,
            'old_value': self._load_value(self.old_value),
            'new_value': self._load_value(self.new_value),
            'ip_address': self.ip_address,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
