"""
Notifications Module - Models
In-app notifications shown in the layout header
"""

from datetime import datetime
from extensions import db


class Notification(db.Model):
    """
    Notification for one user
    Table: notifications
    """
    __tablename__ = 'notifications'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    message = db.Column(db.String(500), nullable=False)
    read = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship(
        'User',
        backref=db.backref('notifications', lazy='dynamic', cascade='all, delete-orphan')
    )

    def __repr__(self):
        return f'<Notification #{self.id} user={self.user_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'message': self.message,
            'read': self.read,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
