"""
Auth Module - User Model
User and department models with authentication helpers
"""

from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

# db comes from extensions.py (avoids circular import)
from extensions import db
from modules.auth.roles import Role, ROLE_VALUES


class Department(db.Model):
    """
    Academic department
    Table: departments
    """
    __tablename__ = 'departments'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    users = db.relationship('User', back_populates='department', lazy='dynamic')

    def __repr__(self):
        return f'<Department {self.name}>'

    def to_dict(self):
        return {'id': self.id, 'name': self.name}


class User(UserMixin, db.Model):
    """
    User model
    Table: users
    """
    __tablename__ = 'users'

    # Primary Key
    id = db.Column(db.Integer, primary_key=True)

    # Basic Info
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(200), nullable=False)

    # Role & Permissions
    role = db.Column(
        db.Enum(*ROLE_VALUES, name='user_roles'),
        default=Role.STUDENT.value,
        nullable=False,
        index=True
    )

    department_id = db.Column(db.Integer, db.ForeignKey('departments.id', ondelete='SET NULL'), index=True)

    # Status
    is_active = db.Column(db.Boolean, default=True)

    # Timestamps
    last_login = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow
    )

    # Relationships
    department = db.relationship('Department', back_populates='users')

    def __repr__(self):
        return f'<User {self.email}>'

    # ============================================
    # Password Methods
    # ============================================

    def set_password(self, password):
        """
        Hashes and stores the password

        Args:
            password (str): Plain text password
        """
        self.password_hash = generate_password_hash(password, method='pbkdf2:sha256')

    def check_password(self, password):
        """
        Checks a password against the stored hash

        Args:
            password (str): Password to check

        Returns:
            bool: True if the password matches
        """
        return check_password_hash(self.password_hash, password)

    # ============================================
    # Helper Methods
    # ============================================

    @property
    def role_enum(self):
        """Role enum for this user, or None when the stored value is unknown"""
        return Role.parse(self.role)

    def is_admin(self):
        return self.role == Role.ADMIN.value

    def is_staff(self):
        return self.role == Role.STAFF.value

    def is_student(self):
        return self.role == Role.STUDENT.value

    def update_last_login(self):
        """Stamps the last login time"""
        self.last_login = datetime.utcnow()
        db.session.commit()

    def to_dict(self):
        return {
            'id': self.id,
            'full_name': self.full_name,
            'email': self.email,
            'role': self.role,
            'department_id': self.department_id,
            'is_active': self.is_active,
            'last_login': self.last_login.isoformat() if self.last_login else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    # ============================================
    # Class Methods
    # ============================================

    @classmethod
    def get_by_email(cls, email):
        """
        Finds a user by email

        Args:
            email (str): User email

        Returns:
            User|None: User or None
        """
        return cls.query.filter_by(email=email).first()

    # ============================================
    # Flask-Login Required Methods
    # ============================================

    def get_id(self):
        """User ID as a string (required by Flask-Login)"""
        return str(self.id)
