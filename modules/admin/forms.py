"""
Admin Module - Forms
User and department management forms
"""

from wtforms import StringField, PasswordField, BooleanField, SelectField, IntegerField
from wtforms.validators import DataRequired, Email, Length, Optional

from modules.auth.roles import ROLE_VALUES
from utils.forms import ApiForm


class UserForm(ApiForm):
    """Create / update a user account"""

    full_name = StringField(
        'Full name',
        validators=[
            DataRequired(message='Full name is required'),
            Length(max=200)
        ]
    )

    email = StringField(
        'Email',
        validators=[
            DataRequired(message='Email is required'),
            Email(message='Enter a valid email address'),
            Length(max=255)
        ]
    )

    role = SelectField(
        'Role',
        choices=[(value, value.capitalize()) for value in ROLE_VALUES],
        default='student'
    )

    department_id = IntegerField('Department', validators=[Optional()])

    is_active = BooleanField('Active', default=True)

    # Required on create, optional on update (empty keeps the current one)
    password = PasswordField(
        'Password',
        validators=[
            Optional(),
            Length(min=8, message='Password must be at least 8 characters')
        ]
    )


class DepartmentForm(ApiForm):
    """Create a department"""

    name = StringField(
        'Name',
        validators=[
            DataRequired(message='Department name is required'),
            Length(max=150)
        ]
    )
