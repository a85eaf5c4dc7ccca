"""
Auth Module - Forms
Authentication forms with validation
"""

from wtforms import StringField, PasswordField, BooleanField
from wtforms.validators import DataRequired, Email

from utils.forms import ApiForm


class LoginForm(ApiForm):
    """Login form"""

    email = StringField(
        'Email',
        validators=[
            DataRequired(message='Email is required'),
            Email(message='Enter a valid email address')
        ]
    )

    password = PasswordField(
        'Password',
        validators=[
            DataRequired(message='Password is required')
        ]
    )

    remember_me = BooleanField('Remember me')
