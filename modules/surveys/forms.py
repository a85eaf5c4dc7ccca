"""
Surveys Module - Forms
Validation of survey details posted by the survey editor
"""

from wtforms import StringField, TextAreaField, BooleanField, DateTimeLocalField
from wtforms.validators import DataRequired, Length, Optional, AnyOf, ValidationError

from modules.surveys.lifecycle import INITIAL_STATUSES
from utils.forms import ApiForm


DATETIME_FORMATS = ['%Y-%m-%dT%H:%M', '%Y-%m-%dT%H:%M:%S', '%Y-%m-%d %H:%M', '%Y-%m-%d %H:%M:%S']


class SurveyDetailsForm(ApiForm):
    """Survey details (questions are validated by the question builder)"""

    title = StringField(
        'Title',
        validators=[
            DataRequired(message='Survey title is required'),
            Length(max=200, message='Title can have at most 200 characters')
        ]
    )

    description = TextAreaField('Description', validators=[Optional()])

    is_anonymous = BooleanField('Anonymous responses')

    start_date = DateTimeLocalField('Start date', format=DATETIME_FORMATS, validators=[Optional()])

    end_date = DateTimeLocalField('End date', format=DATETIME_FORMATS, validators=[Optional()])

    status = StringField(
        'Status',
        validators=[
            Optional(),
            AnyOf(sorted(INITIAL_STATUSES), message='Status must be draft, pending or active')
        ]
    )

    def validate_end_date(self, field):
        if field.data and self.start_date.data and field.data <= self.start_date.data:
            raise ValidationError('End date must be after the start date')
