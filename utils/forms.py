"""
Form Helpers
Base form for JSON bodies posted by the single-page client
"""

from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict


class ApiForm(FlaskForm):
    """
    Base for forms fed from JSON.
    CSRF is enforced for the whole request by CSRFProtect (X-CSRFToken header),
    so the per-form token is off.
    """

    class Meta:
        csrf = False

    @classmethod
    def from_payload(cls, payload, exclude=()):
        """
        Builds the form from a JSON object

        Nulls and excluded keys are dropped so that optional fields
        behave as if they were left empty.
        """
        flat = MultiDict()
        for key, value in (payload or {}).items():
            if key in exclude or value is None:
                continue
            if isinstance(value, (list, dict)):
                continue
            flat[key] = value
        return cls(formdata=flat)
