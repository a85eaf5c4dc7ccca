"""
Application Exceptions
Errors raised by the service layer and turned into JSON by app.py
"""


class AppError(Exception):
    """Base error: carries an HTTP status and a message for the client"""

    status_code = 400

    def __init__(self, message, status_code=None, details=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_dict(self):
        payload = {
            'success': False,
            'error': self.message
        }
        if self.details:
            payload['details'] = self.details
        return payload


class ValidationError(AppError):
    """Input rejected before anything is written"""
    status_code = 400


class PermissionDenied(AppError):
    """Caller's role or ownership does not allow the operation"""
    status_code = 403


class NotFound(AppError):
    status_code = 404


class InvalidTransition(AppError):
    """Survey status change not allowed by the state machine"""
    status_code = 409


class ConflictError(AppError):
    status_code = 409
