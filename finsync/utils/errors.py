"""
Exception taxonomy shared by services and routes.

Each error knows the HTTP status it maps to; the application factory
registers one handler that renders ``to_dict()`` as the JSON body.
"""

from typing import Optional


class FinSyncError(Exception):
    """Base class for expected, caller-facing failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {'error': self.message}


class ValidationError(FinSyncError):
    """Bad or missing input. Carries the offending field name."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        data = {'error': self.message}
        if self.field:
            data['field'] = self.field
        return data


class AuthorizationError(FinSyncError):
    """Caller may not perform the action. Never says whether the target exists."""

    status_code = 403

    def __init__(self, message: str = 'Not authorized'):
        super().__init__(message)


class NotFoundError(FinSyncError):
    status_code = 404


class ConflictError(FinSyncError):
    status_code = 409
