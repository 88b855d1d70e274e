"""
Error types raised by the service layer and translated into JSON responses.

Every error carries the HTTP status it maps to. Route handlers let these
propagate; app-level handlers in app.py render them as {"message": ...}.
"""


class ApiError(Exception):
    """Base class for errors that are safe to show to the client."""

    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {'message': self.message}


class ValidationError(ApiError):
    """Missing or malformed input."""

    status_code = 400
    message = 'Invalid request'

    def __init__(self, message=None, errors=None):
        super().__init__(message)
        self.errors = errors or {}

    def to_dict(self):
        body = super().to_dict()
        if self.errors:
            body['errors'] = self.errors
        return body


class ConflictError(ApiError):
    """Resource already exists (duplicate email)."""

    status_code = 400
    message = 'Email already in use'


class InvalidCredentialsError(ApiError):
    """Login failed. Deliberately does not say which part was wrong."""

    status_code = 400
    message = 'Invalid email or password'


class AuthenticationError(ApiError):
    status_code = 401
    message = 'Authentication required'


class MissingTokenError(AuthenticationError):
    status_code = 401
    message = 'Unauthorized, token missing'


class InvalidTokenError(AuthenticationError):
    status_code = 403
    message = 'Invalid token'


class AuthorizationError(ApiError):
    """Authenticated, but not the owner of the resource."""

    status_code = 403
    message = 'Unauthorized to access this expense'


class NotFoundError(ApiError):
    status_code = 404
    message = 'Not found'


class StorageError(ApiError):
    """Persistence failure. Details are logged, never returned."""

    status_code = 500
    message = 'Server error. Try again later.'


class ExportError(ApiError):
    status_code = 500
    message = 'Failed to export expenses'
