"""
Application error taxonomy.

Services raise these; app.py renders them as ``{success: false, message}``
with the status code carried by the error.
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload or {}

    def to_dict(self):
        body = {'success': False, 'message': self.message}
        body.update(self.payload)
        return body


class ValidationError(AppError):
    """Malformed or missing input"""
    status_code = 400

    def __init__(self, message='Validation failed', errors=None):
        super().__init__(message, payload={'errors': list(errors or [])})
        self.errors = list(errors or [])


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    """Overlapping booking, already-cancelled booking, duplicate email"""
    status_code = 400


class ForbiddenError(AppError):
    status_code = 403


class StorageError(AppError):
    """Underlying data-store failure; the message is passed through"""
    status_code = 500


class AuthenticationError(AppError):
    """Missing session or bad credentials"""
    status_code = 401
