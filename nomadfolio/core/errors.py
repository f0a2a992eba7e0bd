"""
API Errors
==========

Every failure a handler can report to a caller. Each carries the HTTP status
it maps to; the message is the only thing rendered into the response body.
"""


class APIError(Exception):
    """Base class for errors rendered as {"error": message}"""

    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.message}


class AuthError(APIError):
    """Missing, anonymous or invalid bearer token"""
    status_code = 401


class ValidationError(APIError):
    """Malformed input"""
    status_code = 400


class NotFoundError(APIError):
    status_code = 404


class ConflictError(APIError):
    """Account already exists"""
    status_code = 409


class InternalError(APIError):
    """Unexpected failure. The message must never carry store internals."""
    status_code = 500

    def __init__(self, message='Internal server error'):
        super().__init__(message)
