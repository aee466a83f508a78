"""
Errors surfaced by the signup endpoints.

Each carries the user-facing message and the HTTP status it maps to; the
handler registered in main.py renders them as {"success": false, "message"}.
"""

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."
INVALID_EMAIL_MESSAGE = "Please provide a valid email address"


class SignupError(Exception):
    status_code = 500

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(SignupError):
    """Missing or malformed email."""

    status_code = 400

    def __init__(self, message: str = INVALID_EMAIL_MESSAGE):
        super().__init__(message)


class DuplicateError(SignupError):
    """Email already present in the target list."""

    status_code = 400


class PersistenceError(SignupError):
    # Never carries storage details to the client
    status_code = 500

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE):
        super().__init__(message)
