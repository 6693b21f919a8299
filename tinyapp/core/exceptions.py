"""
Custom Exceptions

This module defines the error kinds raised by the TinyApp core services.
Each kind maps to one user-visible condition; route handlers translate them
into status codes and flash messages.

Kinds:
- NotFoundError: referenced link or user is absent
- ForbiddenError: caller is authenticated but does not own the link
- InvalidInputError: a required field is empty or whitespace-only
- AlreadyExistsError: duplicate unique key on create
- UnauthorizedError: credential mismatch
"""


class TinyAppException(Exception):
    """Base exception for the TinyApp service."""
    pass


class NotFoundError(TinyAppException):
    """Raised when a link or user does not exist."""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} '{key}' not found")


class ForbiddenError(TinyAppException):
    """Raised when a caller acts on a link owned by someone else."""

    def __init__(self, short_code: str, caller_id: str):
        self.short_code = short_code
        self.caller_id = caller_id
        super().__init__(f"User '{caller_id}' does not own short URL '{short_code}'")


class InvalidInputError(TinyAppException):
    """Raised when a required field is missing or blank."""

    def __init__(self, field: str, reason: str = "must not be empty"):
        self.field = field
        self.reason = reason
        super().__init__(f"{field} {reason}")


class AlreadyExistsError(TinyAppException):
    """Raised when a unique key is already taken."""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} '{key}' already exists")


class UnauthorizedError(TinyAppException):
    """Raised when a password does not match the stored hash."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Password does not match for '{email}'")


class ShortCodeExhaustedError(TinyAppException):
    """Raised when no free short code was found within the retry budget."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Failed to generate a unique short code after {attempts} attempts")


class LoginRequiredError(TinyAppException):
    """Raised by the session dependency when no user is logged in."""
    pass
