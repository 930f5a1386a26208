"""
Error taxonomy for the URL shortener.

Every error carries a stable machine-readable ``kind`` and the HTTP status
it maps to, so the API layer can render them uniformly.
"""

from typing import Optional


class ShortenerError(Exception):
    """Base exception for the URL shortener service."""

    status_code = 500
    kind = "internal"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(ShortenerError):
    status_code = 400
    kind = "invalid_input"
    default_message = "Invalid input"


class InvalidUrlError(InvalidInputError):
    """Raised when URL validation fails."""

    def __init__(self, url: str, reason: str = "Invalid URL"):
        self.url = url
        self.reason = reason
        super().__init__(reason)


class UnauthorizedError(ShortenerError):
    status_code = 401
    kind = "unauthorized"
    default_message = "Could not validate credentials"


class ForbiddenError(ShortenerError):
    status_code = 403
    kind = "forbidden"
    default_message = "You do not have permission to access this resource"


class NotFoundError(ShortenerError):
    status_code = 404
    kind = "not_found"
    default_message = "Resource not found"


class ConflictError(ShortenerError):
    status_code = 409
    kind = "conflict"
    default_message = "Resource already exists"


class InternalError(ShortenerError):
    pass


class CodeGenerationExhaustedError(InternalError):
    """Raised when no free short code was found within the attempt budget."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Could not generate a unique short code after {attempts} attempts")
