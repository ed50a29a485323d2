"""Exceptions raised by the deploy keys client.

Local input problems raise ValidationError before any request is made.
Non-2xx responses raise an ApiError subclass chosen by status code.
Network failures from the transport are not wrapped.
"""
from datetime import datetime
from typing import Any, List, Optional


class DeployKeysError(Exception):
    """Base class for all deploy keys client errors."""
    pass


class ValidationError(DeployKeysError, ValueError):
    """Raised when caller input is missing or malformed."""
    pass


class ApiError(DeployKeysError):
    """Raised when the API answers with an error status."""

    def __init__(
        self,
        status_code: int,
        message: str,
        documentation_url: Optional[str] = None,
        errors: Optional[List[Any]] = None
    ):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.documentation_url = documentation_url
        self.errors = errors or []


class UnauthorizedError(ApiError):
    """401 - missing or bad credentials."""
    pass


class ForbiddenError(ApiError):
    """403 - credentials lack permission for the repository."""
    pass


class RateLimitExceededError(ForbiddenError):
    """403 with no remaining rate limit."""

    def __init__(self, *args, reset_at: Optional[datetime] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.reset_at = reset_at


class NotFoundError(ApiError):
    """404 - repository or deploy key does not exist."""
    pass


class ConflictError(ApiError):
    """409 - request conflicts with the repository state."""
    pass


class UnprocessableEntityError(ApiError):
    """422 - payload rejected, e.g. the key is already in use."""
    pass
