"""
Backend client exceptions.
"""
from typing import Any

from pcf_portal.pydantic_models.errors import ErrorDetail


class BackendError(Exception):
    """Raised when the upstream backend answers with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        message: str,
        errors: list[ErrorDetail] | None = None,
        payload: Any = None,
    ):
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
        self.payload = payload
        super().__init__(f"Backend error ({status_code}): {message}")


class BackendAuthError(BackendError):
    """Raised on 401: the caller's credentials must be cleared."""

    def __init__(self, message: str = "Authentication required", **kwargs):
        super().__init__(401, message, **kwargs)


class BackendUnavailableError(BackendError):
    """Raised when the backend cannot be reached at all."""

    def __init__(self, message: str = "Network error"):
        super().__init__(0, message)
