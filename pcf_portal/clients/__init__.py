"""
Upstream REST backend client.
"""
from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.clients.exceptions import (
    BackendAuthError,
    BackendError,
    BackendUnavailableError,
)

__all__ = [
    "BackendAuthError",
    "BackendClient",
    "BackendError",
    "BackendUnavailableError",
]
