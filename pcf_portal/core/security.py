"""
Caller session handling.

The caller's bearer token and selected company travel with every request and
are turned into an explicit SessionContext.
"""
import base64
import json
import logging
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class SessionExpiredError(Exception):
    """Raised when the caller has no usable credentials."""

    def __init__(self, message: str = "Authentication required"):
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class SessionContext:
    """Credentials and selected company of the calling user."""

    token: str
    company_id: int | None = None

    def require_company(self) -> int:
        if self.company_id is None:
            raise ValueError("No company selected")
        return self.company_id


def decode_token_payload(token: str) -> dict:
    """
    Decode the payload segment of a JWT without verifying its signature.

    Signature checks are the backend's job; this is only used to avoid
    forwarding tokens that have visibly expired.
    """
    segment = token.split(".")[1]
    padded = segment + "=" * (-len(segment) % 4)
    return json.loads(base64.urlsafe_b64decode(padded))


def is_token_expired(token: str, now: float | None = None) -> bool:
    """
    Check whether a JWT's ``exp`` claim lies in the past.

    Tokens that cannot be decoded count as expired; tokens without ``exp``
    do not.
    """
    try:
        payload = decode_token_payload(token)
    except (IndexError, ValueError) as e:
        logger.warning(f"Error checking token expiration: {e}")
        return True

    exp = payload.get("exp") if isinstance(payload, dict) else None
    if exp is None:
        return False
    current = time.time() if now is None else now
    return exp < current
