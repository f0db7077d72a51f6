"""
FastAPI dependencies following kkb_fastapi pattern.
"""
import logging

from fastapi import Depends, Header, HTTPException, Request, status

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.config import Config
from pcf_portal.core.security import SessionContext, SessionExpiredError, is_token_expired
from pcf_portal.services.calculators.emission_resolver import EmissionTotalResolver
from pcf_portal.services.sharing.pending_writes import PendingWriteStore
from pcf_portal.utils.constants import SESSION_COMPANY_HEADER

logger = logging.getLogger(__name__)


def get_config_dependency(request: Request) -> Config:
    return request.app.state.config


def get_backend_client(request: Request) -> BackendClient:
    """Shared backend client created at application startup."""
    client = getattr(request.app.state, "backend_client", None)
    if client is None:
        raise RuntimeError("Backend client not initialized")
    return client


def get_pending_writes(request: Request) -> PendingWriteStore:
    return request.app.state.pending_writes


def get_resolver(config: Config = Depends(get_config_dependency)) -> EmissionTotalResolver:
    return EmissionTotalResolver.from_config(config)


def get_session_context(
    authorization: str | None = Header(None),
    x_company_id: str | None = Header(None, alias=SESSION_COMPANY_HEADER),
) -> SessionContext:
    """
    Build the caller's session from request headers.

    Raises:
        SessionExpiredError: Missing, malformed or expired bearer token
        HTTPException: Company header that is not an integer
    """
    if not authorization or not authorization.lower().startswith("bearer "):
        raise SessionExpiredError("Authentication required")

    token = authorization.split(" ", 1)[1].strip()
    if not token or is_token_expired(token):
        logger.info("Rejecting request with missing or expired token")
        raise SessionExpiredError("Session expired")

    company_id = None
    if x_company_id:
        try:
            company_id = int(x_company_id)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid company id: {x_company_id}",
            )

    return SessionContext(token=token, company_id=company_id)


def get_company_session(
    session: SessionContext = Depends(get_session_context),
) -> SessionContext:
    """Session that must have a selected company."""
    if session.company_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No company selected. Send the X-Company-Id header.",
        )
    return session
