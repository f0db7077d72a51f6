"""
Sharing Requests API router.

Inbox of requests by other companies to see the selected company's product
emissions.
"""
import logging

from fastapi import APIRouter, Depends

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.dependencies import get_backend_client, get_company_session
from pcf_portal.core.security import SessionContext
from pcf_portal.pydantic_models.sharing_request import (
    ProductSharingRequestPydModel,
    SharingDecisionRequest,
    SharingDecisionResponse,
    SharingRequestCounts,
)
from pcf_portal.repositories import SharingRequestRepository
from pcf_portal.utils.constants import SharingStatus

router = APIRouter(
    prefix="/api/v1/sharing-requests",
    tags=["Sharing Requests"],
)

logger = logging.getLogger(__name__)


@router.get("/", response_model=list[ProductSharingRequestPydModel])
async def list_sharing_requests(
    status: SharingStatus | None = None,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
):
    """
    List incoming sharing requests.

    Args:
        status: Only requests with this status (optional)
    """
    return await SharingRequestRepository(client, session).list_incoming(status)


@router.get("/counts", response_model=SharingRequestCounts)
async def get_sharing_request_counts(
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
):
    """Number of incoming requests per status; zeros if the backend fails."""
    return await SharingRequestRepository(client, session).counts()


@router.post("/approve", response_model=SharingDecisionResponse)
async def approve_sharing_requests(
    data: SharingDecisionRequest,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
):
    success = await SharingRequestRepository(client, session).approve(data.ids)
    return SharingDecisionResponse(success=success)


@router.post("/deny", response_model=SharingDecisionResponse)
async def deny_sharing_requests(
    data: SharingDecisionRequest,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
):
    success = await SharingRequestRepository(client, session).deny(data.ids)
    return SharingDecisionResponse(success=success)
