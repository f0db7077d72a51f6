"""
Audit Log API router.

An unavailable audit log is returned as an empty page.
"""
import logging

from fastapi import APIRouter, Depends, Query

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.dependencies import get_backend_client, get_company_session
from pcf_portal.core.security import SessionContext
from pcf_portal.pydantic_models.audit_log import AuditLogPage
from pcf_portal.repositories import AuditLogRepository

router = APIRouter(
    prefix="/api/v1",
    tags=["Audit Log"],
)

logger = logging.getLogger(__name__)


@router.get("/audit", response_model=AuditLogPage)
async def get_company_audit_log(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
):
    """
    Get the selected company's audit log, newest first.

    Args:
        page: 1-based page number
        page_size: Entries per page
    """
    return await AuditLogRepository(client, session).company_log(page, page_size)


@router.get("/products/{product_id}/audit", response_model=AuditLogPage)
async def get_product_audit_log(
    product_id: int,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
):
    return await AuditLogRepository(client, session).product_log(product_id, page, page_size)
