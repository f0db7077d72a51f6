"""
Emission References API router.

Read-only operations for the backend's reference catalogs.
"""
import logging

from fastapi import APIRouter, Depends

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.dependencies import get_backend_client, get_session_context
from pcf_portal.core.security import SessionContext
from pcf_portal.pydantic_models.emission_reference import EmissionReferencePydModel
from pcf_portal.repositories import EmissionReferenceRepository
from pcf_portal.utils.constants import ReferenceKindEnum

router = APIRouter(
    prefix="/api/v1/references",
    tags=["Emission References"],
)

logger = logging.getLogger(__name__)


@router.get("/{kind}", response_model=list[EmissionReferencePydModel])
async def list_references(
    kind: ReferenceKindEnum,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_session_context),
):
    """
    List the references of one catalog.

    Args:
        kind: transport, production_energy or user_energy
    """
    return await EmissionReferenceRepository(client, session).list(kind)


@router.get("/{kind}/{reference_id}", response_model=EmissionReferencePydModel)
async def get_reference(
    kind: ReferenceKindEnum,
    reference_id: int,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_session_context),
):
    return await EmissionReferenceRepository(client, session).get(kind, reference_id)
