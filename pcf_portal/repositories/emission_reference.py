"""
Emission reference catalog repository.
"""
import logging
from typing import List

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.security import SessionContext
from pcf_portal.pydantic_models.emission_reference import EmissionReferencePydModel
from pcf_portal.repositories.base import BaseRepository
from pcf_portal.utils.constants import ReferenceKindEnum

logger = logging.getLogger(__name__)


class EmissionReferenceRepository(BaseRepository[EmissionReferencePydModel]):
    """Read-only reference catalogs: transport, production_energy, user_energy."""

    def __init__(self, client: BackendClient, session: SessionContext):
        super().__init__(EmissionReferencePydModel, client, session)

    async def list(self, kind: ReferenceKindEnum) -> List[EmissionReferencePydModel]:
        return await self._get_list(f"/reference/{kind.value}/")

    async def get(self, kind: ReferenceKindEnum, reference_id: int) -> EmissionReferencePydModel:
        return await self._get_one(f"/reference/{kind.value}/{reference_id}/")
