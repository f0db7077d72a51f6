"""
Repositories for transport, production energy and user energy emission records.

All three resources live under ``/companies/{id}/products/{id}/emissions/<kind>/``
and share the same CRUD shape.
"""
import logging
from typing import Any, ClassVar, List, Optional, Tuple, Type

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.security import SessionContext
from pcf_portal.pydantic_models.emission_reference import LifecycleStageChoice
from pcf_portal.pydantic_models.production_energy import ProductionEnergyEmissionPydModel
from pcf_portal.pydantic_models.transport_emission import TransportEmissionPydModel
from pcf_portal.pydantic_models.user_energy import UserEnergyEmissionPydModel
from pcf_portal.repositories.base import BaseRepository, ModelType

logger = logging.getLogger(__name__)

LIFECYCLE_CHOICES_PATH = (
    "actions",
    "POST",
    "override_factors",
    "child",
    "children",
    "lifecycle_stage",
    "choices",
)


def extract_lifecycle_choices(schema: Any) -> List[LifecycleStageChoice]:
    """
    Read the lifecycle stage choices from an OPTIONS response.

    Returns:
        Choices in backend order; empty when the schema lacks them
    """
    current = schema
    for key in LIFECYCLE_CHOICES_PATH:
        if not isinstance(current, dict):
            return []
        current = current.get(key)
    if not isinstance(current, list):
        return []
    return [
        LifecycleStageChoice(
            value=str(choice["value"]),
            display_name=str(choice.get("display_name", choice["value"])),
        )
        for choice in current
        if isinstance(choice, dict) and "value" in choice
    ]


class EmissionRecordRepository(BaseRepository[ModelType]):
    """CRUD for one emission record kind of the selected company's products."""

    kind: ClassVar[str]
    record_model: ClassVar[Type]
    primary_fields: ClassVar[Tuple[str, ...]]

    def __init__(self, client: BackendClient, session: SessionContext):
        super().__init__(self.record_model, client, session)

    def _endpoint(self, product_id: int, emission_id: Optional[int] = None) -> str:
        parts = ["products", product_id, "emissions", self.kind]
        if emission_id is not None:
            parts.append(emission_id)
        return self.company_path(*parts)

    async def list(self, product_id: int) -> List[ModelType]:
        return await self._get_list(self._endpoint(product_id))

    async def get(self, product_id: int, emission_id: int) -> ModelType:
        return await self._get_one(self._endpoint(product_id, emission_id))

    async def create(self, product_id: int, payload: dict) -> ModelType:
        data = await self._post(self._endpoint(product_id), body=payload)
        logger.info(f"Created {self.kind} emission for product {product_id}")
        return self.model.model_validate(data)

    async def update(self, product_id: int, emission_id: int, payload: dict) -> Optional[ModelType]:
        data = await self._update(
            self._endpoint(product_id, emission_id), payload, self.primary_fields
        )
        logger.info(f"Updated {self.kind} emission {emission_id} of product {product_id}")
        return self.model.model_validate(data) if data else None

    async def delete(self, product_id: int, emission_id: int) -> None:
        await self._delete(self._endpoint(product_id, emission_id))

    async def lifecycle_choices(self, product_id: int) -> List[LifecycleStageChoice]:
        """Lifecycle stages the backend accepts for override factors."""
        schema = await self.client.options(self._endpoint(product_id), token=self.session.token)
        return extract_lifecycle_choices(schema)


class TransportEmissionRepository(EmissionRecordRepository[TransportEmissionPydModel]):
    kind = "transport"
    record_model = TransportEmissionPydModel
    primary_fields = ("distance", "weight")


class ProductionEnergyEmissionRepository(
    EmissionRecordRepository[ProductionEnergyEmissionPydModel]
):
    kind = "production_energy"
    record_model = ProductionEnergyEmissionPydModel
    primary_fields = ("energy_consumption", "reference", "override_factors")


class UserEnergyEmissionRepository(EmissionRecordRepository[UserEnergyEmissionPydModel]):
    kind = "user_energy"
    record_model = UserEnergyEmissionPydModel
    primary_fields = ()
