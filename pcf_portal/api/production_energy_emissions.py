"""
Production Energy Emissions API router.

Energy consumed while producing a product, with totals resolved as
energy_consumption * emission factor.
"""
import logging

from fastapi import APIRouter, Depends, Response, status

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.dependencies import get_backend_client, get_company_session, get_resolver
from pcf_portal.core.security import SessionContext
from pcf_portal.pydantic_models.emission_reference import LifecycleStageChoice
from pcf_portal.pydantic_models.forms import FormValidationResult, ProductionEnergyEmissionForm
from pcf_portal.pydantic_models.production_energy import ProductionEnergyEmissionView
from pcf_portal.repositories import ProductionEnergyEmissionRepository
from pcf_portal.services.calculators.emission_resolver import EmissionTotalResolver
from pcf_portal.services.emission_records import load_records, with_reference_details
from pcf_portal.services.forms.validators import (
    check_production_energy_form,
    validate_production_energy_form,
)

router = APIRouter(
    prefix="/api/v1/products",
    tags=["Production Energy Emissions"],
)

logger = logging.getLogger(__name__)


@router.get("/{product_id}/emissions/production-energy", response_model=list[ProductionEnergyEmissionView])
async def list_production_energy_emissions(
    product_id: int,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
    resolver: EmissionTotalResolver = Depends(get_resolver),
):
    repo = ProductionEnergyEmissionRepository(client, session)
    records = await load_records(repo, product_id, client, session)
    return [resolver.production_energy_view(record) for record in records]


@router.get(
    "/{product_id}/emissions/production-energy/options",
    response_model=list[LifecycleStageChoice],
)
async def get_production_energy_lifecycle_choices(
    product_id: int,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
):
    """Lifecycle stages accepted for production energy override factors."""
    return await ProductionEnergyEmissionRepository(client, session).lifecycle_choices(product_id)


@router.post(
    "/{product_id}/emissions/production-energy/validate",
    response_model=FormValidationResult,
)
async def validate_production_energy_emission(
    product_id: int, form: ProductionEnergyEmissionForm
):
    """Check a production energy form without saving it."""
    return check_production_energy_form(form)


@router.post(
    "/{product_id}/emissions/production-energy",
    response_model=ProductionEnergyEmissionView,
    status_code=status.HTTP_201_CREATED,
)
async def create_production_energy_emission(
    product_id: int,
    form: ProductionEnergyEmissionForm,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
    resolver: EmissionTotalResolver = Depends(get_resolver),
):
    payload = validate_production_energy_form(form)
    repo = ProductionEnergyEmissionRepository(client, session)
    record = await repo.create(product_id, payload)
    [record] = await with_reference_details([record], repo, client, session)
    return resolver.production_energy_view(record)


@router.put(
    "/{product_id}/emissions/production-energy/{emission_id}",
    response_model=ProductionEnergyEmissionView,
)
async def update_production_energy_emission(
    product_id: int,
    emission_id: int,
    form: ProductionEnergyEmissionForm,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
    resolver: EmissionTotalResolver = Depends(get_resolver),
):
    payload = validate_production_energy_form(form)
    repo = ProductionEnergyEmissionRepository(client, session)
    record = await repo.update(product_id, emission_id, payload)
    if record is None:
        record = await repo.get(product_id, emission_id)
    [record] = await with_reference_details([record], repo, client, session)
    return resolver.production_energy_view(record)


@router.delete(
    "/{product_id}/emissions/production-energy/{emission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_production_energy_emission(
    product_id: int,
    emission_id: int,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
):
    await ProductionEnergyEmissionRepository(client, session).delete(product_id, emission_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
