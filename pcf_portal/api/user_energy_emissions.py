"""
User Energy Emissions API router.

Energy consumed while the product is in use. Totals resolve the same way as
production energy; the emission reference is optional.
"""
import logging

from fastapi import APIRouter, Depends, Response, status

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.dependencies import get_backend_client, get_company_session, get_resolver
from pcf_portal.core.security import SessionContext
from pcf_portal.pydantic_models.emission_reference import LifecycleStageChoice
from pcf_portal.pydantic_models.forms import FormValidationResult, UserEnergyEmissionForm
from pcf_portal.pydantic_models.user_energy import UserEnergyEmissionView
from pcf_portal.repositories import UserEnergyEmissionRepository
from pcf_portal.services.calculators.emission_resolver import EmissionTotalResolver
from pcf_portal.services.emission_records import load_records, with_reference_details
from pcf_portal.services.forms.validators import check_user_energy_form, validate_user_energy_form

router = APIRouter(
    prefix="/api/v1/products",
    tags=["User Energy Emissions"],
)

logger = logging.getLogger(__name__)


@router.get("/{product_id}/emissions/user-energy", response_model=list[UserEnergyEmissionView])
async def list_user_energy_emissions(
    product_id: int,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
    resolver: EmissionTotalResolver = Depends(get_resolver),
):
    repo = UserEnergyEmissionRepository(client, session)
    records = await load_records(repo, product_id, client, session)
    return [resolver.user_energy_view(record) for record in records]


@router.get(
    "/{product_id}/emissions/user-energy/options",
    response_model=list[LifecycleStageChoice],
)
async def get_user_energy_lifecycle_choices(
    product_id: int,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
):
    return await UserEnergyEmissionRepository(client, session).lifecycle_choices(product_id)


@router.post(
    "/{product_id}/emissions/user-energy/validate",
    response_model=FormValidationResult,
)
async def validate_user_energy_emission(product_id: int, form: UserEnergyEmissionForm):
    """Check a user energy form without saving it."""
    return check_user_energy_form(form)


@router.post(
    "/{product_id}/emissions/user-energy",
    response_model=UserEnergyEmissionView,
    status_code=status.HTTP_201_CREATED,
)
async def create_user_energy_emission(
    product_id: int,
    form: UserEnergyEmissionForm,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
    resolver: EmissionTotalResolver = Depends(get_resolver),
):
    payload = validate_user_energy_form(form)
    repo = UserEnergyEmissionRepository(client, session)
    record = await repo.create(product_id, payload)
    [record] = await with_reference_details([record], repo, client, session)
    return resolver.user_energy_view(record)


@router.put(
    "/{product_id}/emissions/user-energy/{emission_id}",
    response_model=UserEnergyEmissionView,
)
async def update_user_energy_emission(
    product_id: int,
    emission_id: int,
    form: UserEnergyEmissionForm,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
    resolver: EmissionTotalResolver = Depends(get_resolver),
):
    """Save an edited user energy record; the backend receives a PATCH."""
    payload = validate_user_energy_form(form)
    repo = UserEnergyEmissionRepository(client, session)
    record = await repo.update(product_id, emission_id, payload)
    if record is None:
        record = await repo.get(product_id, emission_id)
    [record] = await with_reference_details([record], repo, client, session)
    return resolver.user_energy_view(record)


@router.delete(
    "/{product_id}/emissions/user-energy/{emission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_user_energy_emission(
    product_id: int,
    emission_id: int,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
):
    await UserEnergyEmissionRepository(client, session).delete(product_id, emission_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
