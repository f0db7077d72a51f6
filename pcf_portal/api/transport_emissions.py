"""
Transport Emissions API router.

Transport legs of a product with their totals resolved as
distance * weight * emission factor.
"""
import logging

from fastapi import APIRouter, Depends, Response, status

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.dependencies import get_backend_client, get_company_session, get_resolver
from pcf_portal.core.security import SessionContext
from pcf_portal.pydantic_models.emission_reference import LifecycleStageChoice
from pcf_portal.pydantic_models.forms import FormValidationResult, TransportEmissionForm
from pcf_portal.pydantic_models.transport_emission import TransportEmissionView
from pcf_portal.repositories import TransportEmissionRepository
from pcf_portal.services.calculators.emission_resolver import EmissionTotalResolver
from pcf_portal.services.emission_records import load_records, with_reference_details
from pcf_portal.services.forms.validators import check_transport_form, validate_transport_form

router = APIRouter(
    prefix="/api/v1/products",
    tags=["Transport Emissions"],
)

logger = logging.getLogger(__name__)


@router.get("/{product_id}/emissions/transport", response_model=list[TransportEmissionView])
async def list_transport_emissions(
    product_id: int,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
    resolver: EmissionTotalResolver = Depends(get_resolver),
):
    repo = TransportEmissionRepository(client, session)
    records = await load_records(repo, product_id, client, session)
    return [resolver.transport_view(record) for record in records]


@router.get(
    "/{product_id}/emissions/transport/options",
    response_model=list[LifecycleStageChoice],
)
async def get_transport_lifecycle_choices(
    product_id: int,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
):
    """Lifecycle stages accepted for transport override factors."""
    return await TransportEmissionRepository(client, session).lifecycle_choices(product_id)


@router.post(
    "/{product_id}/emissions/transport/validate",
    response_model=FormValidationResult,
)
async def validate_transport_emission(product_id: int, form: TransportEmissionForm):
    """Check a transport form without saving it."""
    return check_transport_form(form)


@router.post(
    "/{product_id}/emissions/transport",
    response_model=TransportEmissionView,
    status_code=status.HTTP_201_CREATED,
)
async def create_transport_emission(
    product_id: int,
    form: TransportEmissionForm,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
    resolver: EmissionTotalResolver = Depends(get_resolver),
):
    payload = validate_transport_form(form)
    repo = TransportEmissionRepository(client, session)
    record = await repo.create(product_id, payload)
    [record] = await with_reference_details([record], repo, client, session)
    return resolver.transport_view(record)


@router.put(
    "/{product_id}/emissions/transport/{emission_id}",
    response_model=TransportEmissionView,
)
async def update_transport_emission(
    product_id: int,
    emission_id: int,
    form: TransportEmissionForm,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
    resolver: EmissionTotalResolver = Depends(get_resolver),
):
    payload = validate_transport_form(form)
    repo = TransportEmissionRepository(client, session)
    record = await repo.update(product_id, emission_id, payload)
    if record is None:
        record = await repo.get(product_id, emission_id)
    [record] = await with_reference_details([record], repo, client, session)
    return resolver.transport_view(record)


@router.delete(
    "/{product_id}/emissions/transport/{emission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_transport_emission(
    product_id: int,
    emission_id: int,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
):
    await TransportEmissionRepository(client, session).delete(product_id, emission_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
