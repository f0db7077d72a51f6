"""
Products API router.

Products of the selected company, their emission traces and aggregated totals.
"""
import logging

from fastapi import APIRouter, Depends

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.dependencies import (
    get_backend_client,
    get_company_session,
    get_pending_writes,
    get_resolver,
)
from pcf_portal.core.security import SessionContext
from pcf_portal.pydantic_models.calculation import ProductEmissionSummary
from pcf_portal.pydantic_models.product import EmissionTracePydModel, ProductPydModel
from pcf_portal.repositories import ProductRepository
from pcf_portal.services.calculators.emission_resolver import EmissionTotalResolver
from pcf_portal.services.emission_records import summarize_product
from pcf_portal.services.sharing.pending_writes import PendingWriteStore

router = APIRouter(
    prefix="/api/v1/products",
    tags=["Products"],
)

logger = logging.getLogger(__name__)


@router.get("/{product_id}", response_model=ProductPydModel)
async def get_product(
    product_id: int,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
):
    return await ProductRepository(client, session).get(product_id)


@router.get("/{product_id}/emission-trace", response_model=EmissionTracePydModel)
async def get_emission_trace(
    product_id: int,
    company_id: int | None = None,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
):
    """
    Get the recursive emission breakdown of a product.

    Args:
        product_id: Product to trace
        company_id: Owning company when tracing a supplier's product;
            defaults to the selected company
    """
    return await ProductRepository(client, session).emission_trace(product_id, company_id)


@router.get("/{product_id}/emissions/summary", response_model=ProductEmissionSummary)
async def get_emission_summary(
    product_id: int,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
    resolver: EmissionTotalResolver = Depends(get_resolver),
    pending_writes: PendingWriteStore = Depends(get_pending_writes),
):
    """
    Aggregate a product's BOM, transport and production energy emissions.

    Gated and undetermined records are left out of the total and counted as
    withheld.
    """
    return await summarize_product(product_id, client, session, resolver, pending_writes)
