"""
Bill of Materials API router.

BOM lines come back with their emissions resolved behind the sharing gate.
"""
import logging

from fastapi import APIRouter, Depends, Response, status

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.dependencies import (
    get_backend_client,
    get_company_session,
    get_pending_writes,
    get_resolver,
)
from pcf_portal.core.security import SessionContext
from pcf_portal.pydantic_models.bom import LineItemCreate, LineItemUpdate, LineItemView
from pcf_portal.repositories import BomRepository, ProductRepository
from pcf_portal.services.calculators.emission_resolver import EmissionTotalResolver
from pcf_portal.services.forms.validators import parse_quantity
from pcf_portal.services.sharing.pending_writes import PendingWriteStore
from pcf_portal.services.sharing.sharing_gate import SharingGate

router = APIRouter(
    prefix="/api/v1/products",
    tags=["Bill of Materials"],
)

logger = logging.getLogger(__name__)


@router.get("/{product_id}/bom", response_model=list[LineItemView])
async def list_line_items(
    product_id: int,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
    resolver: EmissionTotalResolver = Depends(get_resolver),
    pending_writes: PendingWriteStore = Depends(get_pending_writes),
):
    """
    List BOM lines of a product with resolved emissions.

    Access requests not yet reflected by the backend are shown as Pending.
    """
    line_items = await BomRepository(client, session).list(product_id)
    line_items = pending_writes.reconcile(session.company_id, product_id, line_items)
    return [resolver.line_item_view(item) for item in line_items]


@router.post(
    "/{product_id}/bom",
    response_model=LineItemView,
    status_code=status.HTTP_201_CREATED,
)
async def add_line_item(
    product_id: int,
    data: LineItemCreate,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
    resolver: EmissionTotalResolver = Depends(get_resolver),
):
    """
    Add a supplier product to the BOM.

    The quantity must be a number greater than 0.
    """
    quantity = parse_quantity(data.quantity)
    line_item = await BomRepository(client, session).create(
        product_id, data.line_item_product_id, quantity
    )
    return resolver.line_item_view(line_item)


@router.patch("/{product_id}/bom/{line_item_id}", response_model=LineItemView)
async def update_line_item(
    product_id: int,
    line_item_id: int,
    data: LineItemUpdate,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
    resolver: EmissionTotalResolver = Depends(get_resolver),
):
    """Change the quantity of a BOM line."""
    quantity = parse_quantity(data.quantity)
    repo = BomRepository(client, session)
    line_item = await repo.update(product_id, line_item_id, quantity=quantity)
    if line_item is None:
        line_item = await repo.get(product_id, line_item_id)
    return resolver.line_item_view(line_item)


@router.delete("/{product_id}/bom/{line_item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_line_item(
    product_id: int,
    line_item_id: int,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
    pending_writes: PendingWriteStore = Depends(get_pending_writes),
):
    await BomRepository(client, session).delete(product_id, line_item_id)
    pending_writes.discard(session.company_id, product_id, line_item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{product_id}/bom/{line_item_id}/request-access", response_model=list[LineItemView])
async def request_line_item_access(
    product_id: int,
    line_item_id: int,
    client: BackendClient = Depends(get_backend_client),
    session: SessionContext = Depends(get_company_session),
    resolver: EmissionTotalResolver = Depends(get_resolver),
    pending_writes: PendingWriteStore = Depends(get_pending_writes),
):
    """
    Ask the supplier of a BOM line to share its product's emissions.

    Returns the BOM with that line moved to Pending.
    """
    line_items = await BomRepository(client, session).list(product_id)
    line_items = pending_writes.reconcile(session.company_id, product_id, line_items)

    gate = SharingGate(ProductRepository(client, session))
    line_items = await gate.request_access(line_items, line_item_id)
    pending_writes.record(session.company_id, product_id, line_item_id)

    return [resolver.line_item_view(item) for item in line_items]
