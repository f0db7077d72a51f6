"""
Loading of emission records together with the reference data their totals
depend on.
"""
import asyncio
import logging
from typing import List

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.security import SessionContext
from pcf_portal.pydantic_models.calculation import ProductEmissionSummary
from pcf_portal.repositories import (
    BomRepository,
    EmissionRecordRepository,
    EmissionReferenceRepository,
    ProductionEnergyEmissionRepository,
    TransportEmissionRepository,
    UserEnergyEmissionRepository,
)
from pcf_portal.services.calculators.emission_resolver import (
    EmissionRecord,
    EmissionTotalResolver,
)
from pcf_portal.services.sharing.pending_writes import PendingWriteStore
from pcf_portal.utils.constants import ReferenceKindEnum

logger = logging.getLogger(__name__)

REFERENCE_KINDS = {
    TransportEmissionRepository.kind: ReferenceKindEnum.TRANSPORT,
    ProductionEnergyEmissionRepository.kind: ReferenceKindEnum.PRODUCTION_ENERGY,
    UserEnergyEmissionRepository.kind: ReferenceKindEnum.USER_ENERGY,
}


async def with_reference_details(
    records: List[EmissionRecord],
    repo: EmissionRecordRepository,
    client: BackendClient,
    session: SessionContext,
) -> List[EmissionRecord]:
    """
    Make sure every record that points at a reference carries its details.

    The reference catalog is only fetched when some record lacks them.
    """
    missing = [r for r in records if r.reference is not None and r.reference_details is None]
    if not missing:
        return records

    kind = REFERENCE_KINDS[repo.kind]
    logger.debug(f"Fetching {kind.value} references for {len(missing)} records")
    references = await EmissionReferenceRepository(client, session).list(kind)
    return EmissionTotalResolver.attach_references(records, references)


async def load_records(
    repo: EmissionRecordRepository,
    product_id: int,
    client: BackendClient,
    session: SessionContext,
) -> List[EmissionRecord]:
    records = await repo.list(product_id)
    return await with_reference_details(records, repo, client, session)


async def summarize_product(
    product_id: int,
    client: BackendClient,
    session: SessionContext,
    resolver: EmissionTotalResolver,
    pending_writes: PendingWriteStore,
) -> ProductEmissionSummary:
    """Fetch a product's BOM and emission records and aggregate their totals."""
    line_items, transport, production_energy, user_energy = await asyncio.gather(
        BomRepository(client, session).list(product_id),
        load_records(TransportEmissionRepository(client, session), product_id, client, session),
        load_records(
            ProductionEnergyEmissionRepository(client, session), product_id, client, session
        ),
        load_records(UserEnergyEmissionRepository(client, session), product_id, client, session),
    )
    line_items = pending_writes.reconcile(session.company_id, product_id, line_items)
    return resolver.summarize_product(line_items, transport, production_energy, user_energy)
