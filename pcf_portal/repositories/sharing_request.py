"""
Product sharing request repository.

Incoming requests are those other companies sent to the selected company for
its products.
"""
import asyncio
import logging
from collections import Counter
from typing import List, Optional

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.clients.exceptions import BackendAuthError, BackendError
from pcf_portal.core.security import SessionContext
from pcf_portal.pydantic_models.sharing_request import (
    ProductSharingRequestPydModel,
    SharingRequestCounts,
)
from pcf_portal.repositories.base import BaseRepository
from pcf_portal.utils.constants import SharingStatus

logger = logging.getLogger(__name__)

UNKNOWN_COMPANY = "Unknown Company"


class SharingRequestRepository(BaseRepository[ProductSharingRequestPydModel]):
    def __init__(self, client: BackendClient, session: SessionContext):
        super().__init__(ProductSharingRequestPydModel, client, session)

    async def list_incoming(
        self, status: Optional[SharingStatus] = None
    ) -> List[ProductSharingRequestPydModel]:
        """
        Incoming sharing requests, optionally filtered by status, with the
        requesting company's name filled in.
        """
        requests = await self._get_list(self.company_path("product_sharing_requests"))
        if status is not None:
            requests = [r for r in requests if r.status == status]
        return await self._with_requester_names(requests)

    async def _requester_name(self, company_id: int) -> str:
        try:
            data = await self.client.get(
                self.company_path(company_id=company_id), token=self.session.token
            )
        except BackendAuthError:
            raise
        except BackendError as e:
            logger.warning(f"Could not fetch requester company {company_id}: {e}")
            return UNKNOWN_COMPANY
        return (data or {}).get("name") or UNKNOWN_COMPANY

    async def _with_requester_names(
        self, requests: List[ProductSharingRequestPydModel]
    ) -> List[ProductSharingRequestPydModel]:
        requester_ids = sorted({r.requester for r in requests})
        names = await asyncio.gather(*(self._requester_name(cid) for cid in requester_ids))
        by_id = dict(zip(requester_ids, names))
        return [
            r.model_copy(update={"requester_name": by_id[r.requester]}) for r in requests
        ]

    async def counts(self) -> SharingRequestCounts:
        """
        Number of incoming requests per status.

        Failures other than authentication give zero counts.
        """
        try:
            requests = await self._get_list(self.company_path("product_sharing_requests"))
        except BackendAuthError:
            raise
        except BackendError as e:
            logger.warning(f"Error fetching sharing request counts: {e}")
            return SharingRequestCounts()

        counter = Counter(r.status for r in requests)
        return SharingRequestCounts(
            pending=counter[SharingStatus.PENDING],
            accepted=counter[SharingStatus.ACCEPTED],
            rejected=counter[SharingStatus.REJECTED],
        )

    async def approve(self, ids: List[int]) -> bool:
        return await self._decide("bulk_approve", ids)

    async def deny(self, ids: List[int]) -> bool:
        return await self._decide("bulk_deny", ids)

    async def _decide(self, action: str, ids: List[int]) -> bool:
        data = await self._post(
            self.company_path("product_sharing_requests", action), body={"ids": ids}
        )
        logger.info(f"{action} for sharing requests {ids}")
        if isinstance(data, dict) and "success" in data:
            return bool(data["success"])
        return True
