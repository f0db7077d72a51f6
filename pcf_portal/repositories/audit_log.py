"""
Audit log repository.
"""
import logging
from typing import List

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.clients.exceptions import BackendAuthError, BackendError
from pcf_portal.core.security import SessionContext
from pcf_portal.pydantic_models.audit_log import AuditLogItemPydModel, AuditLogPage
from pcf_portal.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


def paginate(items: List[AuditLogItemPydModel], page: int, page_size: int) -> AuditLogPage:
    """Slice one page out of a full list of entries, newest first."""
    ordered = sorted(items, key=lambda item: item.timestamp, reverse=True)
    start = (page - 1) * page_size
    return AuditLogPage(
        items=ordered[start:start + page_size],
        page=page,
        page_size=page_size,
        total=len(ordered),
    )


class AuditLogRepository(BaseRepository[AuditLogItemPydModel]):
    """
    Audit trail of the selected company or one of its products.

    Read failures other than authentication give an empty log.
    """

    def __init__(self, client: BackendClient, session: SessionContext):
        super().__init__(AuditLogItemPydModel, client, session)

    async def _entries(self, endpoint: str) -> List[AuditLogItemPydModel]:
        try:
            return await self._get_list(endpoint)
        except BackendAuthError:
            raise
        except BackendError as e:
            logger.warning(f"Error fetching audit log {endpoint}: {e}")
            return []

    async def company_log(self, page: int = 1, page_size: int = 20) -> AuditLogPage:
        entries = await self._entries(self.company_path("audit"))
        return paginate(entries, page, page_size)

    async def product_log(
        self, product_id: int, page: int = 1, page_size: int = 20
    ) -> AuditLogPage:
        entries = await self._entries(self.company_path("products", product_id, "audit"))
        return paginate(entries, page, page_size)
