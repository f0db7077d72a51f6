"""
Optimistic sharing status writes awaiting confirmation from the backend.

After an access request succeeds, the backend may keep reporting
"Not requested" for a short while. Pending writes overlay fetched BOM lines
until the backend reports any other status or the write expires.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

from pcf_portal.core.config import Config
from pcf_portal.pydantic_models.bom import LineItemPydModel
from pcf_portal.utils.constants import SharingStatus

logger = logging.getLogger(__name__)

DEFAULT_PENDING_WRITE_TTL_SECONDS = 300.0

PendingWriteKey = tuple[int, int, int]


@dataclass
class PendingWrite:
    company_id: int
    product_id: int
    line_item_id: int
    status: SharingStatus
    recorded_at: float

    @property
    def key(self) -> PendingWriteKey:
        return (self.company_id, self.product_id, self.line_item_id)


class PendingWriteStore:
    """
    In-memory store of optimistic status writes, keyed by
    (company, parent product, line item).
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_PENDING_WRITE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._writes: dict[PendingWriteKey, PendingWrite] = {}

    @classmethod
    def from_config(cls, config: Config) -> "PendingWriteStore":
        sharing = config.section("sharing")
        return cls(
            ttl_seconds=float(
                sharing.get("pending_write_ttl_seconds", DEFAULT_PENDING_WRITE_TTL_SECONDS)
            )
        )

    def __len__(self) -> int:
        return len(self._writes)

    def record(
        self,
        company_id: int,
        product_id: int,
        line_item_id: int,
        status: SharingStatus = SharingStatus.PENDING,
    ) -> PendingWrite:
        self._prune_expired()
        write = PendingWrite(
            company_id=company_id,
            product_id=product_id,
            line_item_id=line_item_id,
            status=status,
            recorded_at=self._clock(),
        )
        self._writes[write.key] = write
        return write

    def get(self, company_id: int, product_id: int, line_item_id: int) -> PendingWrite | None:
        write = self._writes.get((company_id, product_id, line_item_id))
        if write is not None and self._expired(write):
            del self._writes[write.key]
            return None
        return write

    def discard(self, company_id: int, product_id: int, line_item_id: int) -> None:
        self._writes.pop((company_id, product_id, line_item_id), None)

    def _expired(self, write: PendingWrite) -> bool:
        return self._clock() - write.recorded_at > self.ttl_seconds

    def _prune_expired(self) -> None:
        """Drop expired writes of every company and product."""
        expired = [key for key, write in self._writes.items() if self._expired(write)]
        for key in expired:
            del self._writes[key]
        if expired:
            logger.debug(f"Pruned {len(expired)} expired pending sharing writes")

    def reconcile(
        self, company_id: int, product_id: int, line_items: list[LineItemPydModel]
    ) -> list[LineItemPydModel]:
        """
        Overlay pending writes on freshly fetched BOM lines.

        A write is dropped once the backend reports a status other than
        Not requested, once it expires, or once its line item is gone.

        Returns:
            New list of line items with pending statuses applied
        """
        self._prune_expired()
        fetched = {item.id: item for item in line_items}
        for key, write in list(self._writes.items()):
            if key[0] != company_id or key[1] != product_id:
                continue
            item = fetched.get(write.line_item_id)
            if item is None or item.product_sharing_request_status != SharingStatus.NOT_REQUESTED:
                logger.debug(f"Dropping pending sharing write {key}")
                del self._writes[key]

        result = []
        for item in line_items:
            write = self._writes.get((company_id, product_id, item.id))
            if write is not None:
                item = item.model_copy(update={"product_sharing_request_status": write.status})
            result.append(item)
        return result
