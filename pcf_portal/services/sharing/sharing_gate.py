"""
Sharing gate for supplier emission figures.

A supplier product's emissions are only shown once the supplier has accepted
the buyer's sharing request. The only move a buyer can make is to ask:
Not requested -> Pending. Accepted and Rejected are decided by the supplier.
"""

import logging
from typing import Protocol

from pcf_portal.clients.exceptions import BackendAuthError, BackendError
from pcf_portal.pydantic_models.bom import LineItemPydModel
from pcf_portal.utils.constants import SHARING_GATE_LABELS, SharingStatus

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    SharingStatus.NOT_REQUESTED: {SharingStatus.PENDING},
}


class InvalidSharingTransition(Exception):
    """Raised for any status change other than Not requested -> Pending."""

    def __init__(self, current: SharingStatus, target: SharingStatus):
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot change sharing status from '{current.value}' to '{target.value}'"
        )


class SharingRequestError(Exception):
    """Raised when the backend did not accept a request for access."""

    def __init__(self, line_item_id: int, message: str):
        self.line_item_id = line_item_id
        self.message = message
        super().__init__(f"Access request for line item {line_item_id} failed: {message}")


class LineItemNotFoundError(Exception):
    def __init__(self, line_item_id: int):
        self.line_item_id = line_item_id
        super().__init__(f"Line item {line_item_id} not found")


class AccessRequester(Protocol):
    async def request_access(self, supplier_id: int, product_id: int) -> None: ...


class SharingGate:
    """
    Sharing status rules and the request-access action.

    Args:
        requester: Object that sends the access request upstream, normally a
            ProductRepository bound to the caller's session
    """

    def __init__(self, requester: AccessRequester):
        self.requester = requester

    @staticmethod
    def can_view(status: SharingStatus) -> bool:
        """Supplier figures are visible only once the request was accepted."""
        return status == SharingStatus.ACCEPTED

    @staticmethod
    def gate_label(status: SharingStatus) -> str:
        return SHARING_GATE_LABELS.get(status, status.value)

    @staticmethod
    def transition(current: SharingStatus, target: SharingStatus) -> SharingStatus:
        """
        Validate a status change.

        Raises:
            InvalidSharingTransition: For anything but Not requested -> Pending
        """
        if target not in ALLOWED_TRANSITIONS.get(current, set()):
            raise InvalidSharingTransition(current, target)
        return target

    async def request_access(
        self, line_items: list[LineItemPydModel], line_item_id: int
    ) -> list[LineItemPydModel]:
        """
        Ask the supplier of one BOM line to share its product's emissions.

        Args:
            line_items: Current BOM lines
            line_item_id: Line to request access for

        Returns:
            New list in which only the requested line is Pending

        Raises:
            LineItemNotFoundError: No line with that id
            InvalidSharingTransition: The line is not in Not requested
            SharingRequestError: The backend rejected or never got the request;
                line_items is left untouched
            BackendAuthError: The caller's session is no longer valid
        """
        target = next((item for item in line_items if item.id == line_item_id), None)
        if target is None:
            raise LineItemNotFoundError(line_item_id)

        new_status = self.transition(
            target.product_sharing_request_status, SharingStatus.PENDING
        )

        product = target.line_item_product
        if product.supplier is None:
            raise SharingRequestError(line_item_id, "Product has no supplier")

        try:
            await self.requester.request_access(product.supplier, product.id)
        except BackendAuthError:
            raise
        except BackendError as e:
            logger.error(f"Error requesting access for line item {line_item_id}: {e}")
            raise SharingRequestError(line_item_id, e.message) from e

        logger.info(
            f"Requested access to product {product.id} of supplier {product.supplier}"
        )
        return [
            item.model_copy(update={"product_sharing_request_status": new_status})
            if item.id == line_item_id
            else item
            for item in line_items
        ]
