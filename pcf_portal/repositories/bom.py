"""
Bill-of-materials repository.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.security import SessionContext
from pcf_portal.pydantic_models.bom import LineItemPydModel
from pcf_portal.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

LINE_ITEM_PRIMARY_FIELDS = ("quantity", "line_item_product_id")


class BomRepository(BaseRepository[LineItemPydModel]):
    """Line items of one of the selected company's products."""

    def __init__(self, client: BackendClient, session: SessionContext):
        super().__init__(LineItemPydModel, client, session)

    def _endpoint(self, product_id: int, line_item_id: Optional[int] = None) -> str:
        if line_item_id is None:
            return self.company_path("products", product_id, "bom")
        return self.company_path("products", product_id, "bom", line_item_id)

    async def list(self, product_id: int) -> List[LineItemPydModel]:
        return await self._get_list(self._endpoint(product_id))

    async def get(self, product_id: int, line_item_id: int) -> LineItemPydModel:
        return await self._get_one(self._endpoint(product_id, line_item_id))

    async def create(
        self, product_id: int, line_item_product_id: int, quantity: Decimal
    ) -> LineItemPydModel:
        data = await self._post(
            self._endpoint(product_id),
            body={"quantity": quantity, "line_item_product_id": line_item_product_id},
        )
        logger.info(f"Added product {line_item_product_id} to BOM of product {product_id}")
        return LineItemPydModel.model_validate(data)

    async def update(
        self,
        product_id: int,
        line_item_id: int,
        quantity: Optional[Decimal] = None,
        line_item_product_id: Optional[int] = None,
    ) -> Optional[LineItemPydModel]:
        """
        Update a line item.

        A full replacement (PUT) is sent only when both quantity and product
        are given; otherwise just the given fields are patched.
        """
        payload = {}
        if quantity is not None:
            payload["quantity"] = quantity
        if line_item_product_id is not None:
            payload["line_item_product_id"] = line_item_product_id

        data = await self._update(
            self._endpoint(product_id, line_item_id), payload, LINE_ITEM_PRIMARY_FIELDS
        )
        return LineItemPydModel.model_validate(data) if data else None

    async def delete(self, product_id: int, line_item_id: int) -> None:
        await self._delete(self._endpoint(product_id, line_item_id))
