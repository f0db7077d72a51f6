"""
Product repository.
"""
import logging
from typing import List, Optional

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.security import SessionContext
from pcf_portal.pydantic_models.product import EmissionTracePydModel, ProductPydModel
from pcf_portal.repositories.base import BaseRepository
from pcf_portal.repositories.company import search_params
from pcf_portal.utils.constants import DEFAULT_MIN_SEARCH_LENGTH

logger = logging.getLogger(__name__)


class ProductRepository(BaseRepository[ProductPydModel]):
    """Products of the selected company and of its suppliers."""

    def __init__(
        self,
        client: BackendClient,
        session: SessionContext,
        min_search_length: int = DEFAULT_MIN_SEARCH_LENGTH,
    ):
        super().__init__(ProductPydModel, client, session)
        self.min_search_length = min_search_length

    async def list_for_company(
        self, company_id: Optional[int] = None, term: Optional[str] = None
    ) -> List[ProductPydModel]:
        """
        Products of a company, optionally filtered by name.

        Args:
            company_id: Company to list; defaults to the selected company
            term: Search text, ignored when shorter than the minimum length
        """
        params = search_params(term, self.min_search_length)
        return await self._get_list(
            self.company_path("products", company_id=company_id), params=params
        )

    async def get(self, product_id: int, company_id: Optional[int] = None) -> ProductPydModel:
        return await self._get_one(
            self.company_path("products", product_id, company_id=company_id)
        )

    async def emission_trace(
        self, product_id: int, company_id: Optional[int] = None
    ) -> EmissionTracePydModel:
        """Recursive emission breakdown of a product."""
        data = await self.client.get(
            self.company_path("products", product_id, "emission_traces", company_id=company_id),
            token=self.session.token,
        )
        return EmissionTracePydModel.model_validate(data)

    async def request_access(self, supplier_id: int, product_id: int) -> None:
        """
        Ask a supplier to share one product's emissions with the selected company.

        Args:
            supplier_id: Company that owns the product
            product_id: Supplier's product
        """
        await self._post(
            self.company_path("products", product_id, "request_access", company_id=supplier_id),
            body={"requester": self.session.require_company()},
        )
