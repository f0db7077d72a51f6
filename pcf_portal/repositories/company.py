"""
Company repository.
"""
import logging
from typing import List, Optional

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.security import SessionContext
from pcf_portal.pydantic_models.company import CompanyPydModel
from pcf_portal.repositories.base import BaseRepository
from pcf_portal.utils.constants import DEFAULT_MIN_SEARCH_LENGTH

logger = logging.getLogger(__name__)


def search_params(term: Optional[str], min_length: int = DEFAULT_MIN_SEARCH_LENGTH) -> Optional[dict]:
    """
    Query parameters for a name search.

    Terms shorter than ``min_length`` list everything instead of searching.

    Example:
        >>> search_params("ste")
        >>> search_params("steel")
        {'search': 'steel'}
    """
    if term is None or len(term) < min_length:
        return None
    return {"search": term}


class CompanyRepository(BaseRepository[CompanyPydModel]):
    """Companies visible to the caller."""

    def __init__(
        self,
        client: BackendClient,
        session: SessionContext,
        min_search_length: int = DEFAULT_MIN_SEARCH_LENGTH,
    ):
        super().__init__(CompanyPydModel, client, session)
        self.min_search_length = min_search_length

    async def list_my(self) -> List[CompanyPydModel]:
        """Companies the caller is a member of."""
        return await self._get_list("/companies/my/")

    async def search(self, term: Optional[str] = None) -> List[CompanyPydModel]:
        """All companies in the system, optionally filtered by name."""
        params = search_params(term, self.min_search_length)
        logger.debug(f"Searching companies with params {params}")
        return await self._get_list("/companies/", params=params)

    async def get(self, company_id: int) -> CompanyPydModel:
        return await self._get_one(self.company_path(company_id=company_id))
