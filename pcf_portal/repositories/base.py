"""
Base repository with common upstream operations.

Provides the request helpers that the resource-specific repositories inherit.
"""
import logging
from typing import Any, Generic, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel

from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.core.security import SessionContext

ModelType = TypeVar("ModelType", bound=BaseModel)

logger = logging.getLogger(__name__)


def unwrap_list(data: Any) -> List[Any]:
    """
    Accept either a plain JSON list or a paginated ``{"results": [...]}`` body.

    Args:
        data: Decoded response body

    Returns:
        List of raw items; empty for an empty body
    """
    if data is None:
        return []
    if isinstance(data, dict):
        return list(data.get("results") or [])
    return list(data)


class BaseRepository(Generic[ModelType]):
    """
    Base repository for one upstream resource.

    Every call is made with the caller's bearer token.
    """

    def __init__(self, model: Type[ModelType], client: BackendClient, session: SessionContext):
        """
        Initialize repository.

        Args:
            model: Pydantic model the resource's items are parsed into
            client: Shared backend client
            session: Caller's session
        """
        self.model = model
        self.client = client
        self.session = session

    def company_path(self, *parts: Any, company_id: Optional[int] = None) -> str:
        """
        Build an endpoint under a company, ending with a slash.

        Args:
            *parts: Path segments after ``/companies/{id}/``
            company_id: Company to use instead of the session's selected one

        Example:
            >>> repo.company_path("products", 7, "bom")
            '/companies/3/products/7/bom/'
        """
        if company_id is None:
            company_id = self.session.require_company()
        segments = ["companies", str(company_id), *(str(p) for p in parts)]
        return "/" + "/".join(segments) + "/"

    async def _get_one(self, endpoint: str, **kwargs) -> ModelType:
        data = await self.client.get(endpoint, token=self.session.token, **kwargs)
        return self.model.model_validate(data)

    async def _get_list(self, endpoint: str, **kwargs) -> List[ModelType]:
        data = await self.client.get(endpoint, token=self.session.token, **kwargs)
        return [self.model.model_validate(item) for item in unwrap_list(data)]

    async def _post(self, endpoint: str, body: Any = None) -> Any:
        return await self.client.post(endpoint, body=body, token=self.session.token)

    async def _delete(self, endpoint: str) -> None:
        await self.client.delete(endpoint, token=self.session.token)

    async def _update(
        self, endpoint: str, payload: dict, primary_fields: Iterable[str]
    ) -> Any:
        """
        Send an update: PUT when every primary field is present, else PATCH.

        Resources without primary fields are always PATCHed.

        Args:
            endpoint: Item endpoint
            payload: Fields to send
            primary_fields: Fields that make the payload a full replacement

        Returns:
            Decoded response body
        """
        primary_fields = tuple(primary_fields)
        if primary_fields and all(field in payload for field in primary_fields):
            return await self.client.put(endpoint, body=payload, token=self.session.token)
        return await self.client.patch(endpoint, body=payload, token=self.session.token)
