"""
Async HTTP client for the supply-chain REST backend.

One httpx.AsyncClient is shared by the whole application; the caller's bearer
token is attached per request.
"""
import logging
from typing import Any

import httpx
from fastapi.encoders import jsonable_encoder

from pcf_portal.clients.error_parsing import normalize_error_payload
from pcf_portal.clients.exceptions import (
    BackendAuthError,
    BackendError,
    BackendUnavailableError,
)
from pcf_portal.core.config import Config

logger = logging.getLogger(__name__)

NO_CONTENT_STATUSES = (204, 205)


class BackendClient:
    """
    Thin wrapper over httpx for the backend's JSON API.

    Handles authentication headers, error normalization and empty bodies.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend API root, e.g. "http://localhost:8000/api"
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout, transport=transport
        )

    @classmethod
    def from_config(
        cls, config: Config, transport: httpx.AsyncBaseTransport | None = None
    ) -> "BackendClient":
        backend = config.section("backend")
        return cls(
            base_url=backend.get("base_url", "http://localhost:8000/api"),
            timeout=float(backend.get("timeout_seconds", 30)),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        endpoint: str,
        token: str | None = None,
        body: Any = None,
        params: dict[str, Any] | None = None,
        requires_auth: bool = True,
    ) -> Any:
        """
        Send a request and return the decoded JSON body.

        Args:
            method: HTTP method
            endpoint: Path relative to the API root, e.g. "/companies/my/"
            token: Bearer token of the calling user
            body: JSON body (ignored for GET)
            params: Query string parameters
            requires_auth: Whether a token is mandatory

        Returns:
            Decoded JSON, or None for empty responses

        Raises:
            BackendAuthError: Missing token or 401 from the backend
            BackendUnavailableError: Network failure or timeout
            BackendError: Any other non-2xx response
        """
        if requires_auth and not token:
            raise BackendAuthError("Authentication required")

        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        json_body = None
        if body is not None and method != "GET":
            json_body = jsonable_encoder(body)

        try:
            response = await self._client.request(
                method, endpoint, json=json_body, params=params, headers=headers
            )
        except httpx.HTTPError as e:
            logger.error(f"Request to backend failed: {method} {endpoint}: {e}")
            raise BackendUnavailableError(str(e) or "Network error") from e

        if response.is_error:
            payload = self._decode(response)
            error = normalize_error_payload(payload, response.status_code)
            logger.error(
                f"Backend error ({response.status_code}) on {method} {endpoint}: "
                f"{error.detail}"
            )
            if response.status_code == 401:
                raise BackendAuthError(
                    error.detail, errors=error.errors, payload=payload
                )
            raise BackendError(
                response.status_code, error.detail, errors=error.errors, payload=payload
            )

        if method == "DELETE" or response.status_code in NO_CONTENT_STATUSES:
            return None

        return self._decode(response)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        """Decode a JSON body; empty or malformed bodies give None."""
        if not response.content or not response.text.strip():
            return None
        try:
            return response.json()
        except ValueError:
            logger.warning(f"Failed to parse backend response as JSON: {response.text!r}")
            return None

    async def get(self, endpoint: str, **kwargs) -> Any:
        return await self.request("GET", endpoint, **kwargs)

    async def post(self, endpoint: str, body: Any = None, **kwargs) -> Any:
        return await self.request("POST", endpoint, body=body, **kwargs)

    async def put(self, endpoint: str, body: Any = None, **kwargs) -> Any:
        return await self.request("PUT", endpoint, body=body, **kwargs)

    async def patch(self, endpoint: str, body: Any = None, **kwargs) -> Any:
        return await self.request("PATCH", endpoint, body=body, **kwargs)

    async def delete(self, endpoint: str, **kwargs) -> Any:
        return await self.request("DELETE", endpoint, **kwargs)

    async def options(self, endpoint: str, **kwargs) -> Any:
        return await self.request("OPTIONS", endpoint, **kwargs)

