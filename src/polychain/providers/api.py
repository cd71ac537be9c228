"""Chain data API client (read-only NFT and wallet queries)."""

import logging
from typing import Any, Optional

import httpx

from polychain.chains import Protocol
from polychain.config import Settings, get_settings
from polychain.errors import ChainQueryError
from polychain.providers.base import ChainQueryClient

logger = logging.getLogger(__name__)


class HttpChainQueryClient(ChainQueryClient):
    """Chain data API over HTTPS.

    Authenticates with the x-api-key header when settings.api_key is set.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.settings.api_key:
            headers["x-api-key"] = self.settings.api_key
        return headers

    async def query(
        self,
        protocol: Protocol,
        path: str,
        params: Optional[dict[str, Any]] = None,
    ) -> dict:
        url = f"{self.settings.api_url.rstrip('/')}{path}"
        query_params = dict(params or {})
        query_params.setdefault("protocol", protocol.value)

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.request_timeout,
                transport=self.transport,
            ) as client:
                response = await client.get(url, params=query_params, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"Chain data API request to {path} failed: {e}")
            raise ChainQueryError(f"Chain data API request failed: {e}") from e

        if response.status_code != 200:
            message = self._error_message(response)
            logger.warning(f"Chain data API returned {response.status_code} for {path}: {message}")
            raise ChainQueryError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ChainQueryError(
                "Chain data API returned invalid JSON", status_code=response.status_code
            ) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Best-effort error message from an API error body."""
        try:
            data = response.json()
        except ValueError:
            return f"Chain data API error (HTTP {response.status_code})"
        if isinstance(data, dict):
            message = data.get("message") or data.get("error")
            if message:
                return str(message)
        return f"Chain data API error (HTTP {response.status_code})"
