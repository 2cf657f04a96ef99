"""HTTP client for the hosted backend.

Hides the details shared by every hosted endpoint (auth, REST tables,
edge functions):
- Base URL and API key / bearer token headers
- httpx client lifetime
- Translation of HTTP and network failures into TransportError
"""

import logging
from typing import Any

import httpx

from ..errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


class HostedClient:
    """Thin async wrapper over ``httpx.AsyncClient`` for one hosted project.

    Supports async context manager protocol:
        async with HostedClient(url, api_key) as client:
            response = await client.request("GET", "/auth/v1/user")
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        access_token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            url: Project base URL, e.g. ``https://abc.example.co``
            api_key: Public API key sent as ``apikey``
            access_token: User session token; the API key is used when absent
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self._url = url.rstrip("/")
        self._api_key = api_key
        self._access_token = access_token
        self._client = httpx.AsyncClient(
            base_url=self._url,
            headers=self._headers(),
            timeout=timeout,
            transport=transport,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._access_token or self._api_key}",
        }

    @property
    def url(self) -> str:
        return self._url

    @property
    def access_token(self) -> str | None:
        return self._access_token

    def set_access_token(self, access_token: str | None) -> None:
        """Switch the bearer token used for subsequent requests."""
        self._access_token = access_token
        self._client.headers.update(self._headers())

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send a request and return the successful response.

        Raises:
            TransportError: On network failure or a non-2xx status
        """
        try:
            response = await self._client.request(
                method, path, params=params, json=json, headers=headers
            )
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TransportError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            detail = _error_detail(response)
            logger.warning("%s %s returned %d: %s", method, path, response.status_code, detail)
            raise TransportError(detail, status_code=response.status_code)

        return response

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "HostedClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


def _error_detail(response: httpx.Response) -> str:
    """Best human-readable message from an error response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error_description", "error", "msg"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    text = response.text.strip()
    return text or f"HTTP {response.status_code}"
