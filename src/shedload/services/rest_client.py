"""Thin JSON client for the remote courier API."""

import logging
from collections.abc import Callable
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A non-2xx response (or no response at all) from the API.

    ``status`` is 0 when the request never got a response.
    """

    def __init__(self, status: int, data: Any, message: str):
        super().__init__(message)
        self.status = status
        self.data = data
        self.message = message

    def __repr__(self) -> str:
        return f"ApiError(status={self.status}, message={self.message!r})"


class NoContent:
    """Returned for successful responses without a body."""

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_CONTENT"


NO_CONTENT = NoContent()


class RestClient:
    """Sends JSON, returns decoded JSON or raises ApiError.

    Args:
        base_url: API root, e.g. ``https://api.example.com``.
        token_provider: Returns the current bearer token, or None.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Callable[[], str | None] | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._token_provider = token_provider or (lambda: None)
        self.client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and decode the JSON response."""
        response = await self.send(method, endpoint, json=json, params=params, files=files)

        if response.status_code == 204 or not response.content:
            return NO_CONTENT

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(response.status_code, response.text, f"Invalid JSON from API: {e}") from e

    async def send(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request and return the raw response once it is known to be 2xx."""
        headers = {}
        token = self._token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            response = await self.client.request(
                method, endpoint, json=json, params=params, files=files, headers=headers
            )
        except httpx.HTTPError as e:
            logger.error("API request %s %s failed: %s", method, endpoint, e)
            raise ApiError(0, None, f"Unable to reach API: {e}") from e

        if not response.is_success:
            raise self._error_from(response, endpoint)

        return response

    def _error_from(self, response: httpx.Response, endpoint: str) -> ApiError:
        """Normalise an error response to ApiError."""
        try:
            data = response.json()
        except ValueError:
            data = {
                "message": response.reason_phrase or "An API error occurred without a JSON body"
            }

        message = None
        if isinstance(data, dict):
            message = data.get("error") or data.get("message")
        if not message:
            message = f"API request failed with status {response.status_code}"

        logger.warning("API error: %s %s %s", endpoint, response.status_code, message)
        return ApiError(response.status_code, data, message)

    async def get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", endpoint, params=params)

    async def post(self, endpoint: str, json: Any = None) -> Any:
        return await self.request("POST", endpoint, json=json)

    async def put(self, endpoint: str, json: Any = None) -> Any:
        return await self.request("PUT", endpoint, json=json)

    async def aclose(self) -> None:
        await self.client.aclose()
