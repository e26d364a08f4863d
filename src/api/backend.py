from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

import httpx

from api.printer import LabelPrinter
from core.errors import AuthenticationFailed, BackendError, SearchFailed
from core.models import QueueLineItem, RawProductRecord
from utils.config import AppConfig
from utils.logger import get_logger

_logger = get_logger(__name__)


class Backend(Protocol):
    """The four remote operations the client depends on."""

    async def fetch_locations(self) -> Any: ...

    async def login(
        self, username: str, password: str, location: Optional[str]
    ) -> Mapping[str, Any]: ...

    async def search_products(
        self, term: str, token: Optional[str]
    ) -> List[RawProductRecord]: ...

    async def print_labels(self, items: Sequence[QueueLineItem]) -> Any: ...


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, Mapping) and isinstance(body.get("message"), str):
        return body["message"]
    return default


def unwrap_products(body: Any) -> List[RawProductRecord]:
    """Search answers with either a bare list or ``{"data": [...]}``."""
    if isinstance(body, list):
        return body
    if isinstance(body, Mapping) and "data" in body:
        data = body["data"]
        if not isinstance(data, list):
            raise SearchFailed("Unexpected search response: 'data' is not a list")
        return data
    return []


class HttpBackend:
    """
    Talks to the catalog/auth API over HTTP and prints through the local
    label printer.
    """

    def __init__(
        self,
        config: AppConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        printer: Optional[LabelPrinter] = None,
    ) -> None:
        self._config = config
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.request_timeout)
        )
        self._printer = printer or LabelPrinter(
            config.data_file_path, config.template_file_path
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpBackend":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            _logger.error(f"{method} {url} failed: {e!r}")
            raise BackendError(str(e) or type(e).__name__) from e

    # ---------------------------
    # Remote operations
    # ---------------------------

    async def fetch_locations(self) -> Any:
        response = await self._send("GET", self._config.locations_api_url)
        if not response.is_success:
            raise BackendError(
                f"Fetching locations failed with status: {response.status_code}"
            )
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(f"Invalid locations response: {e}") from e

    async def login(
        self, username: str, password: str, location: Optional[str] = None
    ) -> Mapping[str, Any]:
        body: Dict[str, Any] = {"name": username, "password": password}
        if location:
            body["location"] = location
            body["loca_code"] = location

        response = await self._send("POST", self._config.login_api_url, json=body)
        if not response.is_success:
            raise AuthenticationFailed(_error_message(response, "Login failed"))
        try:
            data = response.json()
        except ValueError as e:
            raise AuthenticationFailed(f"Malformed login response: {e}") from e
        if not isinstance(data, Mapping):
            raise AuthenticationFailed("Malformed login response")
        return data

    async def search_products(
        self, term: str, token: Optional[str] = None
    ) -> List[RawProductRecord]:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        response = await self._send(
            "GET",
            self._config.search_api_url,
            params={"search": term},
            headers=headers,
        )
        if not response.is_success:
            raise SearchFailed(f"Request failed with status: {response.status_code}")
        try:
            body = response.json()
        except ValueError as e:
            raise SearchFailed(f"Invalid search response: {e}") from e
        return unwrap_products(body)

    async def print_labels(self, items: Sequence[QueueLineItem]) -> Any:
        return await self._printer.print_labels(items)
