"""HTTP transport for grid data and auxiliary payloads."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

import httpx

from gridflow.core.utils import get_logger

if TYPE_CHECKING:  # pragma: no cover - import for type checking only
    from gridflow.core.collaborators import Notifier

logger = get_logger(__name__)


def build_url(url: str, params: Mapping[str, Any] | None = None) -> str:
    """
    Append *params* to *url* as a query string.

    List and tuple values become repeated ``key=value`` pairs. When *url*
    already carries a query string the parameters are appended with ``&``.

    Examples:
        >>> build_url("http://example.com", {"state": ["ca", "az"]})
        'http://example.com?state=ca&state=az'
        >>> build_url("http://example.com?id=1", {"state": "ca"})
        'http://example.com?id=1&state=ca'
    """
    if not params:
        return url

    pairs: list[tuple[str, Any]] = []
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _encode_value(item)) for item in value)
        else:
            pairs.append((key, _encode_value(value)))

    if not pairs:
        return url

    query = urlencode(pairs)
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


def _encode_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


class DataLoader:
    """
    Fetches JSON payloads for a grid.

    ``fetch_json`` raises on failure and is meant for callers that manage
    their own error flow (the data pipeline). ``request_data`` and
    ``request_grid_data`` report failures through the notifier and return
    an empty result instead.
    """

    def __init__(
        self,
        notifier: Notifier,
        *,
        base_url: str = "",
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.notifier = notifier
        self.base_url = base_url
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def fetch_json(self, locator: str) -> Any:
        """
        GET *locator* and decode its JSON body.

        Raises:
            httpx.HTTPError: On transport failure or a non-success status
            ValueError: When the body is not valid JSON
        """
        logger.debug("Fetching %s", locator)
        response = await self._get_client().get(locator)
        response.raise_for_status()
        return response.json()

    async def request_data(self, locator: str, params: Mapping[str, Any] | None = None) -> Any:
        """Fetch *locator* with *params*; None (after notifying) on failure."""
        url = build_url(locator, params)
        try:
            return await self.fetch_json(url)
        except httpx.HTTPStatusError as exc:
            response = exc.response
            message = f"{response.status_code}: {response.reason_phrase}"
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            message = f"Failed to load {url}: {exc}"

        logger.error("Request failed for %s: %s", url, message)
        self.notifier.notify(message)
        return None

    async def request_grid_data(
        self, locator: str, params: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """
        Fetch a grid payload and normalise it to ``{"data": [...], "rowCount": n}``.

        Servers may answer with a bare list of rows or with the paged
        ``{"rowCount", "data"}`` envelope. Failures resolve to an empty page.
        """
        payload = await self.request_data(locator, params)
        if isinstance(payload, list):
            return {"data": payload, "rowCount": len(payload)}
        if isinstance(payload, Mapping):
            rows = payload.get("data")
            rows = rows if isinstance(rows, list) else []
            row_count = payload.get("rowCount", len(rows))
            return {"data": rows, "rowCount": row_count}
        return {"data": [], "rowCount": 0}

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
