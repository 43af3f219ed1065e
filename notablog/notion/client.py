"""Async Notion REST client using httpx, with tenacity retries."""

from __future__ import annotations

import os
import re
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable
from urllib.parse import urlparse

import httpx
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from ..errors import ConfigError, FetchError, NotionApiError, NotionNotFoundError
from ..lib.log import get_logger
from ..models import SiteMetadata
from .table import parse_site_metadata

logger = get_logger(__name__)

NOTION_API_BASE = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"
ENV_NOTION_TOKEN = "NOTION_TOKEN"
PAGE_SIZE = 100
DEFAULT_RETRIES = 3
DEFAULT_RETRY_BASE = 0.5

# Blocks whose children are separate pages, not part of this page's tree
_OPAQUE_CHILD_TYPES = {"child_page", "child_database"}

_ID_RE = re.compile(r"[0-9a-fA-F]{32}")


@runtime_checkable
class PageFetcher(Protocol):
    """What the build pipeline needs from a remote content source."""

    async def fetch_site_metadata(self, url: str, theme: str) -> SiteMetadata:
        ...

    async def fetch_page(self, page_id: str) -> Dict[str, Any]:
        ...


def extract_database_id(url: str) -> str:
    """Pull the 32-hex database id out of a Notion URL (or a bare id).

    Notion prefixes the id with the page title, so only the last 32 hex
    digits of a path segment count.
    """
    path = urlparse(url).path or url
    for segment in reversed(path.split("/")):
        tail = segment.replace("-", "")[-32:]
        if len(tail) == 32 and _ID_RE.fullmatch(tail):
            return tail.lower()
    raise ConfigError(f"Cannot find a Notion database id in '{url}'")


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, NotionApiError):
        return exc.status == 429 or exc.status >= 500
    return isinstance(exc, httpx.TransportError)


def _raise_for_status(resp: httpx.Response) -> None:
    if resp.status_code < 400:
        return
    message = f"HTTP {resp.status_code}"
    payload: Optional[Dict[str, Any]] = None
    try:
        body = resp.json()
    except ValueError:
        text = resp.text.strip()
        if text:
            message = text
    else:
        if isinstance(body, dict):
            payload = body
            msg = body.get("message")
            if isinstance(msg, str) and msg.strip():
                message = msg
    if resp.status_code == 404:
        raise NotionNotFoundError(message, resp.status_code, payload)
    raise NotionApiError(message, resp.status_code, payload)


def _decode_body(resp: httpx.Response, method: str, path: str) -> Dict[str, Any]:
    try:
        data = resp.json()
    except ValueError as exc:
        raise FetchError(f"{method} {path} returned a non-JSON body") from exc
    if not isinstance(data, dict):
        raise FetchError(f"{method} {path} returned {type(data).__name__}, expected an object")
    return data


class NotionClient:
    """Read-only client for a Notion integration.

    Use as an async context manager so the underlying connection pool is
    closed when the build finishes.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = NOTION_API_BASE,
        retries: int = DEFAULT_RETRIES,
        retry_base: float = DEFAULT_RETRY_BASE,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._retries = max(0, retries)
        self._retry_base = max(0.0, retry_base)
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Notion-Version": NOTION_VERSION,
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> "NotionClient":
        token = os.environ.get(ENV_NOTION_TOKEN)
        if not token:
            raise ConfigError(f"{ENV_NOTION_TOKEN} is not set; create a Notion integration and export its token")
        return cls(token, **kwargs)

    async def __aenter__(self) -> "NotionClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        retryer = AsyncRetrying(
            stop=stop_after_attempt(self._retries + 1),
            wait=wait_exponential(multiplier=self._retry_base, min=self._retry_base, max=10),
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        )
        try:
            async for attempt in retryer:
                with attempt:
                    resp = await self._client.request(method, path, params=params, json=body)
                    _raise_for_status(resp)
                    return _decode_body(resp, method, path)
        except httpx.HTTPError as exc:
            raise FetchError(f"{method} {path} failed: {exc}") from exc
        raise FetchError(f"{method} {path} gave up without a response")  # pragma: no cover

    async def get_database(self, database_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/databases/{database_id}")

    async def query_database(self, database_id: str) -> List[Dict[str, Any]]:
        rows: List[Dict[str, Any]] = []
        cursor: Optional[str] = None
        while True:
            body: Dict[str, Any] = {"page_size": PAGE_SIZE}
            if cursor:
                body["start_cursor"] = cursor
            data = await self._request("POST", f"/databases/{database_id}/query", body=body)
            rows.extend(data.get("results", []))
            cursor = data.get("next_cursor")
            if not data.get("has_more") or not cursor:
                return rows

    async def list_children(self, block_id: str) -> List[Dict[str, Any]]:
        blocks: List[Dict[str, Any]] = []
        cursor: Optional[str] = None
        while True:
            params: Dict[str, Any] = {"page_size": PAGE_SIZE}
            if cursor:
                params["start_cursor"] = cursor
            data = await self._request("GET", f"/blocks/{block_id}/children", params=params)
            blocks.extend(data.get("results", []))
            cursor = data.get("next_cursor")
            if not data.get("has_more") or not cursor:
                return blocks

    async def _block_tree(self, block_id: str) -> List[Dict[str, Any]]:
        blocks = await self.list_children(block_id)
        for block in blocks:
            if block.get("has_children") and block.get("type") not in _OPAQUE_CHILD_TYPES:
                block["children"] = await self._block_tree(block["id"])
        return blocks

    async def fetch_page(self, page_id: str) -> Dict[str, Any]:
        """Fetch a page's full block tree as plain JSON-serializable data."""
        logger.debug("Fetch page tree", page_id=page_id)
        return {"id": page_id, "children": await self._block_tree(page_id)}

    async def fetch_site_metadata(self, url: str, theme: str) -> SiteMetadata:
        database_id = extract_database_id(url)
        database = await self.get_database(database_id)
        rows = await self.query_database(database_id)
        logger.debug("Fetched database rows", database_id=database_id, rows=len(rows))
        return parse_site_metadata(url, theme, database, rows)


__all__ = ["NotionClient", "PageFetcher", "extract_database_id", "NOTION_VERSION"]
