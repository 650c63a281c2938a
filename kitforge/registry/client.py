"""Async client for the public npm registry.

Wraps the two read-only endpoints kitforge uses, ``/-/v1/search`` and
``/<package>``, and maps transport and HTTP failures onto the kitforge
error taxonomy.

Typical usage::

    client = RegistryClient()
    data = await client.search("react", size=20)
    doc = await client.package("@tanstack/react-query")
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from kitforge.config import NPM_REGISTRY_URL
from kitforge.errors import NotFound, UpstreamError

logger = logging.getLogger(__name__)


class RegistryClient:
    """Thin httpx wrapper around the npm registry API.

    ``transport`` is forwarded to :class:`httpx.AsyncClient`; tests pass an
    :class:`httpx.MockTransport` there.
    """

    def __init__(
        self,
        base_url: str = NPM_REGISTRY_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL and timeout."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            headers={"Accept": "application/json"},
            transport=self.transport,
        )

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            async with self._client() as client:
                resp = await client.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Registry request %s failed: %s", path, exc)
            raise UpstreamError(f"Registry request failed: {exc}") from exc

        if resp.status_code == 404:
            raise NotFound(f"Not found in registry: {path.lstrip('/')}")
        if resp.is_error:
            logger.warning("Registry returned HTTP %d for %s", resp.status_code, path)
            raise UpstreamError(f"Registry returned HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamError("Registry returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise UpstreamError("Registry returned an unexpected document")
        return data

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def search(self, text: str, size: int) -> dict[str, Any]:
        """Raw ``/-/v1/search`` document for *text*."""
        try:
            return await self._get_json("/-/v1/search", params={"text": text, "size": size})
        except NotFound as exc:
            raise UpstreamError("Registry search endpoint not found") from exc

    async def package(self, name: str) -> dict[str, Any]:
        """Raw package document for *name*.

        Scoped names (``@scope/pkg``) are sent with the slash encoded.

        Raises:
            NotFound: If the registry has no such package.
            UpstreamError: On any other failure.
        """
        try:
            return await self._get_json("/" + quote(name, safe="@"))
        except NotFound as exc:
            raise NotFound(f"Package not found: {name}") from exc
