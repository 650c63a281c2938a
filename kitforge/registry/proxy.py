"""Cached, coalescing front for the npm registry.

``search`` and ``info`` each have their own :class:`TTLCache`.  On a miss the
upstream call goes through a :class:`SingleFlight` group, so a burst of
identical requests costs one registry round trip.  Only successful results
are cached; a ``NotFound`` or ``UpstreamError`` is retried on the next call.
"""

from __future__ import annotations

import logging

from kitforge.config import Config
from kitforge.errors import ConfigurationError

from .cache import SingleFlight, TTLCache
from .client import RegistryClient
from .models import PackageInfo, SearchResults

logger = logging.getLogger(__name__)


class RegistryProxy:
    """Search and package lookups with a TTL cache in front."""

    def __init__(
        self,
        client: RegistryClient | None = None,
        ttl: float = 3600.0,
        default_limit: int = 20,
        max_limit: int = 250,
    ) -> None:
        self.client = client or RegistryClient()
        self.default_limit = default_limit
        self.max_limit = max_limit
        self.search_cache: TTLCache[SearchResults] = TTLCache(ttl)
        self.info_cache: TTLCache[PackageInfo] = TTLCache(ttl)
        self._flights = SingleFlight()

    @classmethod
    def from_config(cls, config: Config, client: RegistryClient | None = None) -> "RegistryProxy":
        client = client or RegistryClient(config.registry_url, timeout=config.http_timeout)
        return cls(
            client,
            ttl=config.cache_ttl,
            default_limit=config.search_default_limit,
            max_limit=config.search_max_limit,
        )

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search(self, query: str | None, limit: int | None = None) -> SearchResults:
        """Search the registry.

        Raises:
            ConfigurationError: If *query* is blank or *limit* out of range.
            UpstreamError: If the registry call fails.
        """
        text = (query or "").strip()
        if not text:
            raise ConfigurationError("Query parameter is required")
        size = self._check_limit(limit)

        key = f"search:{text.lower()}:{size}"
        cached = self.search_cache.get(key)
        if cached is not None:
            logger.debug("Cache hit %s", key)
            return _echo(cached, text)

        async def fetch() -> SearchResults:
            logger.debug("Cache miss %s", key)
            data = await self.client.search(text, size)
            results = SearchResults.from_registry(text, data)
            self.search_cache.set(key, results)
            return results

        return _echo(await self._flights.do(key, fetch), text)

    def _check_limit(self, limit: int | None) -> int:
        if limit is None:
            return self.default_limit
        if not 1 <= limit <= self.max_limit:
            raise ConfigurationError(f"limit must be between 1 and {self.max_limit}")
        return limit

    # ------------------------------------------------------------------
    # Package info
    # ------------------------------------------------------------------

    async def info(self, name: str | None) -> PackageInfo:
        """Look up one package.

        Raises:
            ConfigurationError: If *name* is blank.
            NotFound: If the registry has no such package (never cached).
            UpstreamError: If the registry call fails.
        """
        package = (name or "").strip()
        if not package:
            raise ConfigurationError("Package name is required")

        # Registry names are case-sensitive for older packages such as JSONStream.
        key = f"package:{package}"
        cached = self.info_cache.get(key)
        if cached is not None:
            logger.debug("Cache hit %s", key)
            return cached

        async def fetch() -> PackageInfo:
            logger.debug("Cache miss %s", key)
            data = await self.client.package(package)
            info = PackageInfo.from_registry(data)
            self.info_cache.set(key, info)
            return info

        return await self._flights.do(key, fetch)


def _echo(results: SearchResults, query: str) -> SearchResults:
    """Return *results* carrying the caller's own spelling of the query."""
    if results.query == query:
        return results
    return results.model_copy(update={"query": query})
