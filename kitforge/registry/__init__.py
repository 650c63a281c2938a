"""kitforge registry -- TTL-cached proxy over the npm registry.

Usage::

    from kitforge.registry import RegistryProxy

    proxy = RegistryProxy.from_config(config)
    results = await proxy.search("react query", limit=10)
    info = await proxy.info("@tanstack/react-query")
"""

from kitforge.registry.cache import SingleFlight, TTLCache
from kitforge.registry.client import RegistryClient
from kitforge.registry.models import PackageInfo, SearchHit, SearchResults
from kitforge.registry.proxy import RegistryProxy

__all__ = [
    "PackageInfo",
    "RegistryClient",
    "RegistryProxy",
    "SearchHit",
    "SearchResults",
    "SingleFlight",
    "TTLCache",
]
