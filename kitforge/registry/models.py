"""Pydantic models for registry responses.

The npm registry returns loosely typed documents (``author`` may be a string
or an object, ``repository`` a URL or an object, and so on).  The
``from_registry`` constructors flatten them into a stable schema so callers
never see upstream quirks.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

MAX_VERSIONS = 10


def _person(value: Any) -> str | None:
    """Flatten an npm person field (string or object) to a display string."""
    if isinstance(value, dict):
        return value.get("name") or value.get("username")
    if isinstance(value, str) and value:
        return value
    return None


def _url(value: Any) -> str | None:
    if isinstance(value, dict):
        return value.get("url")
    if isinstance(value, str) and value:
        return value
    return None


def _license(value: Any) -> str | None:
    if isinstance(value, dict):
        return value.get("type")
    if isinstance(value, str) and value:
        return value
    return None


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class PackageLinks(BaseModel):
    npm: str | None = None
    homepage: str | None = None
    repository: str | None = None


class PackageScore(BaseModel):
    final: float = 0.0
    quality: float = 0.0
    popularity: float = 0.0
    maintenance: float = 0.0


class SearchHit(BaseModel):
    """One package in a search result."""

    name: str
    version: str = ""
    description: str = ""
    keywords: list[str] = Field(default_factory=list)
    date: str | None = None
    publisher: str | None = None
    author: str | None = None
    links: PackageLinks = Field(default_factory=PackageLinks)
    score: PackageScore = Field(default_factory=PackageScore)

    @classmethod
    def from_registry(cls, obj: dict[str, Any]) -> "SearchHit":
        package = obj.get("package") or {}
        score = obj.get("score") or {}
        detail = score.get("detail") or {}
        links = package.get("links") or {}
        return cls(
            name=package.get("name", ""),
            version=package.get("version") or "",
            description=package.get("description") or "",
            keywords=list(package.get("keywords") or []),
            date=package.get("date"),
            publisher=_person(package.get("publisher")),
            author=_person(package.get("author")),
            links=PackageLinks(
                npm=links.get("npm"),
                homepage=links.get("homepage"),
                repository=links.get("repository"),
            ),
            score=PackageScore(
                final=score.get("final") or 0.0,
                quality=detail.get("quality") or 0.0,
                popularity=detail.get("popularity") or 0.0,
                maintenance=detail.get("maintenance") or 0.0,
            ),
        )


class SearchResults(BaseModel):
    query: str
    total: int = 0
    packages: list[SearchHit] = Field(default_factory=list)

    @classmethod
    def from_registry(cls, query: str, data: dict[str, Any]) -> "SearchResults":
        hits = [SearchHit.from_registry(obj) for obj in data.get("objects") or []]
        return cls(query=query, total=data.get("total", len(hits)), packages=hits)


# ---------------------------------------------------------------------------
# Package info
# ---------------------------------------------------------------------------


class PackageInfo(BaseModel):
    """Summary of one package document, resolved at its ``latest`` version."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    version: str | None = None
    description: str | None = None
    homepage: str | None = None
    repository: str | None = None
    license: str | None = None
    author: str | None = None
    keywords: list[str] = Field(default_factory=list)
    versions: list[str] = Field(default_factory=list, description="Most recent first")
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")

    @classmethod
    def from_registry(cls, data: dict[str, Any]) -> "PackageInfo":
        versions: dict[str, Any] = data.get("versions") or {}
        latest = (data.get("dist-tags") or {}).get("latest")
        if latest not in versions:
            latest = next(reversed(versions), None) if versions else latest
        resolved = versions.get(latest) or {}

        return cls(
            name=data.get("name", ""),
            version=latest,
            description=data.get("description"),
            homepage=data.get("homepage"),
            repository=_url(data.get("repository")),
            license=_license(data.get("license")),
            author=_person(data.get("author")),
            keywords=list(data.get("keywords") or []),
            versions=_recent_versions(versions, data.get("time") or {}),
            dependencies=resolved.get("dependencies") or {},
            dev_dependencies=resolved.get("devDependencies") or {},
        )


def _recent_versions(versions: dict[str, Any], published: dict[str, str]) -> list[str]:
    """Newest first, by publish time where known, else by document order."""
    order = list(versions)
    if published and all(v in published for v in order):
        order.sort(key=lambda v: published[v])
    return list(reversed(order))[:MAX_VERSIONS]
