"""Dependency aggregation and ``package.json`` generation.

Customizers append package names to a shared :class:`DependencyList`; once
every customizer has run, :func:`build_manifest` merges those names with the
pinned framework entries and produces a structured :class:`ManifestDocument`.
Versions are never resolved: customizer-supplied names all map to
``"latest"``.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field

from .selection import Language

# Pinned framework entries present in every manifest.  They win over a
# customizer that names the same package.
BASE_DEPENDENCIES: tuple[tuple[str, str], ...] = (
    ("react", "^18.3.1"),
    ("react-dom", "^18.3.1"),
)

LATEST = "latest"

DEV_DEPENDENCIES: dict[str, str] = {
    "@eslint/js": "^9.15.0",
    "@types/react": "^18.3.12",
    "@types/react-dom": "^18.3.1",
    "@vitejs/plugin-react-swc": "^3.5.0",
    "eslint": "^9.15.0",
    "eslint-plugin-react": "^7.37.2",
    "eslint-plugin-react-hooks": "^5.0.0",
    "eslint-plugin-react-refresh": "^0.4.14",
    "globals": "^15.12.0",
    "vite": "^6.0.1",
}

TS_DEV_DEPENDENCIES: dict[str, str] = {
    "typescript": "~5.6.2",
}


class DependencyList:
    """Ordered-unique accumulator of package names.

    Adding a name that is already present is a no-op, so customizers that
    overlap (``shadcn`` re-applying the Tailwind setup, say) never produce
    duplicates.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: dict[str, None] = {}
        self.add(*names)

    def add(self, *names: str) -> None:
        for name in names:
            cleaned = name.strip()
            if not cleaned:
                raise ValueError("Dependency names must be non-empty")
            self._names.setdefault(cleaned, None)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"DependencyList({list(self._names)!r})"


class ManifestDocument(BaseModel):
    """Structured ``package.json`` for the generated project."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    private: bool = True
    version: str = "0.0.0"
    type: str = "module"
    scripts: dict[str, str] = Field(default_factory=dict)
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")

    def to_dict(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)

    def to_json(self) -> str:
        """Serialise with a trailing newline, the way npm writes it."""
        return json.dumps(self.to_dict(), indent=2) + "\n"


def build_scripts(lang: Language) -> dict[str, str]:
    build = "tsc -b && vite build" if lang is Language.TS else "vite build"
    return {
        "dev": "vite",
        "build": build,
        "lint": "eslint .",
        "preview": "vite preview",
    }


def build_manifest(
    names: Iterable[str],
    project_name: str,
    lang: Language,
    base_entries: Iterable[tuple[str, str]] = BASE_DEPENDENCIES,
) -> ManifestDocument:
    """Merge *base_entries* with customizer *names* into a manifest.

    Dependencies are keyed and sorted by name, so neither insertion order
    nor duplicates change the serialised output.
    """
    merged: dict[str, str] = {name: LATEST for name in names}
    merged.update(dict(base_entries))

    dev = dict(DEV_DEPENDENCIES)
    if lang is Language.TS:
        dev.update(TS_DEV_DEPENDENCIES)

    return ManifestDocument(
        name=project_name,
        scripts=build_scripts(lang),
        dependencies=dict(sorted(merged.items())),
        dev_dependencies=dict(sorted(dev.items())),
    )
