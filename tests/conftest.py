"""Shared pytest fixtures for the kitforge test suite.

Provides reusable fixtures for:
- An isolated Config pointing at a temporary work directory
- Selections used across the scaffolder tests
- A scaffold generator wired to the real templates
- A registry client backed by ``httpx.MockTransport``
- A helper for reading zip archives
"""

from __future__ import annotations

import io
import zipfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from kitforge.config import Config
from kitforge.registry import RegistryClient
from kitforge.scaffolder import InterruptRegistry, ScaffoldGenerator, Selection, build_selection


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Config whose working trees live under the test's tmp directory."""
    return Config(work_dir=tmp_path / "work", log_level="DEBUG")


@pytest.fixture
def work_dir(config: Config) -> Path:
    return config.work_dir


# ---------------------------------------------------------------------------
# Selections
# ---------------------------------------------------------------------------

@pytest.fixture
def minimal_selection() -> Selection:
    """JavaScript, no router, nothing else."""
    return build_selection({"lang": "js", "router": "none"})


@pytest.fixture
def scenario_selection() -> Selection:
    """TypeScript + Tailwind + Zustand + SWR + fetch + react-hook-form + lucide."""
    return build_selection({
        "lang": "ts",
        "styling": "tailwindcss",
        "ui_library": "none",
        "state_management": "zustand",
        "server_state": "swr",
        "data_fetching": "fetch",
        "form_management": "react-hook-form",
        "icon_library": "lucide",
        "router": "default",
    })


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

@pytest.fixture
def interrupts() -> InterruptRegistry:
    return InterruptRegistry()


@pytest.fixture
def generator(config: Config, interrupts: InterruptRegistry) -> ScaffoldGenerator:
    return ScaffoldGenerator(config, interrupts=interrupts)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def make_search_payload(names: list[str]) -> dict[str, Any]:
    return {
        "total": len(names),
        "objects": [
            {
                "package": {
                    "name": name,
                    "version": "1.0.0",
                    "description": f"{name} package",
                    "keywords": ["react"],
                    "date": "2024-05-01T00:00:00.000Z",
                    "publisher": {"username": "someone"},
                    "links": {"npm": f"https://www.npmjs.com/package/{name}"},
                },
                "score": {
                    "final": 0.9,
                    "detail": {"quality": 0.8, "popularity": 0.7, "maintenance": 0.6},
                },
                "searchScore": 1000.0,
            }
            for name in names
        ],
    }


def make_package_payload(name: str) -> dict[str, Any]:
    return {
        "name": name,
        "description": "A test package",
        "dist-tags": {"latest": "2.0.0"},
        "versions": {
            "1.0.0": {"dependencies": {"old": "^1.0.0"}},
            "1.1.0": {},
            "2.0.0": {
                "dependencies": {"loose-envify": "^1.1.0"},
                "devDependencies": {"jest": "^29.0.0"},
            },
        },
        "time": {
            "created": "2020-01-01T00:00:00.000Z",
            "1.0.0": "2020-01-01T00:00:00.000Z",
            "1.1.0": "2021-01-01T00:00:00.000Z",
            "2.0.0": "2022-01-01T00:00:00.000Z",
        },
        "homepage": "https://example.com",
        "repository": {"type": "git", "url": "git+https://github.com/example/pkg.git"},
        "license": "MIT",
        "author": {"name": "Example Author"},
        "keywords": ["example"],
    }


class RecordingHandler:
    """``httpx.MockTransport`` handler that answers like the npm registry.

    Unknown packages get a 404.  Every request is recorded in ``calls``.
    """

    def __init__(self, packages: tuple[str, ...] = ("react", "@tanstack/react-query")) -> None:
        self.packages = set(packages)
        self.calls: list[httpx.Request] = []
        self.status_override: int | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.status_override is not None:
            return httpx.Response(self.status_override, json={"error": "boom"})
        if request.url.path == "/-/v1/search":
            text = request.url.params.get("text", "")
            return httpx.Response(200, json=make_search_payload([text, f"{text}-extra"]))
        name = request.url.path.lstrip("/")
        if name in self.packages:
            return httpx.Response(200, json=make_package_payload(name))
        return httpx.Response(404, json={"error": "Not found"})


@pytest.fixture
def registry_handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def registry_client(registry_handler: RecordingHandler) -> RegistryClient:
    return RegistryClient("https://registry.test", transport=httpx.MockTransport(registry_handler))


# ---------------------------------------------------------------------------
# Zip helpers
# ---------------------------------------------------------------------------

def read_zip(data: bytes) -> dict[str, bytes]:
    """Return ``{member name: content}`` for every file member."""
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {info.filename: zf.read(info) for info in zf.infolist() if not info.is_dir()}


@pytest.fixture
def unzip() -> Callable[[bytes], dict[str, bytes]]:
    return read_zip
