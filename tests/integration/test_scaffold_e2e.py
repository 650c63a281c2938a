"""End-to-end scaffold tests over the real templates.

Every combination here runs the full pipeline (template copy, customizers,
manifest, README, zip stream) and then checks the unpacked project the way
a developer opening it would: entry points exist, imports point at files
that were generated, and package.json is valid npm JSON.
"""

from __future__ import annotations

import asyncio
import json
import re
from pathlib import PurePosixPath

import pytest

from kitforge.scaffolder import build_selection


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_RELATIVE_IMPORT = re.compile(r'from "(\.{1,2}/[^"]+)"')
_EXTENSIONS = ("", ".js", ".jsx", ".ts", ".tsx", ".css")


def unresolved_imports(files: dict[str, bytes]) -> list[str]:
    """Relative imports in source files that match no file in the archive."""
    missing = []
    for name, content in files.items():
        if not name.startswith("src/") or not name.endswith((".js", ".jsx", ".ts", ".tsx")):
            continue
        base = PurePosixPath(name).parent
        for target in _RELATIVE_IMPORT.findall(content.decode()):
            parts: list[str] = []
            for part in (base / target).parts:
                if part == "..":
                    parts.pop()
                elif part != ".":
                    parts.append(part)
            resolved = "/".join(parts)
            if not any(resolved + ext in files for ext in _EXTENSIONS):
                missing.append(f"{name} -> {target}")
    return missing


FULL_STACKS = [
    {
        "lang": "js",
        "router": "default",
        "styling": "tailwindcss",
        "ui_library": "shadcn",
        "icon_library": "react-icon",
        "state_management": "redux",
        "server_state": "tanstack-query",
        "data_fetching": "axios",
        "form_management": "formik",
        "toast_library": "react-toastify",
    },
    {
        "lang": "ts",
        "router": "react-router",
        "styling": "styled-components",
        "ui_library": "none",
        "icon_library": "lucide",
        "state_management": "zustand",
        "server_state": "swr",
        "data_fetching": "fetch",
        "form_management": "react-hook-form",
        "toast_library": "sonner",
    },
    {
        "lang": "ts",
        "router": "default",
        "styling": "tailwindcss",
        "ui_library": "shadcn",
        "icon_library": "none",
        "state_management": "redux",
        "server_state": "tanstack-query",
        "data_fetching": "axios",
        "form_management": "none",
        "toast_library": "none",
    },
    {"lang": "js", "router": "none"},
    {"lang": "ts", "router": "none"},
]


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


@pytest.mark.integration
class TestScaffoldEndToEnd:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("axes", FULL_STACKS, ids=lambda a: "-".join(str(v) for v in a.values()))
    async def test_project_is_consistent(self, generator, unzip, work_dir, axes):
        selection = build_selection(axes)
        run = await generator.prepare(selection, "e2e-app")
        files = unzip(b"".join([chunk async for chunk in run.stream()]))

        ext = selection.lang.component_ext
        assert f"src/main.{ext}" in files
        assert f"src/App.{ext}" in files
        assert "index.html" in files
        assert ".gitignore" in files

        manifest = json.loads(files["package.json"])
        assert manifest["name"] == "e2e-app"
        assert manifest["dependencies"]["react"] == "^18.3.1"
        assert list(manifest["dependencies"]) == sorted(manifest["dependencies"])
        assert set(manifest["dependencies"].values()) <= {"^18.3.1", "latest"}

        assert unresolved_imports(files) == []
        assert list(work_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_customizations_section_lists_every_axis(self, generator, unzip):
        selection = build_selection(FULL_STACKS[0])
        run = await generator.prepare(selection, "e2e-app")
        files = unzip(b"".join([chunk async for chunk in run.stream()]))

        readme = files["README.md"].decode()
        customizations = readme.split("## Customizations", 1)[1]
        for label, value in selection.resolved().items():
            assert f"- {label}: {value}" in customizations

    @pytest.mark.asyncio
    async def test_concurrent_runs_same_name(self, generator, unzip, work_dir):
        async def one(axes):
            run = await generator.prepare(build_selection(axes), "same-name")
            return unzip(b"".join([chunk async for chunk in run.stream()]))

        a, b = await asyncio.gather(one(FULL_STACKS[0]), one(FULL_STACKS[1]))

        assert "src/App.jsx" in a and "src/App.tsx" not in a
        assert "src/App.tsx" in b and "src/App.jsx" not in b
        assert list(work_dir.iterdir()) == []
