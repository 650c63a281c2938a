"""Tests for the per-axis customizers.

Each customizer runs against a real working tree copied from the bundled
base template.  Covers:
- ``none`` is a no-op on every axis
- Files written per language
- Dependencies added per value
- shadcn overriding the Tailwind setup
- Default execution order
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from kitforge.config import DEFAULT_TEMPLATE_DIR
from kitforge.scaffolder.customizers import (
    DataFetchingCustomizer,
    FormsCustomizer,
    IconsCustomizer,
    RouterCustomizer,
    ServerStateCustomizer,
    StateCustomizer,
    StylingCustomizer,
    UILibraryCustomizer,
    default_customizers,
)
from kitforge.scaffolder.customizers.base import CustomizerContext
from kitforge.scaffolder.manifest import DependencyList
from kitforge.scaffolder.selection import build_selection
from kitforge.scaffolder.templates import TemplateRenderer
from kitforge.scaffolder.workspace import WorkingTree


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def make_ctx(tmp_path: Path):
    """Factory building a context over a fresh tree for the given axis values."""
    renderer = TemplateRenderer()

    async def factory(**axes: Any) -> CustomizerContext:
        selection = build_selection(axes)
        template = "basic-ts" if selection.lang.value == "ts" else "basic"
        tree = await WorkingTree.materialize(DEFAULT_TEMPLATE_DIR / template, tmp_path, "demo")
        await tree.create_skeleton()
        return CustomizerContext(
            selection=selection,
            dependencies=DependencyList(),
            tree=tree,
            renderer=renderer,
        )

    return factory


def snapshot(root: Path) -> dict[str, str]:
    return {
        p.relative_to(root).as_posix(): p.read_text(encoding="utf-8")
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


# ---------------------------------------------------------------------------
# none is a no-op
# ---------------------------------------------------------------------------


class TestNoneValues:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "customizer",
        [
            RouterCustomizer(),
            StylingCustomizer(),
            UILibraryCustomizer(),
            StateCustomizer(),
            IconsCustomizer(),
            ServerStateCustomizer(),
            DataFetchingCustomizer(),
            FormsCustomizer(),
        ],
        ids=lambda c: type(c).__name__,
    )
    async def test_none_changes_nothing(self, make_ctx, customizer):
        ctx = await make_ctx(router="none")
        before = snapshot(ctx.tree.root)

        await customizer.apply(ctx)

        assert snapshot(ctx.tree.root) == before
        assert len(ctx.dependencies) == 0


# ---------------------------------------------------------------------------
# Router
# ---------------------------------------------------------------------------


class TestRouterCustomizer:
    @pytest.mark.asyncio
    async def test_javascript_files(self, make_ctx):
        ctx = await make_ctx(lang="js", router="default")
        await RouterCustomizer().apply(ctx)

        root = ctx.tree.root
        for rel in (
            "src/App.jsx",
            "src/router/router.jsx",
            "src/layout/root.jsx",
            "src/components/not-found.jsx",
            "src/components/home.jsx",
            "src/pages/home.jsx",
        ):
            assert (root / rel).is_file(), rel
        assert "react-router-dom" in ctx.dependencies
        assert "RouterProvider" in (root / "src/App.jsx").read_text()

    @pytest.mark.asyncio
    async def test_typescript_files(self, make_ctx):
        ctx = await make_ctx(lang="ts", router="react-router")
        await RouterCustomizer().apply(ctx)

        root = ctx.tree.root
        assert (root / "src/router/router.tsx").is_file()
        assert "FC" in (root / "src/App.tsx").read_text()
        assert not (root / "src/App.jsx").exists()

    @pytest.mark.asyncio
    async def test_router_imports_resolve(self, make_ctx):
        ctx = await make_ctx(lang="js")
        await RouterCustomizer().apply(ctx)

        router = (ctx.tree.root / "src/router/router.jsx").read_text()
        assert 'from "../layout/root"' in router
        assert 'from "../pages/home"' in router


# ---------------------------------------------------------------------------
# Styling and UI library
# ---------------------------------------------------------------------------


class TestStylingCustomizer:
    @pytest.mark.asyncio
    async def test_tailwind(self, make_ctx):
        ctx = await make_ctx(lang="ts", styling="tailwindcss")
        await StylingCustomizer().apply(ctx)

        root = ctx.tree.root
        assert (root / "tailwind.config.ts").is_file()
        assert (root / "postcss.config.js").is_file()
        assert "@tailwind base;" in (root / "src/index.css").read_text()
        assert list(ctx.dependencies) == ["tailwindcss", "postcss", "autoprefixer"]

    @pytest.mark.asyncio
    async def test_styled_components_is_dependency_only(self, make_ctx):
        ctx = await make_ctx(styling="styled-components")
        before = snapshot(ctx.tree.root)
        await StylingCustomizer().apply(ctx)

        assert list(ctx.dependencies) == ["styled-components"]
        assert snapshot(ctx.tree.root) == before


class TestUILibraryCustomizer:
    @pytest.mark.asyncio
    async def test_shadcn_javascript(self, make_ctx):
        ctx = await make_ctx(lang="js", ui_library="shadcn")
        await UILibraryCustomizer().apply(ctx)

        root = ctx.tree.root
        assert (root / "jsconfig.json").is_file()
        assert (root / "src/lib/utils.js").is_file()
        assert (root / "tailwind.config.js").is_file()
        assert '"tsx": false' in (root / "components.json").read_text()
        assert "tailwindcss-animate" in ctx.dependencies
        assert "tailwindcss" in ctx.dependencies

    @pytest.mark.asyncio
    async def test_shadcn_typescript(self, make_ctx):
        ctx = await make_ctx(lang="ts", ui_library="shadcn")
        await UILibraryCustomizer().apply(ctx)

        root = ctx.tree.root
        assert (root / "src/lib/utils.ts").is_file()
        components = (root / "components.json").read_text()
        assert '"tsx": true' in components
        assert '"config": "tailwind.config.ts"' in components
        assert '"@/*"' in (root / "tsconfig.json").read_text()

    @pytest.mark.asyncio
    async def test_shadcn_overrides_tailwind(self, make_ctx):
        ctx = await make_ctx(lang="ts", styling="tailwindcss", ui_library="shadcn")
        await StylingCustomizer().apply(ctx)
        plain = (ctx.tree.root / "tailwind.config.ts").read_text()
        await UILibraryCustomizer().apply(ctx)
        final = (ctx.tree.root / "tailwind.config.ts").read_text()

        assert final != plain
        assert final == ctx.renderer.render_variant("ui_library", "tailwind.config", ctx.lang)
        assert list(ctx.dependencies).count("tailwindcss") == 1


# ---------------------------------------------------------------------------
# State, server state, data fetching
# ---------------------------------------------------------------------------


class TestStateCustomizer:
    @pytest.mark.asyncio
    async def test_redux(self, make_ctx):
        ctx = await make_ctx(lang="js", state_management="redux")
        await StateCustomizer().apply(ctx)
        assert "configureStore" in (ctx.tree.root / "src/store.js").read_text()
        assert list(ctx.dependencies) == ["@reduxjs/toolkit", "react-redux"]

    @pytest.mark.asyncio
    async def test_zustand_typescript(self, make_ctx):
        ctx = await make_ctx(lang="ts", state_management="zustand")
        await StateCustomizer().apply(ctx)
        assert "interface AppState" in (ctx.tree.root / "src/store.ts").read_text()
        assert list(ctx.dependencies) == ["zustand"]


class TestServerStateCustomizer:
    @pytest.mark.asyncio
    async def test_tanstack_query(self, make_ctx):
        ctx = await make_ctx(lang="js", server_state="tanstack-query")
        await ServerStateCustomizer().apply(ctx)

        root = ctx.tree.root
        assert (root / "src/providers/tanstack-query.jsx").is_file()
        main = (root / "src/main.jsx").read_text()
        assert 'import QueryProvider from "./providers/tanstack-query";' in main
        assert "@tanstack/react-query" in ctx.dependencies
        assert "@tanstack/react-query-devtools" in ctx.dependencies

    @pytest.mark.asyncio
    async def test_swr(self, make_ctx):
        ctx = await make_ctx(lang="ts", server_state="swr")
        await ServerStateCustomizer().apply(ctx)

        root = ctx.tree.root
        assert (root / "src/providers/swr-provider.tsx").is_file()
        assert "<SwrProvider>" in (root / "src/main.tsx").read_text()
        assert list(ctx.dependencies) == ["swr"]


class TestDataFetchingCustomizer:
    @pytest.mark.asyncio
    async def test_axios(self, make_ctx):
        ctx = await make_ctx(lang="ts", data_fetching="axios")
        await DataFetchingCustomizer().apply(ctx)
        assert (ctx.tree.root / "src/api/axios.ts").is_file()
        assert list(ctx.dependencies) == ["axios"]

    @pytest.mark.asyncio
    async def test_fetch_adds_no_dependency(self, make_ctx):
        ctx = await make_ctx(lang="js", data_fetching="fetch")
        await DataFetchingCustomizer().apply(ctx)
        assert (ctx.tree.root / "src/api/fetch.js").is_file()
        assert len(ctx.dependencies) == 0


# ---------------------------------------------------------------------------
# Dependency-only axes
# ---------------------------------------------------------------------------


class TestDependencyOnlyAxes:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("axes", "customizer", "package"),
        [
            ({"icon_library": "react-icon"}, IconsCustomizer(), "react-icons"),
            ({"icon_library": "lucide"}, IconsCustomizer(), "lucide-react"),
            ({"form_management": "formik"}, FormsCustomizer(), "formik"),
            ({"form_management": "react-hook-form"}, FormsCustomizer(), "react-hook-form"),
        ],
    )
    async def test_adds_package(self, make_ctx, axes, customizer, package):
        ctx = await make_ctx(**axes)
        before = snapshot(ctx.tree.root)
        await customizer.apply(ctx)
        assert list(ctx.dependencies) == [package]
        assert snapshot(ctx.tree.root) == before


# ---------------------------------------------------------------------------
# Order
# ---------------------------------------------------------------------------


class TestDefaultOrder:
    def test_order(self):
        axes = [c.axis for c in default_customizers()]
        assert axes == [
            "router",
            "styling",
            "ui_library",
            "state_management",
            "icon_library",
            "server_state",
            "data_fetching",
            "form_management",
        ]

    def test_toast_has_no_customizer(self):
        assert "toast_library" not in {c.axis for c in default_customizers()}
