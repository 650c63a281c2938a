"""Component-library axis: shadcn/ui.

shadcn re-applies the Tailwind setup and then overwrites
``tailwind.config.*`` and ``src/index.css`` with its themed versions.  The
customizer runs after styling, so its files are the ones that end up in the
archive when both are selected.
"""

from __future__ import annotations

from ..selection import Language, UILibrary
from .base import Customizer, CustomizerContext
from .styling import apply_tailwind

AXIS = "ui_library"

SHADCN_DEPENDENCIES = (
    "tailwindcss-animate",
    "class-variance-authority",
    "clsx",
    "tailwind-merge",
    "lucide-react",
)


class UILibraryCustomizer(Customizer):
    axis = "ui_library"

    async def apply(self, ctx: CustomizerContext) -> None:
        if self.value(ctx) is not UILibrary.SHADCN:
            return

        await apply_tailwind(ctx)
        ctx.dependencies.add(*SHADCN_DEPENDENCIES)

        tree = ctx.tree
        tailwind_config = ctx.script("tailwind.config")
        compiler_config = "tsconfig.json" if ctx.lang is Language.TS else "jsconfig.json"

        await ctx.emit(AXIS, "utils", tree.dir("lib") / ctx.script("utils"))
        await ctx.emit(AXIS, "index.css", tree.src / "index.css")
        await ctx.emit(AXIS, "tailwind.config", tree.root / tailwind_config)
        await ctx.emit(AXIS, "compiler-config", tree.root / compiler_config)
        await ctx.emit(AXIS, "vite.config", tree.root / ctx.script("vite.config"))
        await ctx.emit(
            AXIS,
            "components.json",
            tree.root / "components.json",
            tsx="true" if ctx.lang is Language.TS else "false",
            tailwind_config=tailwind_config,
        )
