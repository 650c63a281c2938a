"""Styling axis: Tailwind CSS (with PostCSS) or styled-components."""

from __future__ import annotations

from ..selection import Styling
from .base import Customizer, CustomizerContext

AXIS = "styling"

TAILWIND_DEPENDENCIES = ("tailwindcss", "postcss", "autoprefixer")


async def apply_tailwind(ctx: CustomizerContext) -> None:
    """Add Tailwind CSS, its PostCSS config and the base stylesheet.

    Also used by the ``shadcn`` component library, which needs Tailwind
    whatever the styling axis says.
    """
    ctx.dependencies.add(*TAILWIND_DEPENDENCIES)

    tree = ctx.tree
    await ctx.emit(AXIS, "tailwind.config", tree.root / ctx.script("tailwind.config"))
    await ctx.emit(AXIS, "postcss.config", tree.root / "postcss.config.js")
    await ctx.emit(AXIS, "index.css", tree.src / "index.css")


class StylingCustomizer(Customizer):
    axis = "styling"

    async def apply(self, ctx: CustomizerContext) -> None:
        value = self.value(ctx)
        if value is Styling.TAILWIND:
            await apply_tailwind(ctx)
        elif value is Styling.STYLED_COMPONENTS:
            ctx.dependencies.add("styled-components")
