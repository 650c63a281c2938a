"""Router axis: React Router with a root layout, a 404 page and a home page."""

from __future__ import annotations

from ..selection import Router
from .base import Customizer, CustomizerContext

AXIS = "router"


class RouterCustomizer(Customizer):
    axis = "router"

    async def apply(self, ctx: CustomizerContext) -> None:
        if self.value(ctx) is Router.NONE:
            return

        ctx.dependencies.add("react-router-dom")

        tree = ctx.tree
        await ctx.emit(AXIS, "App", tree.src / ctx.component("App"))
        await ctx.emit(AXIS, "router", tree.dir("router") / ctx.component("router"))
        await ctx.emit(AXIS, "root", tree.dir("layout") / ctx.component("root"))
        await ctx.emit(AXIS, "not-found", tree.dir("components") / ctx.component("not-found"))
        await ctx.emit(AXIS, "home", tree.dir("components") / ctx.component("home"))
        await ctx.emit(AXIS, "home-page", tree.dir("pages") / ctx.component("home"))
