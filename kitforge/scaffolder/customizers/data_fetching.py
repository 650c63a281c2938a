"""Data-fetching axis: a preconfigured axios instance or a typed fetch wrapper."""

from __future__ import annotations

from ..selection import DataFetching
from .base import Customizer, CustomizerContext

AXIS = "data_fetching"


class DataFetchingCustomizer(Customizer):
    axis = "data_fetching"

    async def apply(self, ctx: CustomizerContext) -> None:
        value = self.value(ctx)
        if value is DataFetching.AXIOS:
            ctx.dependencies.add("axios")
            await ctx.emit(AXIS, "axios", ctx.tree.dir("api") / ctx.script("axios"))
        elif value is DataFetching.FETCH:
            # Native fetch, nothing to install.
            await ctx.emit(AXIS, "fetch", ctx.tree.dir("api") / ctx.script("fetch"))
