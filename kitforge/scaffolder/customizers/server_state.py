"""Server-state axis: TanStack Query or SWR.

Both write a provider component and rewrite ``src/main`` so the app is
wrapped in it.
"""

from __future__ import annotations

from ..selection import ServerState
from .base import Customizer, CustomizerContext

AXIS = "server_state"

# value -> (dependencies, provider template / file stem, provider component name)
_PROVIDERS: dict[ServerState, tuple[tuple[str, ...], str, str]] = {
    ServerState.TANSTACK_QUERY: (
        ("@tanstack/react-query", "@tanstack/react-query-devtools"),
        "tanstack-query",
        "QueryProvider",
    ),
    ServerState.SWR: (
        ("swr",),
        "swr-provider",
        "SwrProvider",
    ),
}


class ServerStateCustomizer(Customizer):
    axis = "server_state"

    async def apply(self, ctx: CustomizerContext) -> None:
        provider = _PROVIDERS.get(self.value(ctx))
        if provider is None:
            return

        dependencies, stem, component = provider
        ctx.dependencies.add(*dependencies)

        tree = ctx.tree
        await ctx.emit(AXIS, stem, tree.dir("providers") / ctx.component(stem))
        await ctx.emit(
            AXIS,
            "main",
            tree.src / ctx.component("main"),
            provider_name=component,
            provider_module=f"./providers/{stem}",
        )
