"""State-management axis: Redux Toolkit or Zustand, each with a starter store."""

from __future__ import annotations

from ..selection import StateManagement
from .base import Customizer, CustomizerContext

AXIS = "state"


class StateCustomizer(Customizer):
    axis = "state_management"

    async def apply(self, ctx: CustomizerContext) -> None:
        value = self.value(ctx)
        if value is StateManagement.REDUX:
            ctx.dependencies.add("@reduxjs/toolkit", "react-redux")
            await ctx.emit(AXIS, "redux-store", ctx.tree.src / ctx.script("store"))
        elif value is StateManagement.ZUSTAND:
            ctx.dependencies.add("zustand")
            await ctx.emit(AXIS, "zustand-store", ctx.tree.src / ctx.script("store"))
