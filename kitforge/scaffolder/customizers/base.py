"""Shared pieces of the customizer contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar

from ..manifest import DependencyList
from ..selection import Language, Selection
from ..templates import TemplateRenderer
from ..workspace import WorkingTree


@dataclass
class CustomizerContext:
    """Everything a customizer may touch during one run.

    ``dependencies`` is the accumulator shared by every customizer in the
    chain; it is passed explicitly rather than held in module state.
    """

    selection: Selection
    dependencies: DependencyList
    tree: WorkingTree
    renderer: TemplateRenderer

    @property
    def lang(self) -> Language:
        return self.selection.lang

    def script(self, stem: str) -> str:
        """``stem.js`` or ``stem.ts`` for the run's language."""
        return f"{stem}.{self.lang.script_ext}"

    def component(self, stem: str) -> str:
        """``stem.jsx`` or ``stem.tsx`` for the run's language."""
        return f"{stem}.{self.lang.component_ext}"

    async def emit(
        self,
        axis: str,
        template: str,
        destination: str | Path,
        **context: Any,
    ) -> Path:
        """Render ``<axis>/<template>`` for the run's language into the tree."""
        content = self.renderer.render_variant(axis, template, self.lang, context)
        return await self.tree.write(destination, content)


class Customizer(ABC):
    """One technology axis.

    Subclasses name the :class:`Selection` field they own in ``axis`` and
    implement :meth:`apply`.  ``apply`` must accept every legal value of the
    axis, doing nothing for ``none``, and must only append to the dependency
    list and write inside the working tree.
    """

    axis: ClassVar[str]

    def value(self, ctx: CustomizerContext) -> Enum:
        return getattr(ctx.selection, self.axis)

    @abstractmethod
    async def apply(self, ctx: CustomizerContext) -> None:
        """Mutate the tree and/or dependency list for the selected value."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(axis={self.axis!r})"
