"""Icon axis.  Dependency only, no files."""

from __future__ import annotations

from ..selection import IconLibrary
from .base import Customizer, CustomizerContext

ICON_PACKAGES: dict[IconLibrary, str] = {
    IconLibrary.REACT_ICONS: "react-icons",
    IconLibrary.LUCIDE: "lucide-react",
}


class IconsCustomizer(Customizer):
    axis = "icon_library"

    async def apply(self, ctx: CustomizerContext) -> None:
        package = ICON_PACKAGES.get(self.value(ctx))
        if package:
            ctx.dependencies.add(package)
