"""Form-management axis.  Dependency only, no files."""

from __future__ import annotations

from ..selection import FormManagement
from .base import Customizer, CustomizerContext

FORM_PACKAGES: dict[FormManagement, str] = {
    FormManagement.REACT_HOOK_FORM: "react-hook-form",
    FormManagement.FORMIK: "formik",
}


class FormsCustomizer(Customizer):
    axis = "form_management"

    async def apply(self, ctx: CustomizerContext) -> None:
        package = FORM_PACKAGES.get(self.value(ctx))
        if package:
            ctx.dependencies.add(package)
