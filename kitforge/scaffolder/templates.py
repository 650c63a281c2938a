"""Jinja2 template rendering for customizer output.

Provides the TemplateRenderer class which loads snippet templates from the
``kitforge/scaffolder/templates/`` directory.  Snippets are grouped by axis
(``router/``, ``styling/``, ...).  Where JavaScript and TypeScript output
differ, a language-specific variant named ``<name>.<lang>.j2`` sits next to
the shared ``<name>.j2`` and is picked first.

Rendering is single pass: the output of one template is never fed back into
the engine.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound, select_autoescape

from .selection import Language

# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 snippet templates for the customizers.

    The renderer discovers ``.j2`` files under a configurable template
    directory.  Every render receives the output language plus whatever the
    customizer passes in its context.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"router/router.j2"``).
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_variant(
        self,
        axis: str,
        name: str,
        lang: Language,
        context: dict[str, Any] | None = None,
    ) -> str:
        """Render ``<axis>/<name>.<lang>.j2`` if it exists, else ``<axis>/<name>.j2``.

        The context always contains ``lang``, ``ext`` (``js``/``ts``) and
        ``jsx_ext`` (``jsx``/``tsx``).
        """
        ctx = {
            "lang": lang.value,
            "ext": lang.script_ext,
            "jsx_ext": lang.component_ext,
            **(context or {}),
        }
        variant = f"{axis}/{name}.{lang.value}.j2"
        try:
            return self.render(variant, ctx)
        except TemplateNotFound as exc:
            # A missing include inside the variant is a real error.
            if exc.name != variant:
                raise
        return self.render(f"{axis}/{name}.j2", ctx)
