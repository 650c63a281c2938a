"""kitforge scaffolder -- turns a technology selection into a React project.

The generator copies a Vite base template into a per-run working tree,
applies one customizer per axis, writes ``package.json`` and the README
sections, and streams the result as a zip archive.

Quick usage::

    from kitforge.scaffolder import ScaffoldGenerator, build_selection

    selection = build_selection({"lang": "ts", "styling": "tailwindcss"})
    generator = ScaffoldGenerator(config)
    run = await generator.prepare(selection, "my-app")
    async for chunk in run.stream():
        ...
"""

from kitforge.scaffolder.generator import ScaffoldGenerator, ScaffoldRun
from kitforge.scaffolder.interrupts import InterruptRegistry, RunScope
from kitforge.scaffolder.manifest import DependencyList, ManifestDocument, build_manifest
from kitforge.scaffolder.selection import (
    AXIS_LABELS,
    GenerateRequest,
    Selection,
    axis_options,
    build_selection,
    validate_project_name,
)
from kitforge.scaffolder.templates import TemplateRenderer

__all__ = [
    "AXIS_LABELS",
    "DependencyList",
    "GenerateRequest",
    "InterruptRegistry",
    "ManifestDocument",
    "RunScope",
    "ScaffoldGenerator",
    "ScaffoldRun",
    "Selection",
    "TemplateRenderer",
    "axis_options",
    "build_manifest",
    "build_selection",
    "validate_project_name",
]
