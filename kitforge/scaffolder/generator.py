"""Scaffold generator: selection in, zip stream out.

A run goes through the same steps every time:

1. Copy the base template for the selected language into a fresh working
   tree under ``config.work_dir``.
2. Create the fixed directory skeleton.
3. Run every customizer in order against a shared dependency list.
4. Write ``package.json`` from the collected dependency names.
5. Append the Dependencies / Getting Started / Customizations sections to
   ``README.md``.
6. Stream the tree as a zip archive.

Steps 1-5 happen in :meth:`ScaffoldGenerator.prepare`, so every error they
can raise surfaces before the first archive byte is sent.  Step 6 is
:meth:`ScaffoldRun.stream`.  The working tree is removed on every outcome.

Usage::

    generator = ScaffoldGenerator(Config.from_env())
    run = await generator.prepare(selection, "my-app")
    async for chunk in run.stream():
        sink.write(chunk)
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Sequence
from contextlib import aclosing

from jinja2 import TemplateNotFound

from kitforge.config import Config
from kitforge.errors import Interrupted, TemplateMissing, WriteFailure
from kitforge.utils import format_duration, run_blocking

from .archiver import MAX_COMPRESSION, stream_directory
from .customizers import Customizer, CustomizerContext, default_customizers
from .docs import render_readme_sections
from .interrupts import InterruptRegistry, RunScope
from .manifest import DependencyList, ManifestDocument, build_manifest
from .selection import Language, Selection
from .templates import TemplateRenderer
from .workspace import WorkingTree

logger = logging.getLogger(__name__)

# Output language -> base template directory name under config.template_dir.
TEMPLATES: dict[Language, str] = {
    Language.JS: "basic",
    Language.TS: "basic-ts",
}


def _uncancel() -> None:
    """Withdraw the cancellation an interrupt delivered to the current task."""
    task = asyncio.current_task()
    if task is not None:
        task.uncancel()


async def _discard(tree: WorkingTree | None, scope: RunScope) -> None:
    try:
        if tree is not None:
            await tree.remove()
    except OSError:
        logger.exception("Could not remove working tree %s", tree.root)
    finally:
        scope.close()


# ---------------------------------------------------------------------------
# ScaffoldRun
# ---------------------------------------------------------------------------


class ScaffoldRun:
    """A fully assembled working tree waiting to be streamed.

    Attributes:
        tree: The run's working tree.
        manifest: The ``package.json`` written into the tree.
        selection: The selection the tree was built from.
        project_name: Name used in the manifest and the archive file name.
    """

    def __init__(
        self,
        tree: WorkingTree,
        manifest: ManifestDocument,
        selection: Selection,
        project_name: str,
        scope: RunScope,
        compresslevel: int = MAX_COMPRESSION,
    ) -> None:
        self.tree = tree
        self.manifest = manifest
        self.selection = selection
        self.project_name = project_name
        self.scope = scope
        self.compresslevel = compresslevel
        self.bytes_sent = 0
        self._started = time.monotonic()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def stream(self) -> AsyncIterator[bytes]:
        """Yield the zip archive of the tree chunk by chunk.

        The tree is removed when the stream ends, fails, or is closed early
        by the consumer.

        Raises:
            ArchiveFailure: If compression fails part way.
            Interrupted: If the run was interrupted before or during streaming.
        """
        self.scope.bind()
        try:
            if self.scope.interrupted:
                raise Interrupted(f"Run {self.project_name} was interrupted")
            archive = stream_directory(
                self.tree.root,
                compresslevel=self.compresslevel,
                on_complete=self.aclose,
            )
            async with aclosing(archive) as chunks:
                async for chunk in chunks:
                    self.bytes_sent += len(chunk)
                    yield chunk
        except asyncio.CancelledError:
            if not self.scope.interrupted:
                raise
            _uncancel()
            raise Interrupted(f"Run {self.project_name} was interrupted while streaming") from None
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        """Remove the working tree and deregister the run.  Idempotent."""
        if self._closed:
            return
        self._closed = True
        await _discard(self.tree, self.scope)
        logger.info(
            "Finished %s: %d bytes in %s",
            self.project_name,
            self.bytes_sent,
            format_duration(time.monotonic() - self._started),
        )

    def __repr__(self) -> str:
        return f"ScaffoldRun({self.project_name!r}, tree={self.tree!r})"


# ---------------------------------------------------------------------------
# ScaffoldGenerator
# ---------------------------------------------------------------------------


class ScaffoldGenerator:
    """Builds project trees and hands them out as :class:`ScaffoldRun`.

    One generator serves any number of concurrent runs; each run gets its
    own working tree, dependency list and interrupt scope.
    """

    def __init__(
        self,
        config: Config,
        renderer: TemplateRenderer | None = None,
        customizers: Sequence[Customizer] | None = None,
        interrupts: InterruptRegistry | None = None,
    ) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()
        self.customizers = list(customizers) if customizers is not None else default_customizers()
        self.interrupts = interrupts or InterruptRegistry()

    async def prepare(self, selection: Selection, project_name: str) -> ScaffoldRun:
        """Assemble the working tree for *selection* (steps 1-5).

        Raises:
            TemplateMissing: If no base template exists for the language, or
                a customizer snippet is missing.
            WriteFailure: If any filesystem step fails.
            Interrupted: If the run is interrupted while assembling.
        """
        template = self.config.template_path(TEMPLATES[selection.lang])
        try:
            await run_blocking(self.config.ensure_directories)
        except OSError as exc:
            raise WriteFailure(f"Could not create work directory {self.config.work_dir}: {exc}") from exc

        logger.info("Generating %s (%s)", project_name, selection.lang.value)
        scope = self.interrupts.open_scope(project_name)
        tree: WorkingTree | None = None
        try:
            tree = await WorkingTree.materialize(template, self.config.work_dir, project_name)
            await tree.create_skeleton()
            manifest = await self._customize(tree, selection, project_name)
        except asyncio.CancelledError:
            await _discard(tree, scope)
            if not scope.interrupted:
                raise
            _uncancel()
            raise Interrupted(f"Run {project_name} was interrupted") from None
        except TemplateNotFound as exc:
            await _discard(tree, scope)
            raise TemplateMissing(f"Missing snippet template {exc.name}") from exc
        except OSError as exc:
            await _discard(tree, scope)
            raise WriteFailure(f"Could not assemble {project_name}: {exc}") from exc
        except Exception:
            await _discard(tree, scope)
            raise

        return ScaffoldRun(tree, manifest, selection, project_name, scope)

    async def _customize(
        self, tree: WorkingTree, selection: Selection, project_name: str
    ) -> ManifestDocument:
        dependencies = DependencyList()
        ctx = CustomizerContext(
            selection=selection,
            dependencies=dependencies,
            tree=tree,
            renderer=self.renderer,
        )
        for customizer in self.customizers:
            logger.debug("Applying %r", customizer)
            await customizer.apply(ctx)

        manifest = build_manifest(dependencies, project_name, selection.lang)
        await tree.write("package.json", manifest.to_json())
        await tree.append("README.md", render_readme_sections(selection))
        return manifest

    async def generate(self, selection: Selection, project_name: str) -> AsyncIterator[bytes]:
        """Prepare and stream in one go."""
        run = await self.prepare(selection, project_name)
        async with aclosing(run.stream()) as chunks:
            async for chunk in chunks:
                yield chunk
