"""The on-disk working tree assembled for a single generation run."""

from __future__ import annotations

import asyncio
import logging
import shutil
import uuid
from pathlib import Path

from kitforge.errors import TemplateMissing, WriteFailure
from kitforge.utils import remove_tree, run_blocking, sanitize_name

logger = logging.getLogger(__name__)

# Handle name -> path relative to the tree root.  Created unconditionally so
# customizers never have to check for a directory before writing into it.
SKELETON_DIRS: dict[str, str] = {
    "pages": "src/pages",
    "components": "src/components",
    "layout": "src/layout",
    "router": "src/router",
    "context": "src/context",
    "api": "src/api",
    "lib": "src/lib",
    "providers": "src/providers",
}

# Template files stored under a neutral name so packaging keeps them.
_RENAMED_ON_COPY: dict[str, str] = {
    "_gitignore": ".gitignore",
}


class WorkingTree:
    """A project directory owned by exactly one run.

    All writes go through :meth:`write`, which refuses paths that resolve
    outside the tree.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    # -- Construction ------------------------------------------------------

    @classmethod
    async def materialize(
        cls, template: Path, parent: Path, project_name: str
    ) -> "WorkingTree":
        """Copy *template* into a fresh, uniquely named directory under *parent*.

        The directory name is the sanitised project name plus a random
        suffix, so concurrent runs for the same project never share a path.

        Raises:
            TemplateMissing: If *template* is not a directory.
            WriteFailure: If the copy fails.
        """
        if not template.is_dir():
            raise TemplateMissing(f"No base template at {template}")

        root = Path(parent) / f"{sanitize_name(project_name)}-{uuid.uuid4().hex[:12]}"
        tree = cls(root)
        try:
            await run_blocking(_copy_template, template, root)
        except OSError as exc:
            await tree.remove()
            raise WriteFailure(f"Could not copy template {template.name}: {exc}") from exc
        except asyncio.CancelledError:
            await tree.remove()
            raise
        logger.debug("Materialized %s into %s", template.name, root)
        return tree

    async def create_skeleton(self) -> None:
        """Create every directory in :data:`SKELETON_DIRS`."""
        try:
            await run_blocking(self._mkdirs)
        except OSError as exc:
            raise WriteFailure(f"Could not create project skeleton: {exc}") from exc

    def _mkdirs(self) -> None:
        for rel in SKELETON_DIRS.values():
            (self.root / rel).mkdir(parents=True, exist_ok=True)

    # -- Directory handles -------------------------------------------------

    def dir(self, handle: str) -> Path:
        """Return the absolute path of a skeleton directory by handle name."""
        return self.root / SKELETON_DIRS[handle]

    @property
    def src(self) -> Path:
        return self.root / "src"

    # -- Writes ------------------------------------------------------------

    def resolve(self, relative: str | Path) -> Path:
        """Resolve *relative* against the root, refusing escapes."""
        root = self.root.resolve()
        target = (root / relative).resolve()
        if target != root and root not in target.parents:
            raise WriteFailure(f"Refusing to write outside the working tree: {relative}")
        return target

    async def write(self, relative: str | Path, content: str) -> Path:
        """Write (or overwrite) a text file inside the tree."""
        target = self.resolve(relative)
        try:
            await run_blocking(_write_file, target, content)
        except OSError as exc:
            raise WriteFailure(f"Could not write {relative}: {exc}") from exc
        return target

    async def append(self, relative: str | Path, content: str) -> Path:
        """Append text to a file inside the tree, creating it if needed."""
        target = self.resolve(relative)
        try:
            await run_blocking(_append_file, target, content)
        except OSError as exc:
            raise WriteFailure(f"Could not append to {relative}: {exc}") from exc
        return target

    # -- Teardown ----------------------------------------------------------

    @property
    def exists(self) -> bool:
        return self.root.exists()

    async def remove(self) -> None:
        """Delete the whole tree.  Safe to call more than once."""
        removed = await run_blocking(remove_tree, self.root)
        if removed:
            logger.debug("Removed working tree %s", self.root)

    def __repr__(self) -> str:
        return f"WorkingTree({str(self.root)!r})"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _copy_template(template: Path, root: Path) -> None:
    shutil.copytree(template, root, ignore=shutil.ignore_patterns("__pycache__"))
    for stored, actual in _RENAMED_ON_COPY.items():
        for path in root.rglob(stored):
            path.rename(path.with_name(actual))


def _write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _append_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as fh:
        fh.write(content)
