"""Incremental zip streaming of a finished working tree.

The archive is produced one chunk at a time in a worker thread and handed
to the consumer as soon as it exists.  Nothing is produced until the
consumer asks for the next piece, so a slow reader suspends compression
instead of the whole archive piling up in memory.
"""

from __future__ import annotations

import logging
import zipfile
import zlib
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from pathlib import Path

from kitforge.errors import ArchiveFailure
from kitforge.utils import run_blocking

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
MAX_COMPRESSION = 9


class _ChunkSink:
    """Write-only file object collecting zipfile output until drained.

    It has no ``tell``/``seek``, so :mod:`zipfile` writes in streaming mode
    (data descriptors after each member).
    """

    def __init__(self) -> None:
        self._chunks: list[bytes] = []
        self.total = 0

    def write(self, data: bytes) -> int:
        self._chunks.append(bytes(data))
        self.total += len(data)
        return len(data)

    def flush(self) -> None:
        pass

    def drain(self) -> bytes:
        data = b"".join(self._chunks)
        self._chunks.clear()
        return data


class _ZipProducer:
    """Synchronous zip writer advanced in small steps.

    Steps run in a worker thread one at a time; the caller never starts a
    step before the previous one has returned.
    """

    def __init__(self, compresslevel: int, chunk_size: int) -> None:
        self.sink = _ChunkSink()
        self.chunk_size = chunk_size
        self._zip = zipfile.ZipFile(
            self.sink, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=compresslevel
        )
        self._entry: Iterator[bool] | None = None
        self._closed = False

    def add_dir(self, arcname: str) -> None:
        self._zip.mkdir(arcname)

    def begin_file(self, path: Path, arcname: str) -> None:
        self._entry = _write_member(self._zip, path, arcname, self.chunk_size)

    def step(self) -> bool:
        """Compress the next chunk of the current file.

        Returns ``False`` once the file is complete.
        """
        if self._entry is None:
            return False
        if next(self._entry, False):
            return True
        self._entry = None
        return False

    def finish(self) -> None:
        """Write the central directory."""
        self._closed = True
        self._zip.close()

    def abort(self) -> None:
        """Release the open member and the zip file after an early exit."""
        try:
            if self._entry is not None:
                self._entry.close()
                self._entry = None
            if not self._closed:
                self._closed = True
                self._zip.close()
        except (OSError, ValueError, zlib.error):
            logger.debug("Error while discarding partial archive", exc_info=True)


def _write_member(
    zf: zipfile.ZipFile, path: Path, arcname: str, chunk_size: int
) -> Iterator[bool]:
    with path.open("rb") as src, zf.open(arcname, "w") as dest:
        while chunk := src.read(chunk_size):
            dest.write(chunk)
            yield True


def _collect_entries(root: Path) -> list[tuple[Path, str]]:
    """Every directory and file under *root* as ``(path, archive name)``, sorted."""
    if not root.is_dir():
        raise FileNotFoundError(f"Not a directory: {root}")
    entries = []
    for path in sorted(root.rglob("*")):
        arcname = path.relative_to(root).as_posix()
        if path.is_dir():
            entries.append((path, arcname + "/"))
        elif path.is_file():
            entries.append((path, arcname))
    return entries


async def stream_directory(
    directory: str | Path,
    *,
    compresslevel: int = MAX_COMPRESSION,
    chunk_size: int = CHUNK_SIZE,
    on_complete: Callable[[], Awaitable[None]] | None = None,
) -> AsyncIterator[bytes]:
    """Yield a deflate-compressed zip of *directory*, chunk by chunk.

    Member names are relative to *directory*.  ``on_complete`` is awaited on
    every terminal outcome: the last chunk, an error, or the consumer
    closing the iterator early.

    Raises:
        ArchiveFailure: If reading the tree or compressing fails.
    """
    root = Path(directory)
    producer: _ZipProducer | None = None
    finished = False
    try:
        try:
            entries = await run_blocking(_collect_entries, root)
            producer = _ZipProducer(compresslevel, chunk_size)
            for path, arcname in entries:
                if arcname.endswith("/"):
                    producer.add_dir(arcname)
                    continue
                producer.begin_file(path, arcname)
                while await run_blocking(producer.step):
                    data = producer.sink.drain()
                    if data:
                        yield data
                data = producer.sink.drain()
                if data:
                    yield data
            await run_blocking(producer.finish)
            finished = True
            data = producer.sink.drain()
            if data:
                yield data
            logger.debug("Archived %s (%d bytes)", root.name, producer.sink.total)
        except (OSError, zipfile.BadZipFile, zlib.error) as exc:
            raise ArchiveFailure(f"Could not archive {root.name}: {exc}") from exc
    finally:
        if producer is not None and not finished:
            await run_blocking(producer.abort)
        if on_complete is not None:
            await on_complete()
