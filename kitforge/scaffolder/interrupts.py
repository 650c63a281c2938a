"""Per-run interruption scopes.

Each generation run opens a :class:`RunScope` on an
:class:`InterruptRegistry` and closes it when the run ends.  An external
termination request (a signal in the CLI, application shutdown in the
server) calls :meth:`InterruptRegistry.interrupt_all`, which cancels the
task currently driving each open scope.  A run only ever tears down its
own working tree, and a finished run leaves nothing registered behind.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)


class RunScope:
    """Interruption registration for a single run."""

    def __init__(self, registry: "InterruptRegistry", name: str) -> None:
        self.registry = registry
        self.name = name
        self.interrupted = False
        self._task: asyncio.Task | None = None
        self._closed = False

    def bind(self) -> None:
        """Make the current task the one cancelled on interrupt.

        Called at the start of each phase, because preparing the tree and
        streaming the archive may run in different tasks.
        """
        self._task = asyncio.current_task()

    def interrupt(self) -> None:
        if self._closed or self.interrupted:
            return
        self.interrupted = True
        logger.warning("Interrupting run %s", self.name)
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def close(self) -> None:
        """Deregister the scope.  Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._task = None
        self.registry._discard(self)

    @property
    def closed(self) -> bool:
        return self._closed

    def __repr__(self) -> str:
        return f"RunScope({self.name!r}, interrupted={self.interrupted}, closed={self._closed})"


class InterruptRegistry:
    """The set of runs currently open in this process."""

    def __init__(self) -> None:
        self._scopes: set[RunScope] = set()

    def open_scope(self, name: str) -> RunScope:
        scope = RunScope(self, name)
        self._scopes.add(scope)
        scope.bind()
        return scope

    def _discard(self, scope: RunScope) -> None:
        self._scopes.discard(scope)

    @property
    def active(self) -> int:
        return len(self._scopes)

    def interrupt_all(self) -> int:
        """Interrupt every open scope and return how many were hit."""
        scopes = list(self._scopes)
        for scope in scopes:
            scope.interrupt()
        return len(scopes)

    def install_signal_handlers(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        signals: Iterable[signal.Signals] = (signal.SIGINT, signal.SIGTERM),
    ) -> Callable[[], None]:
        """Route *signals* to :meth:`interrupt_all` on *loop*.

        Returns a callable that removes the handlers again.  Only supported
        where the event loop implements ``add_signal_handler`` (Unix).
        """
        loop = loop or asyncio.get_running_loop()
        installed: list[signal.Signals] = []
        for sig in signals:
            loop.add_signal_handler(sig, self.interrupt_all)
            installed.append(sig)

        def remove() -> None:
            for sig in installed:
                loop.remove_signal_handler(sig)

        return remove
