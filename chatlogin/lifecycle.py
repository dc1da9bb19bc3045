"""Task scope tied to the lifetime of a screen."""

import asyncio
import logging
from typing import Coroutine, Optional

__all__ = ["CancelStrategy"]

logger = logging.getLogger(__name__)


class CancelStrategy:
    """Runs a screen's background work and abandons it when the screen goes away.

    Every task started through :meth:`launch` is tracked until it finishes.
    :meth:`cancel` cancels whatever is still running. Cancellation does not
    roll anything back: a token that was already persisted stays persisted.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._tasks: set[asyncio.Task] = set()
        self._cancelled = False

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    @property
    def active_tasks(self) -> int:
        return len(self._tasks)

    def launch(self, coro: Coroutine) -> asyncio.Task:
        """Schedule ``coro`` in this scope.

        Raises:
            RuntimeError: If the scope was already cancelled
        """
        if self._cancelled:
            coro.close()
            raise RuntimeError("CancelStrategy already cancelled")

        loop = self._loop or asyncio.get_running_loop()
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def cancel(self) -> None:
        """Abandon all in-flight work; later launches are refused."""
        self._cancelled = True
        pending = [t for t in self._tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            logger.debug(f"Cancelled {len(pending)} pending task(s)")
