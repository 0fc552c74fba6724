"""
Tick scheduler: runs a callback once the current event-loop step finishes.
"""
import asyncio
from typing import Callable, Optional


class TickScheduler:
    """
    Defers callbacks to the next event-loop iteration with ``call_soon``.

    Everything the running task does before it next yields to the loop
    happens before the callback, so all keys requested in one synchronous
    stretch are queued by the time the dispatcher runs.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def schedule(self, fn: Callable[[], None]) -> asyncio.Handle:
        """
        Schedule fn on the running (or configured) event loop.

        Raises:
            RuntimeError: If no loop is configured and none is running
        """
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_soon(fn)
