import asyncio
from typing import Awaitable, Callable, Optional, Set

from utils.logger import get_logger

_logger = get_logger(__name__)

DEBOUNCE_DELAY = 0.5  # seconds

Action = Callable[[], Awaitable[None]]


class Debouncer:
    """
    Trailing-edge timer: ``schedule`` runs ``action`` once ``delay`` seconds
    have passed without another ``schedule`` call. Scheduling again cancels
    the action still waiting on its timer; an action that already started is
    left alone.
    """

    def __init__(self, delay: float = DEBOUNCE_DELAY):
        self.delay = delay
        self._timer: Optional[asyncio.Task] = None
        self._fired: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def schedule(self, action: Action, delay: Optional[float] = None) -> None:
        self.cancel()
        delay = self.delay if delay is None else delay
        loop = asyncio.get_running_loop()
        self._timer = loop.create_task(self._wait_then_fire(action, delay))

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def _wait_then_fire(self, action: Action, delay: float) -> None:
        await asyncio.sleep(delay)
        task = self._timer
        self._timer = None
        _logger.debug(f"Debounce timer fired after {delay}s")
        if task is not None:
            self._fired.add(task)
        try:
            await action()
        finally:
            if task is not None:
                self._fired.discard(task)

    async def drain(self) -> None:
        """Wait for the pending timer and any action it started to finish."""
        while self._timer is not None or self._fired:
            tasks = [t for t in (self._timer, *self._fired) if t is not None]
            await asyncio.gather(*tasks, return_exceptions=True)
