import asyncio
import logging
from typing import Any, Callable, Coroutine

logger = logging.getLogger(__name__)

class FetchCycleOwner:
    """Base for objects that own one snapshot refreshed by asynchronous fetches.

    Every dispatch bumps a generation number; a fetch may only publish its
    result while its generation is still current, so the newest request
    always wins regardless of the order responses arrive in. Closing bumps
    the generation too, which turns every in-flight response into a no-op.
    """

    def __init__(self):
        self._generation = 0
        self._task: asyncio.Task | None = None
        self._closed = False
        self._listeners: list[Callable[[Any], None]] = []

    @property
    def snapshot(self) -> Any:
        raise NotImplementedError

    def subscribe(self, callback: Callable[[Any], None]) -> Callable[[], None]:
        self._listeners.append(callback)
        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)
        return unsubscribe

    def _notify(self) -> None:
        snap = self.snapshot
        for cb in list(self._listeners):
            try:
                cb(snap)
            except Exception:
                logger.exception(f"{type(self).__name__} listener failed")

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"{type(self).__name__} is closed")

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        self._task = asyncio.get_running_loop().create_task(coro)
        return self._task

    async def settled(self) -> None:
        """Wait until no fetch is in flight, following any fetch started meanwhile."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    def close(self) -> None:
        self._closed = True
        self._generation += 1
        self._listeners.clear()
