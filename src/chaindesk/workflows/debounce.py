# src/chaindesk/workflows/debounce.py
import asyncio
from typing import Awaitable, Callable, Dict, Hashable, List, Optional, Set

from ..utils.logger import get_logger

logger = get_logger(__name__)

class DebounceRegistry:
    """One cancellable delayed task per key; rescheduling a key replaces its task"""

    def __init__(
        self,
        delay: float,
        on_error: Optional[Callable[[Hashable, Exception], None]] = None
    ):
        self.delay = delay
        self.on_error = on_error
        self._timers: Dict[Hashable, asyncio.Task] = {}
        self._running: Set[asyncio.Task] = set()

    def schedule(self, key: Hashable, callback: Callable[[], Awaitable]) -> asyncio.Task:
        """Run callback after the quiet period unless the key is rescheduled"""
        self.cancel(key)
        task = asyncio.get_running_loop().create_task(self._run(key, callback))
        self._timers[key] = task
        return task

    async def _run(self, key: Hashable, callback: Callable[[], Awaitable]):
        await asyncio.sleep(self.delay)

        # Past the quiet period: no longer cancellable by a new edit
        task = asyncio.current_task()
        if self._timers.get(key) is task:
            del self._timers[key]
        self._running.add(task)
        try:
            await callback()
        except Exception as e:
            logger.error(f"Debounced update for {key!r} failed: {e}")
            if self.on_error:
                self.on_error(key, e)
        finally:
            self._running.discard(task)

    def cancel(self, key: Hashable) -> bool:
        task = self._timers.pop(key, None)
        if task is None:
            return False
        task.cancel()
        return True

    def cancel_all(self) -> int:
        """Cancel every timer that has not fired yet"""
        keys = list(self._timers)
        for key in keys:
            self.cancel(key)
        return len(keys)

    def pending(self) -> List[Hashable]:
        return list(self._timers)

    async def drain(self):
        """Wait for every scheduled and running callback to finish"""
        tasks = list(self._timers.values()) + list(self._running)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
