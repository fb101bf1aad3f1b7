from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

Sleep = Callable[[float], Awaitable[None]]


class RequestPacer:
    """
    Throttles the requests of one domain. The first request goes out
    immediately.

    Sequential mode waits the full ``interval`` before every later request,
    so there is always a pause between one fetch finishing and the next
    starting. Otherwise request starts are spaced by at least ``interval``
    seconds, however many workers share the pacer.
    """

    def __init__(
        self,
        interval: float,
        *,
        sequential: bool = False,
        sleep: Sleep = asyncio.sleep,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.interval = max(0.0, interval)
        self.sequential = sequential
        self._sleep = sleep
        self._clock = clock
        self._lock = asyncio.Lock()
        self._last: Optional[float] = None

    def _now(self) -> float:
        if self._clock is not None:
            return self._clock()
        return asyncio.get_running_loop().time()

    async def wait(self) -> None:
        async with self._lock:
            if self._last is not None and self.interval > 0:
                if self.sequential:
                    wait_for = self.interval
                else:
                    wait_for = self._last + self.interval - self._now()
                if wait_for > 0:
                    await self._sleep(wait_for)
            self._last = self._now()
