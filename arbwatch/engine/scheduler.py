"""
Periodic task scheduling on the asyncio event loop.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from arbwatch.logger import get_logger


logger = get_logger("scheduler")


class PeriodicTask:
    """
    Runs an async callback every `interval_seconds` until stopped.

    The first run happens one interval after start(). Runs never overlap:
    the next sleep only begins once the previous callback has returned.
    A failing callback is logged and the loop keeps going. stop() cancels
    the loop and waits for it, so nothing fires after stop() returns.
    """

    def __init__(
        self,
        name: str,
        interval_seconds: float,
        callback: Callable[[], Awaitable[None]],
    ):
        self.name = name
        self.interval_seconds = interval_seconds
        self.callback = callback

        self._task: Optional[asyncio.Task] = None
        self._stopping = False
        self._runs = 0
        self._failures = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def runs(self) -> int:
        return self._runs

    @property
    def failures(self) -> int:
        return self._failures

    def start(self) -> None:
        """Arm the ticker. No-op if already armed."""
        if self.is_running:
            logger.debug("Ticker already running", ticker=self.name)
            return

        self._stopping = False
        self._task = asyncio.create_task(self._run(), name=f"ticker:{self.name}")

    async def stop(self) -> None:
        """Cancel the ticker and wait for it to finish. Idempotent."""
        self._stopping = True
        task, self._task = self._task, None
        if task is None:
            return

        if task is asyncio.current_task():
            # Stopped from inside its own callback; the loop exits on the
            # _stopping check instead of being cancelled mid-callback
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while not self._stopping:
            await asyncio.sleep(self.interval_seconds)
            if self._stopping:
                break

            try:
                await self.callback()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._failures += 1
                logger.error(f"Ticker callback failed: {e}", ticker=self.name)
            finally:
                self._runs += 1
