"""
Synchronous process-wide entry point to the engine.

The engine is asyncio based. Callers such as request handlers or the CLI
are not, so BotContext runs a private event loop on a daemon thread and
exposes the five public operations as plain blocking calls.
"""

import asyncio
import threading
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from arbwatch.engine.orchestrator import Orchestrator, create_orchestrator
from arbwatch.logger import get_logger, setup_logging
from arbwatch.models import BotMode, StatusSnapshot


logger = get_logger("context")

T = TypeVar("T")


class BotContext:
    """
    Owns one Orchestrator and the event loop it runs on.

    Construct once at startup and hand it to whatever transport layer
    needs it. Errors raised by the engine (InvalidModeError,
    InvalidKindError, NotFoundError) reach the caller unchanged.
    """

    def __init__(
        self,
        orchestrator_factory: Optional[Callable[[], Orchestrator]] = None,
        call_timeout: Optional[float] = 60.0,
    ):
        self.call_timeout = call_timeout
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._run_loop, name="arbwatch-engine", daemon=True
        )
        self._thread.start()
        self._closed = False

        # Build on the loop thread so every asyncio primitive belongs to it
        factory = orchestrator_factory or create_orchestrator
        self.orchestrator: Orchestrator = self._call(self._build(factory))

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    @staticmethod
    async def _build(factory: Callable[[], Orchestrator]) -> Orchestrator:
        return factory()

    @staticmethod
    async def _invoke(fn: Callable[..., T], *args: Any) -> T:
        return fn(*args)

    def _call(self, coro: Awaitable[T]) -> T:
        if self._closed:
            raise RuntimeError("BotContext is closed")
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result(timeout=self.call_timeout)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def start(self, mode: str = BotMode.MANUAL.value) -> StatusSnapshot:
        """Start the bot in "manual" or "autonomous" mode."""
        parsed = BotMode.parse(mode)
        return self._call(self.orchestrator.start(parsed))

    def stop(self) -> None:
        """Stop the bot. Always succeeds."""
        self._call(self.orchestrator.stop())

    def get_status(self) -> StatusSnapshot:
        return self._call(self._invoke(self.orchestrator.get_status))

    def get_all_opportunities(self) -> Dict[str, Any]:
        return self._call(self._invoke(self.orchestrator.get_all_opportunities))

    def execute_manually(self, kind: str, opportunity_id: str) -> Dict[str, Any]:
        """Execute one opportunity by kind and id (manual mode only)."""
        return self._call(self.orchestrator.execute_manually(kind, opportunity_id))

    def get_execution_log(self, limit: int = 50) -> List[Any]:
        return self._call(self._invoke(self.orchestrator.get_execution_log, limit))

    def find_opportunity(self, kind: str, opportunity_id: str):
        monitor = self.orchestrator.monitor_for(kind)
        return self._call(self._invoke(monitor.find, opportunity_id))

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Stop the bot and shut down the loop thread. Idempotent."""
        if self._closed:
            return

        try:
            self.stop()
        finally:
            self._closed = True
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join(timeout=5)
            if not self._thread.is_alive():
                self._loop.close()
            logger.debug("Engine loop closed")

    def __enter__(self) -> "BotContext":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


# Process-wide context
_context: Optional[BotContext] = None
_context_lock = threading.Lock()


def get_bot_context() -> BotContext:
    """
    Get or create the process-wide bot context.

    Logging is configured from LOG_LEVEL and DEBUG_MODE when the context
    is first created.
    """
    global _context
    with _context_lock:
        if _context is None:
            setup_logging()
            _context = BotContext()
        return _context


def close_bot_context() -> None:
    """Tear down the process-wide context, if one was created."""
    global _context
    with _context_lock:
        if _context is not None:
            _context.close()
            _context = None
