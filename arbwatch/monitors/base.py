"""
Base class for source monitors.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from arbwatch.engine.evaluator import evaluate_opportunity
from arbwatch.engine.scheduler import PeriodicTask
from arbwatch.engine.store import OpportunityStore
from arbwatch.errors import SourceFetchError
from arbwatch.logger import get_logger, opportunity_logger
from arbwatch.models import Decision, Opportunity, OpportunityKind
from arbwatch.sources.base import BaseSource


logger = get_logger("monitor")


class BaseMonitor(ABC):
    """
    Polls a set of sources on a fixed interval and keeps the scored,
    deduplicated results.

    Flow per poll cycle:
    1. Fetch from every source concurrently; a failing source yields nothing
    2. Turn the fetched candidates into scored opportunities
    3. Store the ones whose id has not been seen before

    Cycles are serialized, so a slow cycle delays the next one rather than
    racing it on dedup.
    """

    kind: OpportunityKind

    def __init__(self, sources: Sequence[BaseSource], interval_seconds: float):
        self.sources: List[BaseSource] = list(sources)
        self.interval_seconds = interval_seconds

        self._store = OpportunityStore(self.kind)
        self._is_running = False
        self._poll_lock = asyncio.Lock()
        self._ticker: Optional[PeriodicTask] = None

        # Metrics
        self._polls_completed = 0
        self._source_failures = 0
        self._last_poll_at: Optional[float] = None

    @property
    def name(self) -> str:
        return f"{self.kind.value}_monitor"

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def opportunity_count(self) -> int:
        return len(self._store)

    async def start(self) -> None:
        """Poll once immediately, then keep polling on the interval."""
        if self._is_running:
            logger.info("Monitor is already running", monitor=self.name)
            return

        self._is_running = True
        logger.info(
            f"Starting {self.kind.value} monitor...",
            sources=len(self.sources),
            interval_s=self.interval_seconds,
        )

        await self._connect_sources()
        await self.poll_once()

        # stop() may have been called while the first poll was in flight
        if not self._is_running:
            return

        self._ticker = PeriodicTask(
            name=f"{self.kind.value}-poll",
            interval_seconds=self.interval_seconds,
            callback=self._scheduled_poll,
        )
        self._ticker.start()

    async def stop(self) -> None:
        """Cancel polling. Safe to call when not running."""
        was_running = self._is_running
        self._is_running = False

        if self._ticker:
            await self._ticker.stop()
            self._ticker = None

        if was_running:
            await self._disconnect_sources()
            logger.info(f"{self.kind.value.capitalize()} monitor stopped")

    async def _scheduled_poll(self) -> None:
        if not self._is_running:
            return
        await self.poll_once()

    async def poll_once(self) -> List[Opportunity]:
        """
        Run one poll cycle.

        Returns:
            Copies of the opportunities that were new this cycle
        """
        async with self._poll_lock:
            started = time.monotonic()

            results = await asyncio.gather(
                *(self._fetch_from(source) for source in self.sources)
            )
            failed = sum(1 for r in results if r is None)
            batches = [r if r is not None else [] for r in results]

            try:
                candidates = self.build_opportunities(batches)
            except Exception as e:
                logger.error(f"Scoring failed, keeping previous state: {e}", monitor=self.name)
                return []

            added = self._store.add_new(candidates)
            self._polls_completed += 1
            self._last_poll_at = time.time()

            for opportunity in added:
                opportunity_logger.log_opportunity_detected(
                    kind=self.kind.value,
                    opportunity_id=opportunity.opportunity_id,
                    score=opportunity.score,
                    summary=self.describe(opportunity),
                )

            opportunity_logger.log_poll_completed(
                kind=self.kind.value,
                sources=len(self.sources),
                failed_sources=failed,
                new_opportunities=len(added),
                total_opportunities=len(self._store),
                duration_ms=(time.monotonic() - started) * 1000,
            )
            return added

    async def scan_once(self) -> List[Opportunity]:
        """
        One poll cycle outside of start()/stop().

        Sources are connected for the cycle and disconnected afterwards,
        so no client outlives the caller's event loop.
        """
        await self._connect_sources()
        try:
            return await self.poll_once()
        finally:
            await self._disconnect_sources()

    async def _fetch_from(self, source: BaseSource) -> Optional[List[Any]]:
        """Fetch one source; None marks a failure."""
        try:
            return list(await source.fetch_candidates())
        except asyncio.CancelledError:
            raise
        except Exception as e:
            error = e if isinstance(e, SourceFetchError) else SourceFetchError(source.name, str(e), cause=e)
            self._source_failures += 1
            logger.warning(f"Source fetch failed: {error}", monitor=self.name, source=source.name)
            return None

    async def _connect_sources(self) -> None:
        results = await asyncio.gather(
            *(source.connect() for source in self.sources), return_exceptions=True
        )
        for source, result in zip(self.sources, results):
            if isinstance(result, Exception):
                logger.warning(f"Source failed to connect: {result}", source=source.name)

    async def _disconnect_sources(self) -> None:
        results = await asyncio.gather(
            *(source.disconnect() for source in self.sources), return_exceptions=True
        )
        for source, result in zip(self.sources, results):
            if isinstance(result, Exception):
                logger.warning(f"Source failed to disconnect: {result}", source=source.name)

    @abstractmethod
    def build_opportunities(self, batches: List[List[Any]]) -> List[Opportunity]:
        """
        Turn this cycle's fetched candidates into scored opportunities.

        Args:
            batches: One list of raw candidates per source, in source order

        Returns:
            Opportunities worth keeping; duplicates are filtered by the store
        """
        pass

    def describe(self, opportunity: Opportunity) -> str:
        """Short human-readable summary for logs and tables."""
        return opportunity.opportunity_id

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_opportunities(self) -> List[Opportunity]:
        """All opportunities in detection order (copies)."""
        return self._store.snapshot()

    def get_high_value(self, threshold: float) -> List[Opportunity]:
        """Opportunities scoring at or above threshold, in detection order."""
        return [
            o for o in self._store.snapshot()
            if o.score is not None and o.score >= threshold
        ]

    def get_pending_high_value(self, threshold: float) -> List[Opportunity]:
        return [o for o in self.get_high_value(threshold) if o.is_pending]

    def find(self, opportunity_id: str) -> Optional[Opportunity]:
        return self._store.get(opportunity_id)

    def evaluate(self, opportunity: Opportunity) -> Decision:
        return evaluate_opportunity(opportunity)

    def mark_executed(self, opportunity_id: str) -> bool:
        """Status-flip callback used by the executor."""
        return self._store.mark_executed(opportunity_id)

    @property
    def metrics(self) -> Dict[str, Any]:
        return {
            "is_running": self._is_running,
            "polls_completed": self._polls_completed,
            "source_failures": self._source_failures,
            "opportunities": self._store.count_by_status(),
            "last_poll_at": self._last_poll_at,
        }
