"""
Simulated execution and the execution audit log.
Nothing here talks to an exchange, a bookmaker or a chain.
"""

import threading
from collections import deque
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from arbwatch.logger import get_logger, opportunity_logger
from arbwatch.models import (
    CryptoSignal,
    Decision,
    ExecutionOutcome,
    ExecutionRecord,
    Opportunity,
    PredictionArbitrage,
    SportsArbitrage,
)

if TYPE_CHECKING:
    from arbwatch.monitors.base import BaseMonitor


logger = get_logger("executor")


class ExecutionLog:
    """
    Bounded in-memory audit trail.

    Oldest entries are dropped once capacity is reached. Append and the
    implicit trim happen under one lock, so concurrent writers from the
    event loop and facade threads never lose or interleave entries.
    """

    def __init__(self, capacity: int = 100):
        self.capacity = capacity
        self._records: deque = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def append(self, record: ExecutionRecord) -> None:
        with self._lock:
            self._records.append(record)

    def tail(self, limit: int) -> List[ExecutionRecord]:
        """The most recent `limit` records, oldest first."""
        with self._lock:
            if limit <= 0:
                return []
            return list(self._records)[-limit:]

    def all(self) -> List[ExecutionRecord]:
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


class SimulatedExecutor:
    """
    Executes opportunities in simulation.

    Responsibilities:
    - Flip the opportunity to executed through its monitor (exactly once)
    - Record what a real execution would have done
    """

    def __init__(self, log: Optional[ExecutionLog] = None):
        self.log = log or ExecutionLog()
        self._executions = 0
        self._rejected = 0

    async def execute(
        self,
        monitor: "BaseMonitor",
        opportunity: Opportunity,
        decision: Decision,
    ) -> Optional[ExecutionRecord]:
        """
        Execute one opportunity.

        Returns:
            The logged record, or None if the opportunity was already
            executed (or no longer known to its monitor)
        """
        if not monitor.mark_executed(opportunity.opportunity_id):
            self._rejected += 1
            logger.warning(
                "Opportunity already executed, skipping",
                kind=opportunity.kind.value,
                opportunity_id=opportunity.opportunity_id,
            )
            return None

        record = ExecutionRecord(
            kind=opportunity.kind.value,
            subject_id=opportunity.opportunity_id,
            reason=decision.reason,
            outcome_status=ExecutionOutcome.SIMULATED,
            details=self._build_details(opportunity, decision),
        )
        self.log.append(record)
        self._executions += 1

        opportunity_logger.log_execution(
            kind=record.kind,
            subject_id=record.subject_id,
            reason=record.reason,
            outcome=record.outcome_status.value,
        )
        return record

    def record_error(self, kind: str, error: BaseException) -> ExecutionRecord:
        """Log a failed evaluation as an error entry."""
        record = ExecutionRecord(
            kind=kind,
            subject_id="",
            reason=str(error),
            outcome_status=ExecutionOutcome.ERROR,
        )
        self.log.append(record)
        return record

    @staticmethod
    def _build_details(opportunity: Opportunity, decision: Decision) -> Dict[str, Any]:
        payload = opportunity.payload

        if isinstance(payload, CryptoSignal):
            return {
                "action": "buy",
                "symbol": payload.symbol,
                "source": payload.source,
                "confidence": decision.score,
            }

        if isinstance(payload, SportsArbitrage):
            return {
                "event": payload.event,
                "bookmaker1": payload.best_bookmaker1,
                "bookmaker2": payload.best_bookmaker2,
                "stake1_pct": payload.stake1_pct,
                "stake2_pct": payload.stake2_pct,
                "expected_profit_pct": payload.profit_pct,
            }

        if isinstance(payload, PredictionArbitrage):
            return {
                "question": payload.question,
                "buy_platform": payload.buy_platform,
                "buy_outcome": payload.buy_outcome,
                "sell_platform": payload.sell_platform,
                "sell_outcome": payload.sell_outcome,
                "expected_profit_pct": payload.profit_pct,
            }

        return {}

    @property
    def metrics(self) -> Dict[str, int]:
        return {
            "executions": self._executions,
            "rejected": self._rejected,
            "logged": len(self.log),
        }
