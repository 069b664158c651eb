"""
Orchestrator that runs the monitors as a unit and decides what to execute.
"""

import asyncio
import random
from typing import Any, Dict, List, Optional, Union

from arbwatch.config import BotConfig, get_config
from arbwatch.engine.scheduler import PeriodicTask
from arbwatch.errors import EvaluationError, InvalidModeError, NotFoundError
from arbwatch.logger import get_logger
from arbwatch.models import (
    BotMode,
    ExecutionRecord,
    OpportunityKind,
    OrchestratorState,
    StatusSnapshot,
    utcnow,
)
from arbwatch.monitors.base import BaseMonitor
from arbwatch.monitors.crypto import CryptoMonitor
from arbwatch.monitors.prediction import PredictionMarketMonitor
from arbwatch.monitors.sports import SportsArbitrageMonitor
from arbwatch.trading.executor import ExecutionLog, SimulatedExecutor


logger = get_logger("orchestrator")


class Orchestrator:
    """
    Coordinates all monitors and the execution decisions.

    States:
    - STOPPED: nothing polls, nothing executes
    - RUNNING_MANUAL: monitors poll; execution only through execute_manually()
    - RUNNING_AUTONOMOUS: monitors poll; an evaluation ticker executes
      every positive decision on its own

    Monitors are only read through their accessors. Statuses only change
    through the executor, which calls back into the owning monitor.
    """

    def __init__(
        self,
        crypto_monitor: Optional[BaseMonitor] = None,
        sports_monitor: Optional[BaseMonitor] = None,
        prediction_monitor: Optional[BaseMonitor] = None,
        executor: Optional[SimulatedExecutor] = None,
        config: Optional[BotConfig] = None,
    ):
        self.config = config or get_config()

        self.monitors: Dict[OpportunityKind, BaseMonitor] = {
            OpportunityKind.CRYPTO: crypto_monitor or CryptoMonitor(),
            OpportunityKind.SPORTS: sports_monitor or SportsArbitrageMonitor(),
            OpportunityKind.PREDICTION: prediction_monitor or PredictionMarketMonitor(),
        }
        self.executor = executor or SimulatedExecutor(
            ExecutionLog(self.config.execution.execution_log_capacity)
        )

        self._is_running = False
        self._mode = BotMode.MANUAL
        self._ticker: Optional[PeriodicTask] = None
        self._lifecycle_lock = asyncio.Lock()

        self._ticks = 0
        self._evaluation_errors = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def mode(self) -> BotMode:
        return self._mode

    @property
    def state(self) -> OrchestratorState:
        if not self._is_running:
            return OrchestratorState.STOPPED
        if self._mode == BotMode.AUTONOMOUS:
            return OrchestratorState.RUNNING_AUTONOMOUS
        return OrchestratorState.RUNNING_MANUAL

    @property
    def execution_log(self) -> ExecutionLog:
        return self.executor.log

    def monitor_for(self, kind: Union[str, OpportunityKind]) -> BaseMonitor:
        return self.monitors[OpportunityKind.parse(kind)]

    async def start(self, mode: Union[str, BotMode] = BotMode.MANUAL) -> StatusSnapshot:
        """
        Start every monitor, plus the evaluation ticker in autonomous mode.

        Starting while already running changes nothing.
        """
        mode = BotMode.parse(mode)

        async with self._lifecycle_lock:
            if self._is_running:
                logger.info(
                    "Bot is already running",
                    mode=self._mode.value,
                    requested_mode=mode.value,
                )
                return self.get_status()

            self._mode = mode
            self._is_running = True
            logger.info(f"🚀 Starting bot orchestrator in {mode.value} mode...")

            results = await asyncio.gather(
                *(monitor.start() for monitor in self.monitors.values()),
                return_exceptions=True,
            )
            for kind, result in zip(self.monitors, results):
                if isinstance(result, Exception):
                    logger.error(f"Monitor failed to start: {result}", monitor=kind.value)

            if mode == BotMode.AUTONOMOUS:
                self._ticker = PeriodicTask(
                    name="autonomous-evaluation",
                    interval_seconds=self.config.autonomous.evaluation_interval_seconds,
                    callback=self._autonomous_tick,
                )
                self._ticker.start()

            logger.info("Bot orchestrator started successfully", state=self.state.value)
            return self.get_status()

    async def stop(self) -> None:
        """Stop the evaluation ticker and every monitor. Idempotent."""
        async with self._lifecycle_lock:
            was_running = self._is_running
            self._is_running = False

            if self._ticker:
                await self._ticker.stop()
                self._ticker = None

            await asyncio.gather(
                *(monitor.stop() for monitor in self.monitors.values()),
                return_exceptions=True,
            )

            if was_running:
                logger.info("Bot orchestrator stopped")

    # ------------------------------------------------------------------
    # Autonomous evaluation
    # ------------------------------------------------------------------

    def _threshold_for(self, kind: OpportunityKind) -> float:
        autonomous = self.config.autonomous
        return {
            OpportunityKind.CRYPTO: autonomous.crypto_min_confidence,
            OpportunityKind.SPORTS: autonomous.sports_min_profit_pct,
            OpportunityKind.PREDICTION: autonomous.prediction_min_profit_pct,
        }[kind]

    async def _autonomous_tick(self) -> None:
        await self.evaluate_and_execute()

    async def evaluate_and_execute(self) -> List[ExecutionRecord]:
        """
        One autonomous tick across all monitors.

        A failure while evaluating one monitor is recorded and does not
        stop the others from being evaluated.
        """
        if not self._is_running or self._mode != BotMode.AUTONOMOUS:
            return []

        self._ticks += 1
        logger.debug("Evaluating opportunities for autonomous execution...", tick=self._ticks)

        executed: List[ExecutionRecord] = []
        for kind, monitor in self.monitors.items():
            try:
                executed.extend(await self._evaluate_monitor(kind, monitor))
            except Exception as e:
                error = e if isinstance(e, EvaluationError) else EvaluationError(kind.value, str(e), cause=e)
                self._evaluation_errors += 1
                logger.error(f"Error during autonomous evaluation: {error}", monitor=kind.value)
                self.executor.record_error(kind.value, error)

        if executed:
            logger.info("Autonomous tick executed opportunities", count=len(executed))
        return executed

    async def _evaluate_monitor(
        self, kind: OpportunityKind, monitor: BaseMonitor
    ) -> List[ExecutionRecord]:
        executed = []
        for opportunity in monitor.get_pending_high_value(self._threshold_for(kind)):
            decision = monitor.evaluate(opportunity)
            if not decision.should_act or not opportunity.is_pending:
                continue

            logger.info(
                f"SIMULATION: executing {kind.value} opportunity",
                opportunity_id=opportunity.opportunity_id,
                reason=decision.reason,
            )
            record = await self.executor.execute(monitor, opportunity, decision)
            if record:
                executed.append(record)
        return executed

    # ------------------------------------------------------------------
    # Manual execution
    # ------------------------------------------------------------------

    async def execute_manually(
        self, kind: Union[str, OpportunityKind], opportunity_id: str
    ) -> Dict[str, Any]:
        """
        Execute one named opportunity, overriding the evaluator's decision.

        Raises:
            InvalidModeError: If the bot is not running in manual mode
            InvalidKindError: If kind is not crypto, sports or prediction
            NotFoundError: If the monitor has no opportunity with this id
        """
        if self.state != OrchestratorState.RUNNING_MANUAL:
            raise InvalidModeError("Manual execution only allowed in manual mode")

        kind = OpportunityKind.parse(kind)
        monitor = self.monitors[kind]

        opportunity = monitor.find(opportunity_id)
        if opportunity is None:
            raise NotFoundError(f"{kind.value.capitalize()} opportunity not found: {opportunity_id}")

        decision = monitor.evaluate(opportunity)
        if not decision.should_act:
            logger.info(
                "Manual override of negative decision",
                kind=kind.value,
                opportunity_id=opportunity_id,
                reason=decision.reason,
            )

        record = await self.executor.execute(monitor, opportunity, decision)
        if record is None:
            return {
                "success": False,
                "message": "Opportunity already executed",
            }

        return {
            "success": True,
            "message": "Opportunity executed (simulated)",
        }

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_status(self) -> StatusSnapshot:
        return StatusSnapshot(
            is_running=self._is_running,
            mode=self._mode,
            state=self.state,
            monitors_running={k.value: m.is_running for k, m in self.monitors.items()},
            opportunity_counts={k.value: m.opportunity_count for k, m in self.monitors.items()},
            recent_executions=self.execution_log.tail(self.config.execution.status_log_tail),
        )

    def get_all_opportunities(self) -> Dict[str, Any]:
        snapshot: Dict[str, Any] = {
            kind.value: monitor.get_opportunities()
            for kind, monitor in self.monitors.items()
        }
        snapshot["timestamp"] = utcnow().isoformat()
        return snapshot

    def get_execution_log(self, limit: int = 50) -> List[ExecutionRecord]:
        return self.execution_log.tail(limit)

    @property
    def metrics(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "ticks": self._ticks,
            "evaluation_errors": self._evaluation_errors,
            "executor": self.executor.metrics,
            "monitors": {k.value: m.metrics for k, m in self.monitors.items()},
        }


def create_orchestrator(
    config: Optional[BotConfig] = None,
    seed: Optional[int] = None,
) -> Orchestrator:
    """
    Build an orchestrator with the default monitors.

    The simulated sources share one random generator, seeded from `seed`
    or SIMULATION_SEED so runs can be reproduced.
    """
    config = config or get_config()
    if seed is None:
        seed = config.simulation.simulation_seed
    rng = random.Random(seed)

    return Orchestrator(
        crypto_monitor=CryptoMonitor(rng=rng),
        sports_monitor=SportsArbitrageMonitor(rng=rng),
        prediction_monitor=PredictionMarketMonitor(rng=rng),
        config=config,
    )
