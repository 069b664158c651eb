"""
Data models for the arbwatch opportunity engine.
Defines all core data structures used throughout the system.
"""

from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from arbwatch.errors import InvalidKindError, InvalidModeError


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def to_jsonable(value: Any) -> Any:
    """Convert dataclasses, enums and datetimes into plain JSON types."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


class OpportunityKind(Enum):
    """Which monitor produced an opportunity."""
    CRYPTO = "crypto"
    SPORTS = "sports"
    PREDICTION = "prediction"

    @classmethod
    def parse(cls, value: Union[str, "OpportunityKind"]) -> "OpportunityKind":
        """Exact match on the lowercase value; anything else is InvalidKindError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidKindError(
                f"Invalid opportunity kind {value!r}. "
                f"Must be one of: {', '.join(k.value for k in cls)}"
            ) from None


class OpportunityStatus(Enum):
    """Lifecycle of an opportunity. Only ever moves pending -> executed."""
    PENDING = "pending"
    EXECUTED = "executed"


class BotMode(Enum):
    """Orchestrator operating mode."""
    MANUAL = "manual"
    AUTONOMOUS = "autonomous"

    @classmethod
    def parse(cls, value: Union[str, "BotMode"]) -> "BotMode":
        """Only "manual" and "autonomous" are accepted, case and spacing included."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidModeError(
                f"Invalid mode {value!r}. Must be \"manual\" or \"autonomous\""
            ) from None


class OrchestratorState(Enum):
    """Orchestrator state machine."""
    STOPPED = "stopped"
    RUNNING_MANUAL = "running_manual"
    RUNNING_AUTONOMOUS = "running_autonomous"


class ExecutionOutcome(Enum):
    """Outcome recorded in the execution log."""
    SIMULATED = "simulated"
    ERROR = "error"


class VenueType(Enum):
    """Prediction market venue category."""
    CENTRALIZED = "centralized"
    DECENTRALIZED = "decentralized"


# ---------------------------------------------------------------------------
# Source-side shapes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CryptoSignal:
    """A launch signal found in a public record."""
    symbol: str
    name: str
    source: str  # provenance tag, e.g. "SEC EDGAR"
    filing_type: str
    filing_date: datetime
    description: str
    confidence: float  # 0-1
    url: str = ""


@dataclass(frozen=True)
class BookmakerOdds:
    """Decimal odds offered by one bookmaker on a two-way market."""
    outcome1: float
    outcome2: float


@dataclass
class SportsEvent:
    """A sporting event with per-bookmaker odds."""
    event_id: str
    sport: str
    description: str
    start_time: datetime
    odds: Dict[str, BookmakerOdds] = field(default_factory=dict)


@dataclass(frozen=True)
class MarketQuote:
    """One venue's prices for a binary question."""
    market_id: str
    platform: str
    venue_type: VenueType
    question: str
    yes_price: float
    no_price: float
    volume: float = 0.0
    liquidity: float = 0.0
    gas_price: Optional[float] = None  # decentralized venues only


@dataclass(frozen=True)
class MatchedMarket:
    """The same question listed on a centralized and a decentralized venue."""
    match_id: str
    question: str
    centralized: MarketQuote
    decentralized: MarketQuote


# ---------------------------------------------------------------------------
# Scored payloads
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SportsArbitrage:
    """Result of scoring one sports event across bookmakers."""
    event_id: str
    event: str
    sport: str
    start_time: Optional[datetime]
    is_arbitrage: bool
    profit_pct: float
    implied_total: float
    best_odds1: float
    best_bookmaker1: str
    best_odds2: float
    best_bookmaker2: str
    stake1_pct: float = 0.0
    stake2_pct: float = 0.0


@dataclass(frozen=True)
class PredictionArbitrage:
    """Result of scoring one cross-venue prediction market pair."""
    market_id: str
    question: str
    is_arbitrage: bool
    profit_pct: float  # net of fees and gas, floored at zero
    raw_profit_pct: float
    estimated_costs: float  # fractional
    strategy: str
    buy_platform: str
    buy_outcome: str
    buy_price: float
    sell_platform: str
    sell_outcome: str
    sell_price: float


Payload = Union[CryptoSignal, SportsArbitrage, PredictionArbitrage]


@dataclass
class Opportunity:
    """A detected, scoreable candidate for action."""
    opportunity_id: str
    kind: OpportunityKind
    payload: Payload
    score: Optional[float]
    detected_at: datetime = field(default_factory=utcnow)
    status: OpportunityStatus = OpportunityStatus.PENDING

    @property
    def is_pending(self) -> bool:
        return self.status == OpportunityStatus.PENDING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.opportunity_id,
            "kind": self.kind.value,
            "score": self.score,
            "detected_at": self.detected_at.isoformat(),
            "status": self.status.value,
            "payload": to_jsonable(self.payload),
        }


@dataclass(frozen=True)
class Decision:
    """Evaluator output."""
    should_act: bool
    reason: str
    score: float


@dataclass
class ExecutionRecord:
    """One entry of the execution audit log."""
    kind: str
    subject_id: str
    reason: str
    outcome_status: ExecutionOutcome = ExecutionOutcome.SIMULATED
    timestamp: datetime = field(default_factory=utcnow)
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "subject_id": self.subject_id,
            "reason": self.reason,
            "status": self.outcome_status.value,
            "timestamp": self.timestamp.isoformat(),
            "details": to_jsonable(self.details),
        }


@dataclass
class StatusSnapshot:
    """Aggregate orchestrator status."""
    is_running: bool
    mode: BotMode
    state: OrchestratorState
    monitors_running: Dict[str, bool]
    opportunity_counts: Dict[str, int]
    recent_executions: List[ExecutionRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_running": self.is_running,
            "mode": self.mode.value,
            "state": self.state.value,
            "monitors": dict(self.monitors_running),
            "opportunity_counts": dict(self.opportunity_counts),
            "execution_log": [r.to_dict() for r in self.recent_executions],
        }
