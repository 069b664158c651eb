"""
Prediction market arbitrage monitor.

Matches the same question across centralized and decentralized venues and
keeps the pairs where buying complementary outcomes costs less than the
guaranteed payout, net of fees and gas.
"""

import random
from typing import Any, List, Optional, Sequence

from arbwatch.config import get_config
from arbwatch.engine.arbitrage import calculate_prediction_arbitrage
from arbwatch.engine.matcher import QuestionMatcher
from arbwatch.models import MarketQuote, Opportunity, OpportunityKind, VenueType
from arbwatch.monitors.base import BaseMonitor
from arbwatch.sources.base import BaseSource
from arbwatch.sources.prediction import default_prediction_sources


class PredictionMarketMonitor(BaseMonitor):
    """Monitors cross-venue prediction market pricing."""

    kind = OpportunityKind.PREDICTION

    def __init__(
        self,
        sources: Optional[Sequence[BaseSource]] = None,
        interval_seconds: Optional[float] = None,
        matcher: Optional[QuestionMatcher] = None,
        centralized_fee: Optional[float] = None,
        default_gas: Optional[float] = None,
        rng: Optional[random.Random] = None,
    ):
        config = get_config()
        super().__init__(
            sources=sources if sources is not None else default_prediction_sources(rng),
            interval_seconds=interval_seconds or config.monitors.prediction_poll_interval_seconds,
        )
        self.matcher = matcher or QuestionMatcher()
        self.centralized_fee = (
            config.fees.centralized_fee if centralized_fee is None else centralized_fee
        )
        self.default_gas = config.fees.default_gas_cost if default_gas is None else default_gas

    def build_opportunities(self, batches: List[List[Any]]) -> List[Opportunity]:
        quotes = [q for batch in batches for q in batch if isinstance(q, MarketQuote)]
        centralized = [q for q in quotes if q.venue_type == VenueType.CENTRALIZED]
        decentralized = [q for q in quotes if q.venue_type == VenueType.DECENTRALIZED]

        opportunities = []
        for match in self.matcher.match(centralized, decentralized):
            arb = calculate_prediction_arbitrage(
                match,
                centralized_fee=self.centralized_fee,
                default_gas=self.default_gas,
            )
            if not arb.is_arbitrage:
                continue

            opportunities.append(Opportunity(
                opportunity_id=match.match_id,
                kind=self.kind,
                payload=arb,
                score=arb.profit_pct,
            ))

        return opportunities

    def describe(self, opportunity: Opportunity) -> str:
        arb = opportunity.payload
        return (
            f"{arb.question} ({arb.profit_pct:.2f}% net: "
            f"{arb.buy_outcome} on {arb.buy_platform}, {arb.sell_outcome} on {arb.sell_platform})"
        )
