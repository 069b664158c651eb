"""
Sports arbitrage monitor.

Compares odds for the same event across bookmakers and keeps the events
where backing both outcomes at the best prices locks in a profit.
"""

import random
from typing import Any, List, Optional, Sequence

from arbwatch.config import get_config
from arbwatch.engine.arbitrage import calculate_sports_arbitrage
from arbwatch.models import Opportunity, OpportunityKind, SportsEvent
from arbwatch.monitors.base import BaseMonitor
from arbwatch.sources.base import BaseSource
from arbwatch.sources.http import HttpJsonSource, parse_sports_events
from arbwatch.sources.sports import SimulatedBookmakerFeed


def default_sports_sources(rng: Optional[random.Random] = None) -> List[BaseSource]:
    """The configured odds feed, or the simulated bookmakers when none is set."""
    config = get_config()
    if config.monitors.sports_feed_url:
        return [HttpJsonSource(
            name="Odds Feed",
            url=config.monitors.sports_feed_url,
            parser=parse_sports_events,
            timeout=config.monitors.source_timeout_seconds,
        )]
    return [SimulatedBookmakerFeed(bookmakers=config.simulation.bookmaker_list, rng=rng)]


class SportsArbitrageMonitor(BaseMonitor):
    """Monitors bookmaker odds for two-way arbitrage."""

    kind = OpportunityKind.SPORTS

    def __init__(
        self,
        sources: Optional[Sequence[BaseSource]] = None,
        interval_seconds: Optional[float] = None,
        rng: Optional[random.Random] = None,
    ):
        config = get_config()
        super().__init__(
            sources=sources if sources is not None else default_sports_sources(rng),
            interval_seconds=interval_seconds or config.monitors.sports_poll_interval_seconds,
        )

    def build_opportunities(self, batches: List[List[Any]]) -> List[Opportunity]:
        opportunities = []

        for batch in batches:
            for event in batch:
                if not isinstance(event, SportsEvent):
                    continue

                arb = calculate_sports_arbitrage(event)
                if not arb.is_arbitrage:
                    continue

                opportunities.append(Opportunity(
                    opportunity_id=event.event_id,
                    kind=self.kind,
                    payload=arb,
                    score=arb.profit_pct,
                ))

        return opportunities

    def describe(self, opportunity: Opportunity) -> str:
        arb = opportunity.payload
        return (
            f"{arb.event} ({arb.profit_pct:.2f}% profit: "
            f"{arb.best_bookmaker1} @ {arb.best_odds1} / {arb.best_bookmaker2} @ {arb.best_odds2})"
        )
