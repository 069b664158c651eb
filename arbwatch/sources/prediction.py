"""
Simulated prediction market venues.

Centralized venues charge a trading fee; decentralized venues quote a gas
cost per trade. Both list the same handful of questions so they can be
matched against each other.
"""

import random
from typing import List, Optional, Sequence

from arbwatch.models import MarketQuote, VenueType
from arbwatch.sources.base import BaseSource


CENTRALIZED_PLATFORMS = ["Polymarket", "Kalshi", "PredictIt"]
DECENTRALIZED_PLATFORMS = ["Augur", "Gnosis", "Omen"]

QUESTIONS = [
    "Will Bitcoin reach $100,000 in 2026?",
    "Will the stock market be up this year?",
    "Will it rain tomorrow?",
    "Will Team A win the championship?",
]


class SimulatedVenueSource(BaseSource):
    """Quotes every configured question on every platform of one venue type."""

    def __init__(
        self,
        venue_type: VenueType,
        platforms: Optional[Sequence[str]] = None,
        questions: Optional[Sequence[str]] = None,
        rng: Optional[random.Random] = None,
    ):
        if platforms is None:
            platforms = (
                CENTRALIZED_PLATFORMS
                if venue_type == VenueType.CENTRALIZED
                else DECENTRALIZED_PLATFORMS
            )
        super().__init__(f"Simulated {venue_type.value} venues")
        self.venue_type = venue_type
        self.platforms = list(platforms)
        self.questions = list(questions or QUESTIONS)
        self._rng = rng or random.Random()

    async def fetch_candidates(self) -> List[MarketQuote]:
        decentralized = self.venue_type == VenueType.DECENTRALIZED
        max_volume = 50000 if decentralized else 100000
        max_liquidity = 25000 if decentralized else 50000

        quotes = []
        for platform in self.platforms:
            for question in self.questions:
                quotes.append(MarketQuote(
                    market_id=f"{platform}-{question}",
                    platform=platform,
                    venue_type=self.venue_type,
                    question=question,
                    yes_price=0.40 + self._rng.random() * 0.20,
                    no_price=0.40 + self._rng.random() * 0.20,
                    volume=float(self._rng.randrange(max_volume)),
                    liquidity=float(self._rng.randrange(max_liquidity)),
                    gas_price=0.01 + self._rng.random() * 0.02 if decentralized else None,
                ))
        return quotes


def default_prediction_sources(rng: Optional[random.Random] = None) -> List[BaseSource]:
    """One centralized and one decentralized simulated venue source."""
    rng = rng or random.Random()
    return [
        SimulatedVenueSource(VenueType.CENTRALIZED, rng=rng),
        SimulatedVenueSource(VenueType.DECENTRALIZED, rng=rng),
    ]
