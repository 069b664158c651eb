"""
Simulated bookmaker odds feed.
"""

import random
from datetime import timedelta
from typing import List, Optional, Sequence

from arbwatch.models import BookmakerOdds, SportsEvent, utcnow
from arbwatch.sources.base import BaseSource


SPORTS = ["Soccer", "Basketball", "Tennis", "Football"]
DEFAULT_BOOKMAKERS = ["BookmakerA", "BookmakerB", "BookmakerC", "BookmakerD"]


class SimulatedBookmakerFeed(BaseSource):
    """
    Generates a fixed slate of two-way events with fresh odds every poll.

    Event ids are stable across polls so repeated polls exercise dedup.
    """

    def __init__(
        self,
        bookmakers: Optional[Sequence[str]] = None,
        event_count: int = 5,
        min_odds: float = 1.8,
        max_odds: float = 2.4,
        rng: Optional[random.Random] = None,
    ):
        super().__init__("Simulated Bookmakers")
        self.bookmakers = list(bookmakers or DEFAULT_BOOKMAKERS)
        self.event_count = event_count
        self.min_odds = min_odds
        self.max_odds = max_odds
        self._rng = rng or random.Random()

    async def fetch_candidates(self) -> List[SportsEvent]:
        now = utcnow()
        events = []

        for i in range(self.event_count):
            sport = SPORTS[i % len(SPORTS)]
            events.append(SportsEvent(
                event_id=f"event-{i + 1}",
                sport=sport,
                description=f"{sport} Match {i + 1}",
                start_time=now + timedelta(seconds=self._rng.random() * 7 * 24 * 3600),
                odds=self._generate_odds(),
            ))

        return events

    def _generate_odds(self) -> dict:
        spread = self.max_odds - self.min_odds
        return {
            bookmaker: BookmakerOdds(
                outcome1=round(self.min_odds + self._rng.random() * spread, 2),
                outcome2=round(self.min_odds + self._rng.random() * spread, 2),
            )
            for bookmaker in self.bookmakers
        }
