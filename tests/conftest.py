"""
Pytest configuration and shared fixtures.
"""

import os
from datetime import datetime, timezone

import pytest

# Set test environment
os.environ["DEBUG_MODE"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SPORTS_FEED_URL"] = ""
os.environ["SIMULATION_SEED"] = "7"

from arbwatch.config import reload_config
from arbwatch.errors import SourceFetchError
from arbwatch.models import (
    BookmakerOdds,
    CryptoSignal,
    MarketQuote,
    SportsEvent,
    VenueType,
)
from arbwatch.sources.base import BaseSource


class StaticSource(BaseSource):
    """Returns whatever is in `items`; tests may swap the list between polls."""

    def __init__(self, items=None, name="static"):
        super().__init__(name)
        self.items = list(items or [])
        self.calls = 0

    async def fetch_candidates(self):
        self.calls += 1
        return list(self.items)


class FailingSource(BaseSource):
    """Always raises on fetch."""

    def __init__(self, name="broken"):
        super().__init__(name)
        self.calls = 0

    async def fetch_candidates(self):
        self.calls += 1
        raise SourceFetchError(self.name, "connection refused")


def make_signal(symbol="NEWCOIN", source="SEC EDGAR", confidence=0.75):
    return CryptoSignal(
        symbol=symbol,
        name=f"{symbol} Token",
        source=source,
        filing_type="Form D",
        filing_date=datetime(2026, 1, 1, tzinfo=timezone.utc),
        description="test signal",
        confidence=confidence,
    )


def make_event(event_id="event-1", odds=None):
    if odds is None:
        odds = {
            "BookmakerA": BookmakerOdds(outcome1=2.10, outcome2=1.90),
            "BookmakerB": BookmakerOdds(outcome1=1.95, outcome2=2.05),
        }
    return SportsEvent(
        event_id=event_id,
        sport="Soccer",
        description=f"Soccer Match {event_id}",
        start_time=datetime(2026, 1, 2, tzinfo=timezone.utc),
        odds=odds,
    )


def make_quote(platform, venue_type, yes_price, no_price, question="Will it rain tomorrow?", gas_price=None):
    return MarketQuote(
        market_id=f"{platform}-{question}",
        platform=platform,
        venue_type=venue_type,
        question=question,
        yes_price=yes_price,
        no_price=no_price,
        gas_price=gas_price,
    )


@pytest.fixture(autouse=True)
def fresh_config():
    """Reload configuration so env tweaks in one test do not leak."""
    return reload_config()


@pytest.fixture
def mock_config(fresh_config):
    """Provide the current configuration."""
    return fresh_config


@pytest.fixture
def arbitrage_event():
    """Best odds 2.10 / 2.05 across two bookmakers: an arbitrage."""
    return make_event()


@pytest.fixture
def matched_quotes():
    """A centralized and decentralized quote where buying YES + NO costs 0.80."""
    central = make_quote("Kalshi", VenueType.CENTRALIZED, yes_price=0.40, no_price=0.60)
    decentral = make_quote("Augur", VenueType.DECENTRALIZED, yes_price=0.55, no_price=0.40, gas_price=0.02)
    return central, decentral
