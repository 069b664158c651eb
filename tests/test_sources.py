"""
Tests for the simulated sources and the HTTP JSON adapter.
"""

import random

import httpx
import pytest

from arbwatch.errors import SourceFetchError
from arbwatch.models import VenueType
from arbwatch.monitors import default_sports_sources
from arbwatch.sources import (
    HttpJsonSource,
    SimulatedBookmakerFeed,
    SimulatedSignalSource,
    SimulatedVenueSource,
    default_crypto_sources,
    parse_sports_events,
)


FEED = {
    "events": [
        {
            "id": "match-42",
            "sport": "Tennis",
            "description": "Tennis Final",
            "startTime": "2026-07-01T14:00:00Z",
            "odds": {
                "BookmakerA": {"outcome1": 2.10, "outcome2": 1.90},
                "BookmakerB": {"outcome1": 1.95, "outcome2": 2.05},
            },
        }
    ]
}


def _source(handler, parser=parse_sports_events):
    return HttpJsonSource(
        name="Odds Feed",
        url="https://odds.test/events",
        parser=parser,
        transport=httpx.MockTransport(handler),
    )


class TestSimulatedSources:
    """Tests for the simulated sources."""

    async def test_signal_source_hit(self):
        source = SimulatedSignalSource(
            name="SEC EDGAR",
            hit_probability=1.0,
            symbol="NEWCOIN",
            token_name="New Cryptocurrency Token",
            filing_type="Form D",
            description="test",
            confidence=0.75,
        )

        signals = await source.fetch_candidates()

        assert len(signals) == 1
        assert signals[0].source == "SEC EDGAR"
        assert signals[0].confidence == 0.75

    async def test_signal_source_miss(self):
        source = SimulatedSignalSource(
            name="USPTO",
            hit_probability=0.0,
            symbol="X",
            token_name="X",
            filing_type="Trademark Application",
            description="test",
            confidence=0.6,
        )

        assert await source.fetch_candidates() == []

    def test_default_crypto_sources(self):
        sources = default_crypto_sources(random.Random(1))

        assert [s.name for s in sources] == [
            "SEC EDGAR",
            "USPTO",
            "Exchange Announcement",
            "Domain Registration",
        ]
        assert [s.confidence for s in sources] == [0.75, 0.60, 0.85, 0.50]

    async def test_bookmaker_feed_shape(self):
        feed = SimulatedBookmakerFeed(bookmakers=["A", "B"], rng=random.Random(5))

        events = await feed.fetch_candidates()

        assert [e.event_id for e in events] == [f"event-{i}" for i in range(1, 6)]
        for event in events:
            assert set(event.odds) == {"A", "B"}
            for odds in event.odds.values():
                assert 1.8 <= odds.outcome1 <= 2.4
                assert 1.8 <= odds.outcome2 <= 2.4

    async def test_venue_source_gas_only_on_decentralized(self):
        rng = random.Random(9)
        central = await SimulatedVenueSource(VenueType.CENTRALIZED, rng=rng).fetch_candidates()
        decentral = await SimulatedVenueSource(VenueType.DECENTRALIZED, rng=rng).fetch_candidates()

        assert all(q.gas_price is None for q in central)
        assert all(0.01 <= q.gas_price <= 0.03 for q in decentral)
        assert all(0.40 <= q.yes_price <= 0.60 for q in central + decentral)
        assert len(central) == 3 * 4

    def test_default_sports_sources_simulated(self):
        sources = default_sports_sources()

        assert isinstance(sources[0], SimulatedBookmakerFeed)

    def test_default_sports_sources_from_feed_url(self, monkeypatch):
        from arbwatch.config import reload_config

        monkeypatch.setenv("SPORTS_FEED_URL", "https://odds.test/events")
        reload_config()

        sources = default_sports_sources()

        assert isinstance(sources[0], HttpJsonSource)
        assert sources[0].url == "https://odds.test/events"


class TestHttpJsonSource:
    """Tests for HttpJsonSource."""

    async def test_fetch_and_parse(self):
        def handler(request):
            assert request.url.path == "/events"
            return httpx.Response(200, json=FEED)

        async with _source(handler) as source:
            events = await source.fetch_candidates()

        assert len(events) == 1
        event = events[0]
        assert event.event_id == "match-42"
        assert event.sport == "Tennis"
        assert event.start_time.year == 2026
        assert event.odds["BookmakerB"].outcome2 == 2.05

    async def test_http_error_raises_source_error(self):
        source = _source(lambda request: httpx.Response(503))

        with pytest.raises(SourceFetchError) as exc_info:
            await source.fetch_candidates()
        await source.disconnect()

        assert exc_info.value.source == "Odds Feed"

    async def test_invalid_json_raises_source_error(self):
        source = _source(lambda request: httpx.Response(200, text="not json"))

        with pytest.raises(SourceFetchError):
            await source.fetch_candidates()
        await source.disconnect()

    async def test_unexpected_payload_raises_source_error(self):
        source = _source(lambda request: httpx.Response(200, json={"events": [{"sport": "Tennis"}]}))

        with pytest.raises(SourceFetchError):
            await source.fetch_candidates()
        await source.disconnect()

    async def test_disconnect_closes_client(self):
        source = _source(lambda request: httpx.Response(200, json=[]))

        await source.connect()
        assert source.is_connected
        await source.disconnect()

        assert not source.is_connected


class TestParseSportsEvents:
    """Tests for parse_sports_events."""

    def test_accepts_bare_list(self):
        events = parse_sports_events(FEED["events"])

        assert [e.event_id for e in events] == ["match-42"]

    def test_missing_optional_fields(self):
        events = parse_sports_events([{"id": 7}])

        assert events[0].event_id == "7"
        assert events[0].description == "7"
        assert events[0].odds == {}
