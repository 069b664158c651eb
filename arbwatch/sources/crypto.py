"""
Simulated public-record sources for new crypto launches.

Stand-ins for SEC EDGAR filings, USPTO trademark applications, exchange
listing announcements and domain registrations. Each poll either finds
its one fixed signal or finds nothing.
"""

import random
from typing import List, Optional

from arbwatch.models import CryptoSignal, utcnow
from arbwatch.sources.base import BaseSource


# Highest-trust provenance tag; the evaluator relaxes its threshold for it
SEC_EDGAR = "SEC EDGAR"


class SimulatedSignalSource(BaseSource):
    """Returns a fixed signal with a fixed hit probability."""

    def __init__(
        self,
        name: str,
        hit_probability: float,
        symbol: str,
        token_name: str,
        filing_type: str,
        description: str,
        confidence: float,
        url: str = "",
        rng: Optional[random.Random] = None,
    ):
        super().__init__(name)
        self.hit_probability = hit_probability
        self.symbol = symbol
        self.token_name = token_name
        self.filing_type = filing_type
        self.description = description
        self.confidence = confidence
        self.url = url
        self._rng = rng or random.Random()

    async def fetch_candidates(self) -> List[CryptoSignal]:
        if self._rng.random() >= self.hit_probability:
            return []

        return [CryptoSignal(
            symbol=self.symbol,
            name=self.token_name,
            source=self.name,
            filing_type=self.filing_type,
            filing_date=utcnow(),
            description=self.description,
            confidence=self.confidence,
            url=self.url,
        )]


def default_crypto_sources(rng: Optional[random.Random] = None) -> List[BaseSource]:
    """The four simulated public-record sources."""
    rng = rng or random.Random()
    return [
        SimulatedSignalSource(
            name=SEC_EDGAR,
            hit_probability=0.30,
            symbol="NEWCOIN",
            token_name="New Cryptocurrency Token",
            filing_type="Form D",
            description="New token offering detected in SEC filings",
            confidence=0.75,
            url="https://www.sec.gov/edgar",
            rng=rng,
        ),
        SimulatedSignalSource(
            name="USPTO",
            hit_probability=0.20,
            symbol="TRADEMARKED",
            token_name="Trademark Protected Coin",
            filing_type="Trademark Application",
            description="New crypto trademark application detected",
            confidence=0.60,
            url="https://www.uspto.gov",
            rng=rng,
        ),
        SimulatedSignalSource(
            name="Exchange Announcement",
            hit_probability=0.15,
            symbol="EXCHANGE",
            token_name="Exchange Listed Token",
            filing_type="Listing",
            description="New token listing detected",
            confidence=0.85,
            url="https://example-exchange.com",
            rng=rng,
        ),
        SimulatedSignalSource(
            name="Domain Registration",
            hit_probability=0.10,
            symbol="DOMAIN",
            token_name="Domain Registered Coin",
            filing_type="Domain",
            description="Crypto-related domain registration detected",
            confidence=0.50,
            url="https://who.is",
            rng=rng,
        ),
    ]
