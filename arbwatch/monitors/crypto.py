"""
Crypto launch monitor.

Watches public records (regulatory filings, trademark applications,
exchange listings, domain registrations) for signs of new token launches.
There is no cross-source math here: each signal carries its own
confidence and that confidence is the score.
"""

import random
from typing import Any, List, Optional, Sequence

from arbwatch.config import get_config
from arbwatch.models import CryptoSignal, Opportunity, OpportunityKind
from arbwatch.monitors.base import BaseMonitor
from arbwatch.sources.base import BaseSource
from arbwatch.sources.crypto import default_crypto_sources


class CryptoMonitor(BaseMonitor):
    """Monitors public records for new crypto launches."""

    kind = OpportunityKind.CRYPTO

    def __init__(
        self,
        sources: Optional[Sequence[BaseSource]] = None,
        interval_seconds: Optional[float] = None,
        rng: Optional[random.Random] = None,
    ):
        config = get_config()
        super().__init__(
            sources=sources if sources is not None else default_crypto_sources(rng),
            interval_seconds=interval_seconds or config.monitors.crypto_poll_interval_seconds,
        )

    @staticmethod
    def opportunity_id(signal: CryptoSignal) -> str:
        return f"{signal.symbol}:{signal.source}"

    def build_opportunities(self, batches: List[List[Any]]) -> List[Opportunity]:
        return [
            Opportunity(
                opportunity_id=self.opportunity_id(signal),
                kind=self.kind,
                payload=signal,
                score=signal.confidence,
            )
            for batch in batches
            for signal in batch
        ]

    def describe(self, opportunity: Opportunity) -> str:
        signal = opportunity.payload
        return f"{signal.symbol} from {signal.source}"
