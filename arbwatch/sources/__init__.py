"""
Pluggable opportunity sources.

Simulated sources stand in for real integrations; HttpJsonSource adapts
any JSON endpoint.
"""

from arbwatch.sources.base import BaseSource
from arbwatch.sources.http import HttpJsonSource, parse_sports_events
from arbwatch.sources.crypto import SimulatedSignalSource, default_crypto_sources
from arbwatch.sources.sports import SimulatedBookmakerFeed
from arbwatch.sources.prediction import SimulatedVenueSource, default_prediction_sources

__all__ = [
    "BaseSource",
    "HttpJsonSource",
    "parse_sports_events",
    "SimulatedSignalSource",
    "default_crypto_sources",
    "SimulatedBookmakerFeed",
    "SimulatedVenueSource",
    "default_prediction_sources",
]
