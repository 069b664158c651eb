"""
Source monitors: crypto launches, sports odds and prediction markets.
"""

from arbwatch.monitors.base import BaseMonitor
from arbwatch.monitors.crypto import CryptoMonitor
from arbwatch.monitors.sports import SportsArbitrageMonitor, default_sports_sources
from arbwatch.monitors.prediction import PredictionMarketMonitor

__all__ = [
    "BaseMonitor",
    "CryptoMonitor",
    "SportsArbitrageMonitor",
    "PredictionMarketMonitor",
    "default_sports_sources",
]
