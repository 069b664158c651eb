"""
arbwatch - opportunity detection and decision engine.

Polls crypto-signal, sports-odds and prediction-market sources, scores
what they find and executes qualifying opportunities in simulation.
"""

__version__ = "0.1.0"
