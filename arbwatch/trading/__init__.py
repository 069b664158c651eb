"""
Simulated execution of opportunities.
"""

from arbwatch.trading.executor import ExecutionLog, SimulatedExecutor

__all__ = [
    "ExecutionLog",
    "SimulatedExecutor",
]
