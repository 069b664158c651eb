"""
Base class for opportunity sources.
"""

from abc import ABC, abstractmethod
from typing import Any, List


class BaseSource(ABC):
    """
    Abstract base class for anything a monitor can poll.

    A source returns raw candidates in the shape its monitor expects:
    CryptoSignal for the crypto monitor, SportsEvent for the sports monitor
    and MarketQuote for the prediction monitor.
    """

    def __init__(self, name: str):
        self.name = name
        self._is_connected = False

    @property
    def is_connected(self) -> bool:
        return self._is_connected

    async def connect(self) -> None:
        """Establish connection to the data source."""
        self._is_connected = True

    async def disconnect(self) -> None:
        """Close connection to the data source."""
        self._is_connected = False

    @abstractmethod
    async def fetch_candidates(self) -> List[Any]:
        """
        Fetch the current candidates from this source.

        Returns:
            List of candidates, empty when nothing was found

        Raises:
            SourceFetchError: If the source could not be reached or decoded
        """
        pass

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
