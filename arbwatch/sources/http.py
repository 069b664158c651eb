"""
HTTP JSON source adapter.

Lets a real feed replace a simulated source without touching monitor or
evaluator code: fetch a JSON document, hand it to a parser, return the
parsed candidates.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import httpx

from arbwatch.errors import SourceFetchError
from arbwatch.logger import get_logger
from arbwatch.models import BookmakerOdds, SportsEvent, utcnow
from arbwatch.sources.base import BaseSource


logger = get_logger("http_source")


class HttpJsonSource(BaseSource):
    """Polls a JSON endpoint and maps the body to candidates."""

    def __init__(
        self,
        name: str,
        url: str,
        parser: Callable[[Any], List[Any]],
        params: Optional[Dict[str, Any]] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(name)
        self.url = url
        self.parser = parser
        self.params = params or {}
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def connect(self) -> None:
        """Initialize HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        self._is_connected = True
        logger.debug("HTTP source connected", source=self.name, url=self.url)

    async def disconnect(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._is_connected = False

    async def fetch_candidates(self) -> List[Any]:
        if self._client is None:
            await self.connect()

        try:
            response = await self._client.get(self.url, params=self.params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise SourceFetchError(self.name, f"request failed: {e}", cause=e) from e
        except ValueError as e:
            raise SourceFetchError(self.name, f"invalid JSON: {e}", cause=e) from e

        try:
            return list(self.parser(data))
        except (KeyError, TypeError, ValueError) as e:
            raise SourceFetchError(self.name, f"unexpected payload: {e}", cause=e) from e


def _parse_time(value: Any) -> datetime:
    if not value:
        return utcnow()
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def parse_sports_events(data: Any) -> List[SportsEvent]:
    """
    Map an odds feed document to SportsEvents.

    Accepts either a bare list or {"events": [...]}, each event shaped as
    {"id", "sport", "description", "startTime",
     "odds": {bookmaker: {"outcome1": float, "outcome2": float}}}.
    """
    if isinstance(data, dict):
        data = data.get("events", [])

    events = []
    for item in data:
        odds = {
            str(bookmaker): BookmakerOdds(
                outcome1=float(prices["outcome1"]),
                outcome2=float(prices["outcome2"]),
            )
            for bookmaker, prices in (item.get("odds") or {}).items()
        }
        events.append(SportsEvent(
            event_id=str(item["id"]),
            sport=item.get("sport", "Unknown"),
            description=item.get("description", str(item["id"])),
            start_time=_parse_time(item.get("startTime")),
            odds=odds,
        ))
    return events
