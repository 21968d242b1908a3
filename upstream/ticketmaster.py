"""Client for the Ticketmaster Discovery API event search."""
from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import urlencode

import requests

from .errors import ConfigurationError, TransportError, UpstreamError

DISCOVERY_URL = "https://app.ticketmaster.com/discovery/v2/events.json"
RESULT_SIZE = 10
DISTANCE_UNIT = "miles"

logger = logging.getLogger(__name__)


def build_search_url(
    api_key: str,
    lat: float,
    lon: float,
    keyword: Optional[str] = None,
    radius: Optional[int] = None,
    *,
    base_url: str = DISCOVERY_URL,
    size: int = RESULT_SIZE,
    unit: str = DISTANCE_UNIT,
) -> str:
    """Return the Discovery API search URL with every parameter percent-encoded."""
    params: dict[str, Any] = {"apikey": api_key, "latlong": f"{lat},{lon}"}
    if keyword:
        params["keyword"] = keyword
    if radius:
        params["radius"] = radius
    params["unit"] = unit
    params["size"] = size
    return f"{base_url}?{urlencode(params, safe=',')}"


class TicketmasterClient:
    """Searches events near a coordinate through a shared HTTP session."""

    def __init__(
        self,
        session: requests.Session,
        api_key: Optional[str],
        *,
        base_url: str = DISCOVERY_URL,
        timeout: Optional[float] = None,
    ):
        self.session = session
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout

    def search(
        self,
        lat: float,
        lon: float,
        keyword: Optional[str] = None,
        radius: Optional[int] = None,
    ) -> Any:
        """Return the upstream JSON body for a search, unmodified.

        Raises ``ConfigurationError`` without a credential, ``UpstreamError``
        on a non-success status and ``TransportError`` if no response arrives.
        """
        if not self.api_key:
            logger.error("TICKETMASTER_API_KEY is not set")
            raise ConfigurationError("Server configuration error: Ticketmaster API key missing.")

        url = build_search_url(self.api_key, lat, lon, keyword, radius, base_url=self.base_url)
        logger.info("Fetching from Ticketmaster: %s", url.replace(self.api_key, "***"))
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Error in Ticketmaster fetch: %s", exc)
            raise TransportError("Internal server error", exc) from exc

        if not response.ok:
            logger.error("Ticketmaster API error: %s - %s", response.status_code, response.text)
            raise UpstreamError(
                "Error fetching data from Ticketmaster API",
                status_code=response.status_code,
                body=response.text,
            )
        return response.json()
