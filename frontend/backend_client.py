"""Client for the Event Finder proxy endpoints."""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from . import config

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """The proxy answered with a non-success status."""

    def __init__(self, status: int, details: str):
        super().__init__(f"HTTP error! status: {status}, details: {details}")
        self.status = status
        self.details = details


class BackendClient:
    """Calls ``/api/places/search`` and ``/api/gemini/recommend`` on one base URL."""

    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None):
        self.base_url = (base_url or config.BACKEND_URL).rstrip("/")
        self.session = session or requests.Session()

    def _check(self, response: requests.Response) -> None:
        if not response.ok:
            raise BackendError(response.status_code, response.text)

    def search_events(
        self, lat: float, lon: float, radius: int, keyword: Optional[str] = None
    ) -> dict[str, Any]:
        """Return the raw search response relayed by the proxy."""
        params: dict[str, Any] = {"lat": lat, "lon": lon, "radius": radius}
        if keyword:
            params["keyword"] = keyword
        url = f"{self.base_url}/api/places/search"
        logger.info("GET %s %s", url, params)
        response = self.session.get(url, params=params)
        self._check(response)
        return response.json()

    def recommend(self, preferences: str, events: list[dict[str, Any]]) -> Optional[str]:
        """Return the recommendation text, or ``None`` if the reply carries none."""
        url = f"{self.base_url}/api/gemini/recommend"
        logger.info("POST %s (%d events)", url, len(events))
        response = self.session.post(url, json={"preferences": preferences, "events": events})
        self._check(response)
        return response.json().get("recommendation")
