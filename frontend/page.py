"""The event finder page: search, render and recommend on a parsed document."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import requests
from bs4 import BeautifulSoup, Tag

from upstream.schemas import events_from_search

from . import render
from .backend_client import BackendClient, BackendError
from .location import Geolocator, LocationError, acquire_location
from .reveal import RevealWatcher

DEFAULT_PAGE = Path(__file__).resolve().parent.parent / "static" / "index.html"

RECOMMENDATION_PLACEHOLDER = "Your AI recommendation will appear here."
NO_RESULTS = (
    "No events found for your current location and search criteria. "
    "Try a different keyword or adjust the radius."
)
INVALID_RADIUS = "Please enter a valid positive number for the search radius."

logger = logging.getLogger(__name__)


def parse_radius(value: Any) -> Optional[int]:
    """Return ``value`` as a positive integer, or ``None`` if it is not one."""
    try:
        radius = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return radius if radius > 0 else None


class EventFinderPage:
    """Holds the page document and the most recently fetched events."""

    def __init__(
        self,
        document: BeautifulSoup,
        backend: BackendClient,
        geolocator: Optional[Geolocator] = None,
        watcher: Optional[RevealWatcher] = None,
    ):
        self.document = document
        self.backend = backend
        self.geolocator = geolocator
        self.watcher = watcher or RevealWatcher()
        self.fetched_events: list[dict[str, Any]] = []

    @classmethod
    def load(cls, backend: BackendClient, geolocator: Optional[Geolocator] = None, path: Path = DEFAULT_PAGE):
        document = BeautifulSoup(Path(path).read_text(encoding="utf-8"), "html.parser")
        return cls(document, backend, geolocator)

    def _element(self, element_id: str) -> Tag:
        tag = self.document.find(id=element_id)
        if tag is None:
            raise LookupError(f"Page has no element with id {element_id!r}")
        return tag

    @property
    def results(self) -> Tag:
        return self._element("eventResults")

    @property
    def recommendation_section(self) -> Tag:
        return self._element("geminiSection")

    @property
    def recommendation_box(self) -> Tag:
        return self._element("geminiRecommendation")

    @property
    def recommendation_visible(self) -> bool:
        return not render.has_class(self.recommendation_section, "hidden")

    def _replace(self, region: Tag, content: Tag) -> None:
        region.clear()
        region.append(content)

    def _show_results_message(self, text: str, *, error: bool = False) -> None:
        self._replace(self.results, render.message(self.document, text, error=error))

    def _hide_recommendation(self) -> None:
        render.add_class(self.recommendation_section, "hidden")

    def search_and_render(self, keyword: str = "", radius: Any = "") -> None:
        """Locate the user, search nearby events and render them as a list."""
        self._show_results_message("Getting your current location...")
        self._hide_recommendation()
        self._replace(self.recommendation_box, render.message(self.document, RECOMMENDATION_PLACEHOLDER))

        try:
            position = acquire_location(self.geolocator)
        except LocationError as exc:
            logger.error("Geolocation error: %s", exc)
            self._show_results_message(
                f"Error getting your location: {exc}. Please allow location access and try again.",
                error=True,
            )
            return
        self._show_results_message("Location obtained. Searching for events from backend...")

        keyword = (keyword or "").strip()
        parsed_radius = parse_radius(radius)
        if parsed_radius is None:
            self._show_results_message(INVALID_RADIUS, error=True)
            return

        try:
            data = self.backend.search_events(position.latitude, position.longitude, parsed_radius, keyword)
        except (BackendError, requests.RequestException, ValueError) as exc:
            logger.error("Error fetching data from backend: %s", exc)
            self._show_results_message(f"Error: {exc}. Check console for details.", error=True)
            return

        self.results.clear()
        for stale in self.watcher.watched():
            self.watcher.unobserve(stale)
        self.fetched_events = events_from_search(data)
        if not self.fetched_events:
            self._show_results_message(NO_RESULTS)
            return

        ul = render.event_list(self.document, self.fetched_events)
        for li in ul.find_all("li", recursive=False):
            self.watcher.observe(li, render.reveal)
        self.results.append(ul)
        render.remove_class(self.recommendation_section, "hidden")

    def request_recommendation(self, preferences: str) -> None:
        """Ask the proxy to pick one of the fetched events and render the answer."""
        preferences = (preferences or "").strip()
        box = self.recommendation_box

        if not preferences:
            self._replace(box, render.message(self.document, "Please enter your event preferences.", error=True))
            return
        if not self.fetched_events:
            self._replace(
                box,
                render.message(
                    self.document,
                    "Please find events first before getting an AI recommendation.",
                    error=True,
                ),
            )
            return

        self._replace(box, render.message(self.document, "Getting AI recommendation..."))
        try:
            text = self.backend.recommend(preferences, self.fetched_events)
        except (BackendError, requests.RequestException, ValueError) as exc:
            logger.error("Error getting AI recommendation: %s", exc)
            self._replace(box, render.message(self.document, f"Error: {exc}. Please try again.", error=True))
            return

        if text:
            self._replace(box, render.recommendation(self.document, text))
        else:
            self._replace(
                box, render.message(self.document, "Could not get a valid AI recommendation.", error=True)
            )

    def scroll_into_view(self, visible_ratio: float = 1.0) -> int:
        """Report every watched item as visible; return how many were revealed."""
        return sum(self.watcher.notify(item, visible_ratio) for item in self.watcher.watched())
