"""Event records decoded from Ticketmaster Discovery API payloads."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .fields import dig, first_match

DATE_UNAVAILABLE = "Date N/A"
VENUE_UNAVAILABLE = "Venue N/A"
NO_IMAGE_URL = "https://placehold.co/96x96/e2e8f0/64748b?text=No+Image"
IMAGE_ERROR_URL = "https://placehold.co/96x96/e2e8f0/64748b?text=Image+Error"


@dataclass
class EventRecord:
    """The fields of one event that the finder displays and summarises."""

    name: str
    detail_url: str
    start_date: Optional[str] = None
    venue_name: Optional[str] = None
    image_url: Optional[str] = None

    @classmethod
    def from_ticketmaster(cls, raw: dict[str, Any]) -> "EventRecord":
        """Decode a raw ``_embedded.events[]`` entry, tolerating missing fields."""
        wide = first_match(
            dig(raw, "images"),
            lambda img: isinstance(img, dict)
            and img.get("ratio") == "16_9"
            and isinstance(img.get("width"), (int, float))
            and img["width"] >= 200,
        )
        image_url = dig(wide, "url") or dig(raw, "images", 0, "url")
        return cls(
            name=str(dig(raw, "name", default="")),
            detail_url=str(dig(raw, "url", default="")),
            start_date=dig(raw, "dates", "start", "localDate"),
            venue_name=dig(raw, "_embedded", "venues", 0, "name"),
            image_url=image_url,
        )

    @property
    def date_label(self) -> str:
        return self.start_date or DATE_UNAVAILABLE

    @property
    def venue_label(self) -> str:
        return self.venue_name or VENUE_UNAVAILABLE

    @property
    def image_src(self) -> str:
        return self.image_url or NO_IMAGE_URL


def events_from_search(payload: Any) -> list[dict[str, Any]]:
    """Return the raw event list of a search response, or ``[]`` when absent."""
    events = dig(payload, "_embedded", "events", default=[])
    return events if isinstance(events, list) else []
