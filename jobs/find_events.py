"""Find events near you from the command line and optionally ask for a recommendation."""
from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Optional

from frontend.backend_client import BackendClient
from frontend.location import FixedGeolocator, IPGeolocator
from frontend.page import EventFinderPage

logger = logging.getLogger(__name__)
if os.getenv("EVENT_FINDER_DEBUG"):
    logging.basicConfig(level=logging.INFO, format="%(message)s")


def run(
    radius: str,
    keyword: str = "",
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    preferences: str = "",
    backend_url: Optional[str] = None,
    html_out: Optional[str] = None,
) -> EventFinderPage:
    """Search events near ``lat``/``lon`` (or the IP's location) and print the results."""
    if lat is not None and lon is not None:
        geolocator = FixedGeolocator(lat, lon)
    else:
        logger.info("No coordinates given, looking up position by IP")
        geolocator = IPGeolocator()

    page = EventFinderPage.load(BackendClient(backend_url), geolocator)
    page.search_and_render(keyword=keyword, radius=radius)
    # Nothing scrolls in a snapshot; show every item.
    page.scroll_into_view()

    if page.fetched_events:
        print(f"Found {len(page.fetched_events)} event(s):")
        for item in page.results.find_all("li"):
            print("  •", item.h3.get_text(strip=True), "|", item.p.get_text(strip=True), "|", item.a["href"])
    else:
        print(page.results.get_text(" ", strip=True))

    if preferences:
        page.request_recommendation(preferences)
        print()
        print(page.recommendation_box.get_text("\n", strip=True))

    if html_out:
        Path(html_out).write_text(str(page.document), encoding="utf-8")
        print(f"Wrote page to {html_out}")
    return page


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Find events near you")
    parser.add_argument("--radius", default="25", help="Search radius in miles (default: 25)")
    parser.add_argument("--keyword", default="", help="Optional search keyword")
    parser.add_argument("--lat", type=float, help="Latitude (default: IP lookup)")
    parser.add_argument("--lon", type=float, help="Longitude (default: IP lookup)")
    parser.add_argument("--preferences", default="", help="Ask for an AI recommendation with these preferences")
    parser.add_argument("--backend-url", help="Proxy base URL (default: $EVENT_FINDER_BACKEND_URL)")
    parser.add_argument("--html", dest="html_out", help="Write the rendered page to this file")
    args = parser.parse_args(argv)

    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be given together")

    run(
        radius=args.radius,
        keyword=args.keyword,
        lat=args.lat,
        lon=args.lon,
        preferences=args.preferences,
        backend_url=args.backend_url,
        html_out=args.html_out,
    )


if __name__ == "__main__":
    main()
