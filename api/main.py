"""FastAPI application for the Event Finder proxy."""
import logging
import math
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

import requests
from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from api.errors import register_error_handlers
from api.settings import Settings
from upstream.errors import ValidationError
from upstream.gemini import GeminiClient
from upstream.ticketmaster import TicketmasterClient

VERSION = "1.0.0"
BASE_PATH = Path(__file__).resolve().parent.parent

logger = logging.getLogger(__name__)


class SearchQuery(BaseModel):
    """Validated search parameters."""
    latitude: float
    longitude: float
    keyword: Optional[str] = None
    radius: Optional[int] = None


class RecommendRequest(BaseModel):
    """Request model for an AI recommendation.

    Both fields are optional here so that missing values surface as the
    endpoint's own 400 rather than a schema error.
    """
    preferences: Optional[str] = None
    events: Optional[List[Any]] = None


class RecommendResponse(BaseModel):
    recommendation: str


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    timestamp: str
    version: str


def parse_search_query(
    lat: Optional[str],
    lon: Optional[str],
    keyword: Optional[str] = None,
    radius: Optional[str] = None,
) -> SearchQuery:
    """Validate raw query-string values into a ``SearchQuery``."""
    if not lat or not lon:
        raise ValidationError("Latitude (lat) and Longitude (lon) are required.")
    try:
        latitude, longitude = float(lat), float(lon)
    except ValueError:
        raise ValidationError("Latitude (lat) and Longitude (lon) must be numbers.")
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise ValidationError("Latitude (lat) and Longitude (lon) must be numbers.")

    parsed_radius = None
    if radius:
        try:
            parsed_radius = int(radius)
        except ValueError:
            parsed_radius = 0
        if parsed_radius <= 0:
            raise ValidationError("Radius must be a positive integer.")

    return SearchQuery(
        latitude=latitude,
        longitude=longitude,
        keyword=keyword or None,
        radius=parsed_radius,
    )


def get_ticketmaster(request: Request) -> TicketmasterClient:
    return request.app.state.ticketmaster


def get_gemini(request: Request) -> GeminiClient:
    return request.app.state.gemini


def create_app(settings: Optional[Settings] = None, session: Optional[requests.Session] = None) -> FastAPI:
    """Build the application with one outbound HTTP session shared by both upstreams."""
    settings = settings or Settings.from_env()
    session = session or requests.Session()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        session.close()

    app = FastAPI(
        title="Event Finder API",
        description="Proxy for nearby event search and AI event recommendations",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.ticketmaster = TicketmasterClient(
        session, settings.ticketmaster_api_key, timeout=settings.upstream_timeout
    )
    app.state.gemini = GeminiClient(
        session,
        settings.gemini_api_key,
        model=settings.gemini_model,
        timeout=settings.upstream_timeout,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    @app.get("/health", response_model=HealthResponse)
    def health_check():
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(timezone.utc).isoformat(),
            version=VERSION,
        )

    @app.get("/api/places/search", response_model=None)
    def search_events(
        lat: Optional[str] = Query(None),
        lon: Optional[str] = Query(None),
        keyword: Optional[str] = Query(None),
        radius: Optional[str] = Query(None),
        ticketmaster: TicketmasterClient = Depends(get_ticketmaster),
    ) -> Any:
        """Relay a Ticketmaster event search near ``lat``/``lon`` unmodified."""
        query = parse_search_query(lat, lon, keyword, radius)
        return ticketmaster.search(query.latitude, query.longitude, query.keyword, query.radius)

    @app.post("/api/gemini/recommend", response_model=RecommendResponse)
    def recommend_event(
        request: RecommendRequest,
        gemini: GeminiClient = Depends(get_gemini),
    ):
        """
        Ask Gemini to pick one of ``events`` for the user's ``preferences``.

        The events are the raw Ticketmaster entries the client received from
        the search endpoint.
        """
        preferences = (request.preferences or "").strip()
        if not preferences or not request.events:
            raise ValidationError("Preferences and a list of events are required.")
        return RecommendResponse(recommendation=gemini.recommend(preferences, request.events))

    static_dir = Path(settings.static_dir)
    if not static_dir.is_absolute():
        static_dir = BASE_PATH / static_dir
    app.mount("/", StaticFiles(directory=static_dir, html=True, check_dir=False), name="static")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
