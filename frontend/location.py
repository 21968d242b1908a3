"""Single-shot location acquisition with user-facing error messages."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

import requests

PERMISSION_DENIED = 1
POSITION_UNAVAILABLE = 2
TIMEOUT = 3

UNSUPPORTED_MESSAGE = "Geolocation is not supported by this browser."

_HINTS = {
    PERMISSION_DENIED: " Please allow location access in your browser settings.",
    POSITION_UNAVAILABLE: " Location information is unavailable.",
    TIMEOUT: " The request to get user location timed out.",
}


@dataclass
class Coordinates:
    latitude: float
    longitude: float


@dataclass
class PositionOptions:
    enable_high_accuracy: bool = True
    timeout: float = 10.0
    # Seconds a cached position may be reused; 0 forces a fresh fix.
    maximum_age: float = 0


class PositionError(Exception):
    """Raised by a geolocator with one of the ``PERMISSION_DENIED``/... codes."""

    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class LocationError(Exception):
    """Location could not be acquired; ``str()`` is shown to the user."""


class Geolocator(Protocol):
    def get_current_position(self, options: PositionOptions) -> Coordinates: ...


def describe_position_error(error: PositionError) -> str:
    return f"Geolocation error: {error.message}." + _HINTS.get(error.code, "")


def acquire_location(
    geolocator: Optional[Geolocator], options: Optional[PositionOptions] = None
) -> Coordinates:
    """Request one fresh position, raising ``LocationError`` on any failure."""
    if geolocator is None:
        raise LocationError(UNSUPPORTED_MESSAGE)
    try:
        return geolocator.get_current_position(options or PositionOptions())
    except PositionError as exc:
        raise LocationError(describe_position_error(exc)) from exc


class FixedGeolocator:
    """Always reports the coordinates it was given."""

    def __init__(self, latitude: float, longitude: float):
        self.coordinates = Coordinates(latitude, longitude)

    def get_current_position(self, options: PositionOptions) -> Coordinates:
        return self.coordinates


class IPGeolocator:
    """Approximate the position from the caller's public IP address."""

    def __init__(self, url: str = "http://ip-api.com/json", session: Optional[requests.Session] = None):
        self.url = url
        self.session = session or requests.Session()

    def get_current_position(self, options: PositionOptions) -> Coordinates:
        try:
            resp = self.session.get(
                self.url,
                params={"fields": "status,message,lat,lon"},
                timeout=options.timeout,
            )
        except requests.Timeout as exc:
            raise PositionError(TIMEOUT, "Timeout expired") from exc
        except requests.RequestException as exc:
            raise PositionError(POSITION_UNAVAILABLE, str(exc)) from exc

        if resp.status_code in (401, 403):
            raise PositionError(PERMISSION_DENIED, "User denied Geolocation")
        if not resp.ok:
            raise PositionError(POSITION_UNAVAILABLE, f"Lookup failed with status {resp.status_code}")

        data = resp.json()
        if data.get("status") != "success" or data.get("lat") is None or data.get("lon") is None:
            raise PositionError(POSITION_UNAVAILABLE, data.get("message") or "Position unavailable")
        return Coordinates(float(data["lat"]), float(data["lon"]))
