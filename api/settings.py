"""Environment configuration for the Event Finder proxy."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from upstream.gemini import DEFAULT_MODEL

load_dotenv()


def _optional_float(value: Optional[str]) -> Optional[float]:
    return float(value) if value else None


@dataclass
class Settings:
    """Deployment settings; credentials are checked per request, not here."""

    ticketmaster_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_MODEL
    port: int = 3000
    static_dir: str = "static"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    upstream_timeout: Optional[float] = None

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            ticketmaster_api_key=os.getenv("TICKETMASTER_API_KEY") or None,
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
            port=int(os.getenv("PORT", "3000")),
            static_dir=os.getenv("STATIC_DIR", "static"),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            upstream_timeout=_optional_float(os.getenv("UPSTREAM_TIMEOUT")),
        )
