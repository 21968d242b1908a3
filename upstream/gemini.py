"""Ask Gemini to pick one event from a list given the user's preferences."""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

import requests

from .errors import ConfigurationError, ParseError, TransportError, UpstreamError
from .fields import dig
from .schemas import EventRecord

API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.0-flash"

PROMPT_TEMPLATE = (
    "You are a helpful event recommendation assistant.\n"
    'The user has the following preferences for an event: "{preferences}".\n'
    "Here is a list of nearby events:\n"
    "{events}\n"
    "\n"
    "Please recommend ONE event from the list that best fits the user's preferences.\n"
    "Explain briefly why you recommend it.\n"
    "Your response should be concise and directly state the recommendation and reason.\n"
    "Example:\n"
    "Recommendation: [Event Name]\n"
    "Reason: [Brief explanation]"
)

logger = logging.getLogger(__name__)


def format_events(events: Iterable[dict[str, Any]]) -> str:
    """Return one ``- name on date at venue`` line per event."""
    lines = []
    for raw in events:
        record = EventRecord.from_ticketmaster(raw if isinstance(raw, dict) else {})
        lines.append(f"- {record.name} on {record.date_label} at {record.venue_label}")
    return "\n".join(lines)


def build_prompt(preferences: str, events: Iterable[dict[str, Any]]) -> str:
    return PROMPT_TEMPLATE.format(preferences=preferences, events=format_events(events))


def extract_text(result: Any) -> str:
    """Return the first candidate's first text part.

    An empty string is a valid answer; ``ParseError`` is raised only when
    the response has no such part.
    """
    part = dig(result, "candidates", 0, "content", "parts", 0, default={})
    text = part.get("text") if isinstance(part, dict) else None
    if not isinstance(text, str):
        logger.error("Unexpected Gemini API response structure: %s", result)
        raise ParseError("Could not get a valid recommendation from AI.")
    return text


class GeminiClient:
    """Single-turn ``generateContent`` calls through a shared HTTP session."""

    def __init__(
        self,
        session: requests.Session,
        api_key: Optional[str],
        *,
        model: str = DEFAULT_MODEL,
        base_url: str = API_BASE_URL,
        timeout: Optional[float] = None,
    ):
        self.session = session
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def generate(self, prompt: str) -> str:
        """Send ``prompt`` as the only conversation turn and return the reply text."""
        if not self.api_key:
            logger.error("GEMINI_API_KEY is not set")
            raise ConfigurationError("Server configuration error: Gemini API key missing.")

        payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        logger.info("POST %s (%d prompt chars)", self.endpoint, len(prompt))
        try:
            response = self.session.post(
                self.endpoint,
                params={"key": self.api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Error in Gemini fetch: %s", exc)
            raise TransportError("Internal server error during AI recommendation", exc) from exc

        if not response.ok:
            logger.error("Gemini API error: %s - %s", response.status_code, response.text)
            raise UpstreamError("Error from Gemini API", status_code=response.status_code, body=response.text)
        return extract_text(response.json())

    def recommend(self, preferences: str, events: list[dict[str, Any]]) -> str:
        return self.generate(build_prompt(preferences, events))
