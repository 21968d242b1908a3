"""Tests for the proxy endpoints."""

import pytest
import requests
from fastapi.testclient import TestClient
from unittest.mock import Mock
from urllib.parse import parse_qs, urlparse
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from api.main import create_app, parse_search_query
from api.settings import Settings
from upstream.errors import ValidationError


def fake_response(status=200, json_data=None, text=""):
    resp = Mock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.text = text
    resp.json.return_value = json_data
    return resp


SEARCH_PAYLOAD = {
    "_embedded": {
        "events": [
            {
                "name": "Jazz Night",
                "url": "https://example.com/jazz",
                "dates": {"start": {"localDate": "2025-08-10"}},
                "_embedded": {"venues": [{"name": "Town Park"}]},
            },
            {"name": "Mystery Show", "url": "https://example.com/mystery"},
        ]
    },
    "page": {"size": 10, "totalElements": 2},
}

GEMINI_PAYLOAD = {
    "candidates": [
        {"content": {"parts": [{"text": "Recommendation: Jazz Night\nReason: You like jazz."}]}}
    ]
}


@pytest.fixture
def session():
    return Mock()


@pytest.fixture
def client(session):
    settings = Settings(ticketmaster_api_key="tm-key", gemini_api_key="gm-key")
    return TestClient(create_app(settings, session=session))


@pytest.fixture
def unconfigured_client(session):
    return TestClient(create_app(Settings(), session=session))


def test_health_endpoint(client):
    """Test the health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "timestamp" in data
    assert "version" in data


def test_static_index_is_served(client):
    response = client.get("/")
    assert response.status_code == 200
    assert 'id="findEventsButton"' in response.text


@pytest.mark.parametrize("params", [{}, {"lat": "42.3"}, {"lon": "-71.1"}, {"lat": "", "lon": "-71.1"}])
def test_search_requires_coordinates(client, session, params):
    response = client.get("/api/places/search", params=params)

    assert response.status_code == 400
    assert response.json()["message"] == "Latitude (lat) and Longitude (lon) are required."
    session.get.assert_not_called()


@pytest.mark.parametrize("radius", ["0", "-5", "ten", "2.5"])
def test_search_rejects_bad_radius(client, session, radius):
    response = client.get("/api/places/search", params={"lat": "42.3", "lon": "-71.1", "radius": radius})

    assert response.status_code == 400
    session.get.assert_not_called()


def test_search_without_credential(unconfigured_client, session):
    response = unconfigured_client.get("/api/places/search", params={"lat": "42.3", "lon": "-71.1"})

    assert response.status_code == 500
    assert "Ticketmaster API key missing" in response.json()["message"]
    session.get.assert_not_called()


def test_search_relays_upstream_body(client, session):
    session.get.return_value = fake_response(200, SEARCH_PAYLOAD)

    response = client.get(
        "/api/places/search",
        params={"lat": "42.3", "lon": "-71.1", "radius": "25", "keyword": "jazz"},
    )

    assert response.status_code == 200
    assert response.json() == SEARCH_PAYLOAD
    url = session.get.call_args[0][0]
    query = parse_qs(urlparse(url).query)
    assert query["apikey"] == ["tm-key"]
    assert query["latlong"] == ["42.3,-71.1"]
    assert query["radius"] == ["25"]
    assert query["unit"] == ["miles"]
    assert query["size"] == ["10"]


def test_search_keyword_round_trip(client, session):
    keyword = "rock & roll/jazz?=100%"
    session.get.return_value = fake_response(200, {})

    client.get("/api/places/search", params={"lat": "1", "lon": "2", "keyword": keyword})

    url = session.get.call_args[0][0]
    assert "rock+%26+roll%2Fjazz%3F%3D100%25" in url
    assert parse_qs(urlparse(url).query)["keyword"] == [keyword]


def test_search_omits_optional_parameters(client, session):
    session.get.return_value = fake_response(200, {})

    client.get("/api/places/search", params={"lat": "1", "lon": "2"})

    query = parse_qs(urlparse(session.get.call_args[0][0]).query)
    assert "keyword" not in query
    assert "radius" not in query


def test_search_upstream_error_is_propagated(client, session):
    session.get.return_value = fake_response(401, text='{"fault": "Invalid ApiKey"}')

    response = client.get("/api/places/search", params={"lat": "1", "lon": "2"})

    assert response.status_code == 401
    assert response.json() == {
        "message": "Error fetching data from Ticketmaster API",
        "details": '{"fault": "Invalid ApiKey"}',
    }


def test_search_transport_failure(client, session):
    session.get.side_effect = requests.ConnectionError("connection refused")

    response = client.get("/api/places/search", params={"lat": "1", "lon": "2"})

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error", "error": "connection refused"}


def test_search_relays_non_object_body(client, session):
    session.get.return_value = fake_response(200, [1, 2])

    response = client.get("/api/places/search", params={"lat": "1", "lon": "2"})

    assert response.status_code == 200
    assert response.json() == [1, 2]


@pytest.mark.parametrize("lat,lon", [("nan", "2"), ("1", "inf"), ("-inf", "nan")])
def test_search_rejects_non_finite_coordinates(client, session, lat, lon):
    response = client.get("/api/places/search", params={"lat": lat, "lon": lon})

    assert response.status_code == 400
    assert response.json()["message"] == "Latitude (lat) and Longitude (lon) must be numbers."
    session.get.assert_not_called()


def test_identical_searches_are_not_cached(client, session):
    session.get.return_value = fake_response(200, SEARCH_PAYLOAD)
    params = {"lat": "42.3", "lon": "-71.1", "radius": "10"}

    first = client.get("/api/places/search", params=params)
    second = client.get("/api/places/search", params=params)

    assert first.json() == second.json() == SEARCH_PAYLOAD
    assert session.get.call_count == 2


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"preferences": "jazz"},
        {"preferences": "jazz", "events": []},
        {"preferences": "", "events": [{"name": "A"}]},
        {"preferences": "   ", "events": [{"name": "A"}]},
        {"events": [{"name": "A"}]},
    ],
)
def test_recommend_requires_preferences_and_events(client, session, body):
    response = client.post("/api/gemini/recommend", json=body)

    assert response.status_code == 400
    assert response.json()["message"] == "Preferences and a list of events are required."
    session.post.assert_not_called()


def test_recommend_rejects_malformed_body(client, session):
    response = client.post("/api/gemini/recommend", json={"preferences": "jazz", "events": "nope"})

    assert response.status_code == 400
    session.post.assert_not_called()


def test_recommend_without_credential(unconfigured_client, session):
    response = unconfigured_client.post(
        "/api/gemini/recommend", json={"preferences": "jazz", "events": [{"name": "A"}]}
    )

    assert response.status_code == 500
    assert "Gemini API key missing" in response.json()["message"]
    session.post.assert_not_called()


def test_recommend_success(client, session):
    session.post.return_value = fake_response(200, GEMINI_PAYLOAD)

    response = client.post(
        "/api/gemini/recommend",
        json={"preferences": "I love jazz", "events": SEARCH_PAYLOAD["_embedded"]["events"]},
    )

    assert response.status_code == 200
    assert response.json() == {"recommendation": "Recommendation: Jazz Night\nReason: You like jazz."}

    args, kwargs = session.post.call_args
    assert args[0].endswith("/models/gemini-2.0-flash:generateContent")
    assert kwargs["params"] == {"key": "gm-key"}
    contents = kwargs["json"]["contents"]
    assert len(contents) == 1
    assert contents[0]["role"] == "user"
    prompt = contents[0]["parts"][0]["text"]
    assert '"I love jazz"' in prompt
    assert "- Jazz Night on 2025-08-10 at Town Park" in prompt
    assert "- Mystery Show on Date N/A at Venue N/A" in prompt


def test_recommend_transport_failure(client, session):
    session.post.side_effect = requests.Timeout("read timed out")

    response = client.post("/api/gemini/recommend", json={"preferences": "jazz", "events": [{"name": "A"}]})

    assert response.status_code == 500
    assert response.json() == {
        "message": "Internal server error during AI recommendation",
        "error": "read timed out",
    }


def test_recommend_relays_empty_text(client, session):
    session.post.return_value = fake_response(200, {"candidates": [{"content": {"parts": [{"text": ""}]}}]})

    response = client.post("/api/gemini/recommend", json={"preferences": "jazz", "events": [{"name": "A"}]})

    assert response.status_code == 200
    assert response.json() == {"recommendation": ""}


def test_recommend_without_candidates(client, session):
    session.post.return_value = fake_response(200, {"candidates": []})

    response = client.post("/api/gemini/recommend", json={"preferences": "jazz", "events": [{"name": "A"}]})

    assert response.status_code == 500
    assert response.json() == {"message": "Could not get a valid recommendation from AI."}


def test_recommend_upstream_error_is_propagated(client, session):
    session.post.return_value = fake_response(429, text="quota exceeded")

    response = client.post("/api/gemini/recommend", json={"preferences": "jazz", "events": [{"name": "A"}]})

    assert response.status_code == 429
    assert response.json() == {"message": "Error from Gemini API", "details": "quota exceeded"}


def test_parse_search_query_values():
    query = parse_search_query("42.36", "-71.06", "", "15")
    assert query.latitude == 42.36
    assert query.longitude == -71.06
    assert query.keyword is None
    assert query.radius == 15


def test_parse_search_query_rejects_non_numeric_coordinates():
    with pytest.raises(ValidationError):
        parse_search_query("north", "-71.06")


@pytest.mark.parametrize("lat", ["nan", "inf", "-inf"])
def test_parse_search_query_rejects_non_finite_coordinates(lat):
    with pytest.raises(ValidationError):
        parse_search_query(lat, "-71.06")
