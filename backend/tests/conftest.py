"""Pytest configuration and shared fixtures."""

import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import Mock

import pytest
import pytz

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from skytonight.core.config import get_settings  # noqa: E402

# 20:00 UTC on the winter solstice 2025
FIXED_NOW = datetime(2025, 12, 21, 20, 0, tzinfo=pytz.UTC)


def _make_response(payload=None, status_code=200, reason="OK", text=""):
    """Build a mock ``requests`` response."""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = reason
    response.text = text
    response.json.return_value = payload
    return response


def _usno_day(sundata, moondata=None, **extra):
    """Build a USNO rstt/oneday payload."""
    data = {"sundata": sundata, "day": 21, "month": 12, "year": 2025, "tz": 0}
    if moondata is not None:
        data["moondata"] = moondata
    data.update(extra)
    return {
        "apiversion": "4.0.1",
        "geometry": {"coordinates": [-104.9903, 39.7392], "type": "Point"},
        "properties": {"data": data},
        "type": "Feature",
    }


@pytest.fixture
def make_response():
    """Factory for mock ``requests`` responses."""
    return _make_response


@pytest.fixture
def usno_day():
    """Factory for USNO rstt/oneday payloads."""
    return _usno_day


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached; reset around each test so env changes apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def today_payload():
    """Denver, 2025-12-21: sun and moon with moonset after midnight."""
    return _usno_day(
        sundata=[
            {"phen": "Begin Civil Twilight", "time": "06:05"},
            {"phen": "Rise", "time": "06:34"},
            {"phen": "Upper Transit", "time": "11:08"},
            {"phen": "Set", "time": "15:42"},
            {"phen": "End Civil Twilight", "time": "16:11"},
        ],
        moondata=[
            {"phen": "Rise", "time": "08:00"},
            {"phen": "Upper Transit", "time": "13:10"},
            {"phen": "Set", "time": "02:00"},
        ],
        curphase="Waxing Crescent",
        fracillum="3%",
    )


@pytest.fixture
def tomorrow_payload():
    return _usno_day(
        sundata=[
            {"phen": "Rise", "time": "06:35"},
            {"phen": "Set", "time": "15:43"},
        ]
    )


@pytest.fixture
def celnav_payload():
    """USNO celnav payload with bodies on and off the allow-list."""
    return {
        "apiversion": "4.0.1",
        "properties": {
            "data": [
                {"object": "Sun", "almanac_data": {"hc": -20.1, "zn": 250.0}},
                {"object": "Moon", "almanac_data": {"hc": 30.0, "zn": 200.0}},
                {"object": "Venus", "almanac_data": {"hc": 12.5, "zn": 235.1}},
                {"object": "Jupiter", "almanac_data": {"hc": 45.3, "zn": 95.0}},
                {"object": "Vega", "star_number": 49, "almanac_data": {"hc": 35.0, "zn": 300.2}},
                {"object": "Kochab", "star_number": 40, "almanac_data": {"hc": 25.0, "zn": 5.0}},
                {"object": "Mars", "almanac_data": {"hc": -5.0, "zn": 120.0}},
            ]
        },
        "type": "Feature",
    }


@pytest.fixture
def usno_router(today_payload, tomorrow_payload, celnav_payload):
    """Side effect for ``requests.get`` answering each USNO endpoint."""

    def route(url, params=None, timeout=None):
        if url.endswith("/celnav"):
            return _make_response(celnav_payload)
        if params and params.get("date") == "2025-12-22":
            return _make_response(tomorrow_payload)
        return _make_response(today_payload)

    return route


@pytest.fixture
def sky_object_dicts():
    """Sky objects as the front-end sends them to the chat endpoint."""
    return [
        {
            "id": "venus",
            "name": "Venus",
            "type": "planet",
            "visibility": "ok",
            "riseTime": "2025-12-21T14:00:00Z",
            "setTime": "2025-12-22T02:00:00Z",
            "note": "Low in the southwest after sunset.",
        },
        {
            "id": "jupiter",
            "name": "Jupiter",
            "type": "planet",
            "visibility": "good",
            "riseTime": "2025-12-21T19:03:00Z",
            "setTime": "2025-12-22T06:15:00Z",
            "note": "Bright in the southeast after sunset.",
        },
        {
            "id": "moon",
            "name": "Moon",
            "type": "other",
            "visibility": "good",
            "riseTime": "2025-12-21T08:00:00Z",
            "setTime": "2025-12-22T02:00:00Z",
            "note": "Moonrise at 08:00 / Moonset at 02:00 (Waxing Crescent, 3% illuminated)",
        },
    ]


@pytest.fixture
def chat_body(sky_object_dicts):
    """A valid Stella chat request body."""
    return {
        "location": "Denver, Colorado, USA",
        "date": "2025-12-21",
        "objects": sky_object_dicts,
        "messages": [
            {"role": "assistant", "content": "Hi, I'm Stella. What would you like to know about tonight's sky?"},
            {"role": "user", "content": "What should I look at first?"},
        ],
    }
