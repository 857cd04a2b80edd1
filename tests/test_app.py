"""Tests for the marine weather helpers and the Flask routes."""

from unittest.mock import patch

import pytest
import requests

import app as surf_app
from app import (
    fetch_marine_weather,
    format_measurement_time,
    has_marine_data,
    no_surf_message,
)

FR = "\U0001F1EB\U0001F1F7"

CURRENT = {
    "time": "2024-05-01T12:00",
    "interval": 900,
    "wave_height": 1.42,
    "sea_surface_temperature": 14.8,
}

BIARRITZ = {
    "id": 3032797,
    "name": "Biarritz",
    "latitude": 43.48333,
    "longitude": -1.55833,
    "country": "France",
    "admin1": "Nouvelle-Aquitaine",
}

REPORT_ARGS = {
    "name": "Biarritz",
    "latitude": "43.48333",
    "longitude": "-1.55833",
    "country": "France",
    "admin1": "Nouvelle-Aquitaine",
    "q": "Biarritz",
}


# ---------------------------------------------------------------------------
# Marine helpers
# ---------------------------------------------------------------------------

def test_fetch_marine_weather_returns_current_block(fake_response):
    payload = {"latitude": 43.5, "longitude": -1.5, "current": CURRENT}
    with patch("app.requests.get", return_value=fake_response(payload)) as get:
        assert fetch_marine_weather(43.48333, -1.55833) == CURRENT

    args, kwargs = get.call_args
    assert args[0] == surf_app.MARINE_URL
    assert kwargs["params"] == {
        "latitude": 43.48333,
        "longitude": -1.55833,
        "current": "wave_height,sea_surface_temperature",
    }


def test_fetch_marine_weather_without_current_block(fake_response):
    with patch("app.requests.get", return_value=fake_response({"error": True})):
        with pytest.raises(ValueError):
            fetch_marine_weather(0, 0)


def test_fetch_marine_weather_http_error(fake_response):
    with patch("app.requests.get", return_value=fake_response({}, status_code=400)):
        with pytest.raises(requests.HTTPError):
            fetch_marine_weather(0, 0)


def test_has_marine_data():
    assert has_marine_data(CURRENT)
    assert not has_marine_data(dict(CURRENT, wave_height=None))
    assert not has_marine_data(dict(CURRENT, sea_surface_temperature=None))
    assert not has_marine_data(None)
    assert not has_marine_data({})


def test_no_surf_message():
    assert "baguette" in no_surf_message("France")
    assert "BBQ" in no_surf_message("Switzerland")
    assert "BBQ" in no_surf_message(None)


def test_format_measurement_time():
    assert format_measurement_time("2024-05-01T12:00") == "May 01, 2024 12:00 PM UTC"
    assert format_measurement_time("2024-05-01T06:30") == "May 01, 2024 6:30 AM UTC"
    assert format_measurement_time("not a time") == "not a time"
    assert format_measurement_time(None) == ""


# ---------------------------------------------------------------------------
# HTML routes
# ---------------------------------------------------------------------------

def test_index_without_query(client):
    with patch("app.search_locations") as search:
        resp = client.get("/")
    assert resp.status_code == 200
    assert "Search for a location..." in resp.get_data(as_text=True)
    search.assert_not_called()


def test_index_lists_results_with_flags(client, fake_response):
    with patch("locations.requests.get", return_value=fake_response({"results": [BIARRITZ]})):
        resp = client.get("/?q=Biarritz")
    body = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert "Results (1)" in body
    assert f"{FR} France" in body
    assert "Lat: 43.4833, Long: -1.5583" in body
    assert "/report?" in body


def test_index_no_results(client):
    with patch("app.search_locations", return_value=[]):
        resp = client.get("/?q=Qwertyuiop")
    assert resp.status_code == 200
    assert surf_app.NO_RESULTS in resp.get_data(as_text=True)


def test_index_search_failure(client):
    with patch("app.search_locations", side_effect=requests.ConnectionError("down")):
        resp = client.get("/?q=Biarritz")
    assert resp.status_code == 200
    assert surf_app.SEARCH_ERROR in resp.get_data(as_text=True)


def test_report_shows_conditions(client):
    with patch("app.fetch_marine_weather", return_value=CURRENT):
        resp = client.get("/report", query_string=REPORT_ARGS)
    body = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert f"Biarritz, {FR} France (Nouvelle-Aquitaine)" in body
    assert "1.42 m" in body
    assert "14.8°C" in body
    assert "May 01, 2024 12:00 PM UTC" in body
    assert "Back to search results" in body


def test_report_without_marine_data_in_france(client):
    with patch("app.fetch_marine_weather", return_value=dict(CURRENT, wave_height=None)):
        resp = client.get("/report", query_string=REPORT_ARGS)
    body = resp.get_data(as_text=True)
    assert "baguette" in body
    assert "Wave Height" not in body


def test_report_without_marine_data_elsewhere(client):
    args = dict(REPORT_ARGS, name="Zermatt", country="Switzerland", admin1="Valais")
    with patch("app.fetch_marine_weather", return_value=dict(CURRENT, sea_surface_temperature=None)):
        resp = client.get("/report", query_string=args)
    assert "BBQ" in resp.get_data(as_text=True)


def test_report_marine_failure(client):
    with patch("app.fetch_marine_weather", side_effect=requests.Timeout("slow")):
        resp = client.get("/report", query_string=REPORT_ARGS)
    assert resp.status_code == 200
    assert surf_app.WEATHER_ERROR in resp.get_data(as_text=True)


@pytest.mark.parametrize(
    "latitude, longitude",
    [("", "1.0"), ("abc", "1.0"), ("91", "0"), ("0", "-181")],
)
def test_report_rejects_bad_coordinates(client, latitude, longitude):
    with patch("app.fetch_marine_weather") as fetch:
        resp = client.get("/report", query_string={"latitude": latitude, "longitude": longitude})
    assert resp.status_code == 400
    fetch.assert_not_called()


# ---------------------------------------------------------------------------
# JSON API
# ---------------------------------------------------------------------------

def test_api_search(client, fake_response):
    with patch("locations.requests.get", return_value=fake_response({"results": [BIARRITZ]})):
        resp = client.get("/api/search?name=Biarritz")
    assert resp.status_code == 200
    (result,) = resp.get_json()["results"]
    assert result["name"] == "Biarritz"
    assert result["flag"] == FR


def test_api_search_upstream_failure(client):
    with patch("app.search_locations", side_effect=requests.HTTPError("500")):
        resp = client.get("/api/search?name=Biarritz")
    assert resp.status_code == 502
    assert resp.get_json() == {"error": surf_app.SEARCH_ERROR}


def test_api_marine(client):
    with patch("app.fetch_marine_weather", return_value=CURRENT):
        resp = client.get("/api/marine?latitude=43.48&longitude=-1.55")
    data = resp.get_json()
    assert resp.status_code == 200
    assert data["wave_height"] == 1.42
    assert data["has_marine_data"] is True


def test_api_marine_bad_coordinates(client):
    resp = client.get("/api/marine?latitude=north")
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_api_marine_upstream_failure(client):
    with patch("app.fetch_marine_weather", side_effect=ValueError("no current")):
        resp = client.get("/api/marine?latitude=43.48&longitude=-1.55")
    assert resp.status_code == 502


def test_api_flag(client):
    resp = client.get("/api/flag?country=france")
    assert resp.get_json() == {"country": "france", "flag": FR}

    resp = client.get("/api/flag")
    assert resp.get_json() == {"country": "", "flag": ""}
