"""
Surf Report Application
-----------------------

This Flask application lets a user search for a coastal location by name
and check the current marine conditions there.  Place names are resolved
with the Open-Meteo geocoding API and the latest wave height and sea surface
temperature come from the Open-Meteo marine API (both free, no API key).
Country names are decorated with a flag emoji resolved by fuzzy name
matching (see ``flags.py``).

The application exposes the following endpoints:

* ``/`` -- HTML search page.  With ``?q=<name>`` the matching locations are
  listed, each linking to its surf report.
* ``/report`` -- HTML surf report for one location, identified by the query
  parameters ``name``, ``latitude``, ``longitude``, ``country`` and
  ``admin1``.  Points without marine coverage (inland, lakes) get a
  consolation message instead of numbers.
* ``/api/search`` -- JSON location search (``?name=``).
* ``/api/marine`` -- JSON current marine conditions (``?latitude=&longitude=``).
* ``/api/flag`` -- JSON flag lookup for a country name (``?country=``).

Nothing is cached or persisted: every page view queries the upstream APIs
again.  Upstream failures are reported inline on the HTML pages and as a
502 on the JSON endpoints.
"""

from __future__ import annotations

import os
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

import requests
from flask import (
    Flask,
    jsonify,
    render_template,
    request,
)
from zoneinfo import ZoneInfo

from flags import get_country_flag
from locations import format_coordinates, format_location, search_locations


# Set up Flask app
app = Flask(__name__)
app.config["SECRET_KEY"] = os.environ.get(
    "SECRET_KEY", "replace_this_with_a_secure_key",
)

SEARCH_ERROR = "An error occurred while searching for locations."
NO_RESULTS = "No locations found. Try a different search term."
WEATHER_ERROR = "Failed to fetch marine weather data for this location."


# ---------------------------------------------------------------------------
# Open-Meteo marine conditions (free, no API key)
# ---------------------------------------------------------------------------

MARINE_URL = "https://marine-api.open-meteo.com/v1/marine"
MARINE_TIMEOUT = 10
MARINE_CURRENT_FIELDS = "wave_height,sea_surface_temperature"


def fetch_marine_weather(latitude: float, longitude: float) -> Dict[str, Any]:
    """Fetch the current marine conditions for a point.

    Returns the ``current`` block of the Open-Meteo response, a dict with
    keys ``time``, ``interval``, ``wave_height`` (m) and
    ``sea_surface_temperature`` (C).  Either measurement may be None when
    the point has no marine coverage.  Raises requests.HTTPError on network
    failures and ValueError if the response has no ``current`` block.
    """
    resp = requests.get(
        MARINE_URL,
        params={
            "latitude": latitude,
            "longitude": longitude,
            "current": MARINE_CURRENT_FIELDS,
        },
        timeout=MARINE_TIMEOUT,
    )
    resp.raise_for_status()
    data = resp.json()
    current = data.get("current")
    if not isinstance(current, dict):
        raise ValueError("Marine response has no current conditions")
    return current


def has_marine_data(current: Optional[Dict[str, Any]]) -> bool:
    """Return True when both wave height and water temperature are present."""
    if not current:
        return False
    return (
        current.get("wave_height") is not None
        and current.get("sea_surface_temperature") is not None
    )


def no_surf_message(country: Optional[str]) -> str:
    """Consolation message for locations without marine data."""
    if country == "France":
        return "Too bad! No surf, have a baguette instead mon amis 😃"
    return "Too bad! No surf, have a BBQ instead dude! :)"


def format_measurement_time(iso_time: Optional[str]) -> str:
    """Format an Open-Meteo timestamp (GMT, e.g. ``2024-05-01T12:00``).

    Unparseable values are returned unchanged.
    """
    if not iso_time:
        return ""
    try:
        dt = datetime.fromisoformat(iso_time)
    except ValueError:
        return iso_time
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=ZoneInfo("UTC"))
    return dt.astimezone(ZoneInfo("UTC")).strftime("%b %d, %Y %-I:%M %p UTC")


def parse_coordinates(args: Any) -> Tuple[float, float]:
    """Read ``latitude``/``longitude`` from request args.

    Raises ValueError when either is missing, non-numeric or out of range.
    """
    try:
        lat = float(args.get("latitude", ""))
        lng = float(args.get("longitude", ""))
    except (TypeError, ValueError):
        raise ValueError("latitude and longitude must be numbers")
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        raise ValueError("latitude or longitude out of range")
    return lat, lng


# ---------------------------------------------------------------------------
# Template helpers
# ---------------------------------------------------------------------------

@app.template_filter("flag")
def flag_filter(country: Optional[str]) -> str:
    """Jinja filter: ``{{ location.country | flag }}``."""
    return get_country_flag(country)


app.jinja_env.globals.update(
    format_location=format_location,
    format_coordinates=format_coordinates,
    format_measurement_time=format_measurement_time,
)


# ---------------------------------------------------------------------------
# HTML routes
# ---------------------------------------------------------------------------

@app.route("/")
def index() -> str:
    """Render the search page, with results when ``q`` is given."""
    query = request.args.get("q", "").strip()
    locations = []
    error = None
    if query:
        try:
            locations = search_locations(query)
        except requests.RequestException as exc:
            print(f"Error searching locations: {exc}")
            error = SEARCH_ERROR
        else:
            if not locations:
                error = NO_RESULTS
    return render_template(
        "index.html", query=query, locations=locations, error=error,
    )


@app.route("/report")
def report() -> Any:
    """Render the surf report card for the selected location."""
    try:
        lat, lng = parse_coordinates(request.args)
    except ValueError as exc:
        return render_template("error.html", message=str(exc)), 400

    location = {
        "name": request.args.get("name", ""),
        "latitude": lat,
        "longitude": lng,
        "country": request.args.get("country", ""),
        "admin1": request.args.get("admin1") or None,
    }
    location["flag"] = get_country_flag(location["country"])

    weather = None
    weather_error = None
    try:
        weather = fetch_marine_weather(lat, lng)
    except (requests.RequestException, ValueError) as exc:
        print(f"Error fetching marine weather: {exc}")
        weather_error = WEATHER_ERROR

    no_data = weather is not None and not has_marine_data(weather)
    return render_template(
        "report.html",
        location=location,
        weather=weather,
        weather_error=weather_error,
        no_surf=no_surf_message(location["country"]) if no_data else None,
        query=request.args.get("q", ""),
    )


# ---------------------------------------------------------------------------
# JSON API
# ---------------------------------------------------------------------------

@app.route("/api/search")
def api_search() -> Any:
    """Return matching locations as JSON."""
    name = request.args.get("name", "")
    try:
        results = search_locations(name)
    except requests.RequestException as exc:
        print(f"Error searching locations: {exc}")
        return jsonify({"error": SEARCH_ERROR}), 502
    return jsonify({"results": results})


@app.route("/api/marine")
def api_marine() -> Any:
    """Return the current marine conditions as JSON."""
    try:
        lat, lng = parse_coordinates(request.args)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    try:
        current = fetch_marine_weather(lat, lng)
    except (requests.RequestException, ValueError) as exc:
        print(f"Error fetching marine weather: {exc}")
        return jsonify({"error": WEATHER_ERROR}), 502
    payload = dict(current)
    payload["has_marine_data"] = has_marine_data(current)
    return jsonify(payload)


@app.route("/api/flag")
def api_flag() -> Any:
    """Return the flag emoji resolved for a country name."""
    country = request.args.get("country", "")
    return jsonify({"country": country, "flag": get_country_flag(country)})


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5757))
    app.run(host="0.0.0.0", port=port)
