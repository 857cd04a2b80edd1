"""Coastal location search and display helpers.

Place names are looked up with the free Open-Meteo geocoding API (no key
required).  Every result is normalized into a plain location dict and
tagged with the flag emoji of its country so templates and the JSON API can
render it directly:

    {
        "id": 2988507,
        "name": "Paris",
        "latitude": 48.85341,
        "longitude": 2.3488,
        "country": "France",
        "admin1": "Île-de-France",   # or None
        "flag": "🇫🇷",                # or ""
    }
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from flags import get_country_flag


GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
GEOCODING_TIMEOUT = 10
DEFAULT_RESULT_COUNT = 10


def _normalize_result(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Reduce a raw geocoding hit to the fields the app displays."""
    country = raw.get("country") or ""
    return {
        "id": raw.get("id"),
        "name": raw.get("name", ""),
        "latitude": float(raw["latitude"]),
        "longitude": float(raw["longitude"]),
        "country": country,
        "admin1": raw.get("admin1") or None,
        "flag": get_country_flag(country),
    }


def search_locations(
    name: str,
    count: int = DEFAULT_RESULT_COUNT,
    language: str = "en",
) -> List[Dict[str, Any]]:
    """Search for places matching ``name``.

    Returns an empty list for a blank query (without calling the API) or
    when the geocoder has no results.  Raises requests.RequestException on
    network failures or non-2xx responses.
    """
    if not name or not name.strip():
        return []
    resp = requests.get(
        GEOCODING_URL,
        params={
            "name": name.strip(),
            "count": count,
            "language": language,
            "format": "json",
        },
        timeout=GEOCODING_TIMEOUT,
    )
    resp.raise_for_status()
    data = resp.json()
    # The API omits "results" entirely when nothing matches
    return [_normalize_result(r) for r in data.get("results") or []]


def format_location(location: Dict[str, Any]) -> str:
    """Render "Name, <flag> Country (Admin1)" for a location dict.

    The flag is left out when the country could not be resolved and the
    qualifier is left out when the location has no first-level admin area.
    """
    country = location.get("country") or ""
    flag = location.get("flag")
    if flag is None:
        flag = get_country_flag(country)
    country_text = " ".join(part for part in (flag, country) if part)

    text = location.get("name", "")
    if country_text:
        text = f"{text}, {country_text}"
    admin1: Optional[str] = location.get("admin1")
    if admin1:
        text = f"{text} ({admin1})"
    return text


def format_coordinates(location: Dict[str, Any]) -> str:
    """Render latitude and longitude to four decimal places."""
    return f"Lat: {location['latitude']:.4f}, Long: {location['longitude']:.4f}"
