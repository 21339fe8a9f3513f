"""Geocoding service using the Open-Meteo geocoding API.

Free service, no API key required:
https://open-meteo.com/en/docs/geocoding-api
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

import requests

from skytonight.core import get_settings
from skytonight.core.errors import GeocodingError


@dataclass(frozen=True)
class GeocodeResult:
    """Coordinates and display name for a location query."""

    lat: float
    lon: float
    resolved_name: str


class GeocodingService:
    """Resolve free-text location queries to coordinates."""

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None):
        settings = get_settings()
        self.url = url or settings.geocoding_url
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def normalize_query(query: str) -> str:
        """Add a space after commas that lack one ("Denver,CO" -> "Denver, CO")."""
        return re.sub(r",(\S)", r", \1", query)

    def geocode(self, query: str) -> GeocodeResult:
        """Resolve a location query to its best match.

        Raises:
            GeocodingError: If the request fails or nothing matches
        """
        normalized = self.normalize_query(query)
        params = {"name": normalized, "count": 1, "language": "en", "format": "json"}

        self.logger.info(f"Geocoding location '{normalized}'")

        try:
            response = requests.get(self.url, params=params, timeout=self.timeout)
            if not response.ok:
                raise GeocodingError(f"Geocoding API error: {response.reason}")

            results = response.json().get("results") or []
            if not results:
                raise GeocodingError("No location found")

            best = results[0]
            parts = [best["name"]]
            for key in ("admin1", "country"):
                if best.get(key):
                    parts.append(best[key])

            result = GeocodeResult(
                lat=float(best["latitude"]),
                lon=float(best["longitude"]),
                resolved_name=", ".join(parts),
            )
        except requests.exceptions.Timeout as e:
            raise GeocodingError("Geocoding request timed out") from e
        except (GeocodingError, requests.exceptions.RequestException, ValueError, KeyError, TypeError, AttributeError) as e:
            raise GeocodingError(f"Failed to geocode location: {e}") from e

        self.logger.info(f"Resolved '{query}' to {result.resolved_name} ({result.lat}, {result.lon})")
        return result
