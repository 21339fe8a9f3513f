"""USNO astronomy data service.

Fetches rise/set tables and celestial navigation almanac data from the US
Naval Observatory Astronomical Applications API and normalizes them into
``SkyObject`` lists:

- ``rstt/oneday``: Sun and Moon rise/set/transit times plus moon phase for a
  single date. This is the primary source; failures abort the request.
- ``celnav``: instantaneous altitude/azimuth of the Sun, Moon, navigational
  planets and stars. Best-effort only; failures degrade to no data.

API Documentation: https://aa.usno.navy.mil/data/api
"""

import logging
import re
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import requests

from skytonight.core import get_settings
from skytonight.core.errors import UpstreamError
from skytonight.models import SkyObject, SkyObjectType
from skytonight.services.sky_catalog import DEFAULT_CATALOG, SkyCatalog
from skytonight.services.visibility import (
    altitude_visibility,
    estimate_rise_set,
    format_time,
    is_iso_date,
    moon_visibility,
    next_day,
    normalize_clock_time,
    sun_visibility,
    time_to_iso,
    utc_now,
)

RISE = "Rise"
SET = "Set"


def slugify(name: str) -> str:
    """Object id from its name: lowercase, whitespace runs replaced by hyphens."""
    return re.sub(r"\s+", "-", name.strip().lower())


def find_event_time(events: Optional[List[Dict[str, Any]]], phenomenon: str) -> Optional[str]:
    """Return the ``HH:MM`` time of the first event labelled ``phenomenon``.

    Events that are not objects, or that have a missing or unreadable time,
    are ignored.
    """
    if not isinstance(events, list):
        return None
    for event in events:
        if not isinstance(event, dict) or event.get("phen") != phenomenon:
            continue
        try:
            return normalize_clock_time(event.get("time", ""))
        except ValueError:
            continue
    return None


class AstronomyService:
    """Service for building tonight's sky object list from USNO data.

    Upstream clock times are requested in UTC (``tz=0``). Objects are returned
    in the order: celestial navigation bodies, Sun, Moon.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        catalog: SkyCatalog = DEFAULT_CATALOG,
        celnav_enabled: Optional[bool] = None,
        clock: Callable[[], datetime] = utc_now,
        session: Optional[requests.Session] = None,
    ):
        """Initialize with settings, overridable per argument.

        ``session`` defaults to the ``requests`` module itself, so any object
        with a compatible ``get`` can be injected.
        """
        settings = get_settings()
        self.base_url = (base_url or settings.usno_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.catalog = catalog
        self.celnav_enabled = settings.celnav_enabled if celnav_enabled is None else celnav_enabled
        self.clock = clock
        self.session = session or requests
        self.logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def get_sky_objects(self, lat: float, lon: float, date: str) -> List[SkyObject]:
        """Fetch all sources for a location and date and map them to sky objects.

        Raises:
            ValueError: If ``date`` is not ``YYYY-MM-DD``
            UpstreamError: If the primary rise/set fetch or its parsing fails
        """
        data = self.fetch_daily_data(lat, lon, date)
        date = date.split("T")[0]
        now = self.clock()

        celnav = self.fetch_celnav_data(lat, lon, now) if self.celnav_enabled else None
        next_sunrise = self.fetch_next_sunrise(lat, lon, date)

        return self.map_to_sky_objects(data, date, now=now, celnav=celnav, next_sunrise=next_sunrise)

    def fetch_daily_data(self, lat: float, lon: float, date: str) -> Dict[str, Any]:
        """Fetch the one-day rise/set/transit table.

        Args:
            lat: Latitude in degrees
            lon: Longitude in degrees
            date: ``YYYY-MM-DD`` (the date part of an ISO datetime is accepted)

        Returns:
            Raw USNO JSON payload

        Raises:
            ValueError: If the date is malformed; raised before any request
            UpstreamError: If the request fails or returns a non-2xx status
        """
        formatted_date = date.split("T")[0]
        if not is_iso_date(formatted_date):
            raise ValueError(f"Invalid date format. Expected YYYY-MM-DD, got: {date}")

        self.logger.info(f"Fetching USNO rise/set data for {formatted_date} at ({lat}, {lon})")

        try:
            response = self.session.get(
                f"{self.base_url}/rstt/oneday",
                params=self._oneday_params(lat, lon, formatted_date),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise UpstreamError(f"USNO API request failed: {e}") from e

        if not response.ok:
            raise UpstreamError(f"USNO API error: {response.status_code} {response.reason}")

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"USNO API returned invalid JSON: {e}") from e

    def fetch_next_sunrise(self, lat: float, lon: float, date: str) -> Optional[str]:
        """Best-effort lookup of the sunrise on the day after ``date``.

        Returns:
            ISO datetime of the next sunrise, or None if it could not be fetched
        """
        tomorrow = next_day(date)
        try:
            response = self.session.get(
                f"{self.base_url}/rstt/oneday",
                params=self._oneday_params(lat, lon, tomorrow),
                timeout=self.timeout,
            )
            if not response.ok:
                self.logger.warning(f"USNO next-day request returned {response.status_code}")
                return None
            sundata = response.json()["properties"]["data"]["sundata"]
            sunrise = find_event_time(sundata, RISE)
        except requests.exceptions.RequestException as e:
            self.logger.warning(f"USNO next-day request failed: {e}")
            return None
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            self.logger.warning(f"Could not parse USNO next-day data: {e}")
            return None

        return time_to_iso(tomorrow, sunrise) if sunrise else None

    def fetch_celnav_data(self, lat: float, lon: float, now: datetime) -> Optional[List[Dict[str, Any]]]:
        """Best-effort fetch of celestial navigation data for the current instant.

        Returns:
            List of per-body almanac entries, or None on any failure
        """
        params = {
            "date": now.strftime("%Y-%m-%d"),
            "time": now.strftime("%H:%M"),
            "coords": f"{lat},{lon}",
        }

        try:
            response = self.session.get(f"{self.base_url}/celnav", params=params, timeout=self.timeout)
            if not response.ok:
                self.logger.warning(f"USNO celnav request returned {response.status_code}")
                return None
            entries = response.json()["properties"]["data"]
        except requests.exceptions.RequestException as e:
            self.logger.warning(f"USNO celnav request failed: {e}")
            return None
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            self.logger.warning(f"Could not parse USNO celnav data: {e}")
            return None

        if not isinstance(entries, list):
            self.logger.warning("USNO celnav data is not a list")
            return None

        self.logger.info(f"Retrieved {len(entries)} celnav entries")
        return entries

    def _oneday_params(self, lat: float, lon: float, date: str) -> Dict[str, Any]:
        return {"date": date, "coords": f"{lat},{lon}", "tz": 0}

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    def map_to_sky_objects(
        self,
        data: Dict[str, Any],
        date: str,
        now: Optional[datetime] = None,
        celnav: Optional[List[Dict[str, Any]]] = None,
        next_sunrise: Optional[str] = None,
    ) -> List[SkyObject]:
        """Convert USNO payloads into sky objects.

        Missing optional sections simply omit their object.

        Raises:
            UpstreamError: If the rise/set payload has no readable sun data
        """
        now = now or self.clock()

        try:
            day_data = data["properties"]["data"]
            sundata = day_data["sundata"]
        except (KeyError, TypeError) as e:
            raise UpstreamError(f"Unexpected USNO response format: missing {e}") from e

        if not isinstance(day_data, dict) or not isinstance(sundata, list):
            raise UpstreamError("Unexpected USNO response format: sundata is not a list")

        objects = self.map_celnav_entries(celnav or [], now)

        sun = self.build_sun(sundata, date, next_sunrise, now)
        if sun:
            objects.append(sun)

        moon = self.build_moon(day_data, date, now)
        if moon:
            objects.append(moon)

        return objects

    def map_celnav_entries(self, entries: List[Dict[str, Any]], now: datetime) -> List[SkyObject]:
        """Map allow-listed celestial navigation entries to sky objects, keeping upstream order."""
        objects = []
        seen = set()

        for entry in entries:
            if not isinstance(entry, dict):
                continue
            name = entry.get("object")
            if not isinstance(name, str) or not self.catalog.is_known(name):
                continue

            altitude = self._number(entry, "hc")
            if altitude is None:
                self.logger.warning(f"Skipping celnav entry without altitude: {name}")
                continue

            object_id = slugify(name)
            if object_id in seen:
                continue
            seen.add(object_id)

            rise_time, set_time = estimate_rise_set(altitude, now)
            objects.append(
                SkyObject(
                    id=object_id,
                    name=name,
                    type=self.catalog.classify(name, self._has_star_index(entry)),
                    visibility=altitude_visibility(altitude),
                    rise_time=rise_time,
                    set_time=set_time,
                    note=self._celnav_note(altitude, self._number(entry, "zn"), rise_time, set_time),
                )
            )

        return objects

    def build_sun(
        self,
        sundata: List[Dict[str, Any]],
        date: str,
        next_sunrise: Optional[str],
        now: datetime,
    ) -> Optional[SkyObject]:
        """Sun object from rise/set events, or None if either event is missing."""
        rise = find_event_time(sundata, RISE)
        set_ = find_event_time(sundata, SET)
        if not rise or not set_:
            self.logger.info("No sunrise/sunset in USNO data; skipping Sun")
            return None

        sunrise = time_to_iso(date, rise)
        sunset = time_to_iso(date, set_)

        return SkyObject(
            id="sun",
            name="Sun",
            type=SkyObjectType.STAR,
            visibility=sun_visibility(sunset, next_sunrise, now),
            rise_time=sunrise,
            set_time=sunset,
            note=f"Sunrise at {format_time(sunrise)} / Sunset at {format_time(sunset)}",
        )

    def build_moon(self, day_data: Dict[str, Any], date: str, now: datetime) -> Optional[SkyObject]:
        """Moon object from rise/set events plus phase, or None if unavailable.

        A moonset whose clock time sorts before moonrise happens after
        midnight, so it is moved to the next calendar day.
        """
        moondata = day_data.get("moondata")
        if not moondata or not isinstance(moondata, list):
            return None

        rise = find_event_time(moondata, RISE)
        set_ = find_event_time(moondata, SET)
        if not rise or not set_:
            return None

        moonrise = time_to_iso(date, rise)
        set_date = next_day(date) if set_ < rise else date
        moonset = time_to_iso(set_date, set_)

        note = f"Moonrise at {format_time(moonrise)} / Moonset at {format_time(moonset)}"
        phase = day_data.get("curphase")
        if phase:
            note += f" ({phase}"
            illumination = day_data.get("fracillum")
            if illumination:
                note += f", {illumination} illuminated"
            note += ")"

        return SkyObject(
            id="moon",
            name="Moon",
            type=SkyObjectType.OTHER,
            visibility=moon_visibility(moonrise, moonset, now),
            rise_time=moonrise,
            set_time=moonset,
            note=note,
        )

    def _almanac(self, entry: Dict[str, Any]) -> Dict[str, Any]:
        almanac = entry.get("almanac_data")
        return almanac if isinstance(almanac, dict) else {}

    def _number(self, entry: Dict[str, Any], key: str) -> Optional[float]:
        value = self._almanac(entry).get(key, entry.get(key))
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    def _has_star_index(self, entry: Dict[str, Any]) -> bool:
        return entry.get("star_number") is not None or self._almanac(entry).get("star_number") is not None

    def _celnav_note(
        self,
        altitude: float,
        azimuth: Optional[float],
        rise_time: str,
        set_time: str,
    ) -> str:
        if altitude > 0:
            position = f"Currently {altitude:.0f}° above the horizon"
            if azimuth is not None:
                position += f" at azimuth {azimuth:.0f}°"
            window = f"rose around {format_time(rise_time)}, sets around {format_time(set_time)}"
        else:
            position = "Below the horizon right now"
            window = f"rises around {format_time(rise_time)}, sets around {format_time(set_time)}"
        return f"{position}; {window} UTC (estimated)"
