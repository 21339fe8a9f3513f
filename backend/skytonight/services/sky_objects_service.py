"""Assemble the sky objects response: geocode, fetch astronomy data, map."""

import logging
from datetime import datetime
from typing import Callable, Optional

from skytonight.core.errors import GeocodingError, SkyObjectsError, UpstreamError
from skytonight.models import Location, SkyObjectsResponse
from skytonight.services.astronomy_service import AstronomyService
from skytonight.services.geocoding_service import GeocodingService
from skytonight.services.visibility import utc_now


class SkyObjectsService:
    """Single-pass pipeline from a location query to tonight's sky objects.

    Every failure is reported as a ``SkyObjectsError`` with one of the codes
    ``INVALID_LOCATION`` or ``UPSTREAM_ERROR``. No retries are attempted.
    """

    def __init__(
        self,
        geocoder: Optional[GeocodingService] = None,
        astronomy: Optional[AstronomyService] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.geocoder = geocoder or GeocodingService()
        self.astronomy = astronomy or AstronomyService(clock=clock)
        self.clock = clock
        self.logger = logging.getLogger(__name__)

    def get_sky_objects(self, location_query: Optional[str]) -> SkyObjectsResponse:
        """
        Build the sky objects response for a location.

        Args:
            location_query: Free-text location as entered by the user

        Returns:
            Location, today's UTC date and a non-empty object list

        Raises:
            SkyObjectsError: INVALID_LOCATION for a blank or unresolvable
                location, UPSTREAM_ERROR when astronomy data is unavailable
        """
        if not location_query or not location_query.strip():
            raise SkyObjectsError(SkyObjectsError.INVALID_LOCATION, "Location parameter is required.")

        try:
            geocoded = self.geocoder.geocode(location_query.strip())
        except GeocodingError as e:
            self.logger.warning(f"Could not resolve location '{location_query}': {e}")
            raise SkyObjectsError(SkyObjectsError.INVALID_LOCATION, f"Could not resolve location: {e}") from e

        location = Location(
            query=location_query,
            resolved_name=geocoded.resolved_name,
            lat=geocoded.lat,
            lon=geocoded.lon,
        )

        date = self.clock().strftime("%Y-%m-%d")

        try:
            objects = self.astronomy.get_sky_objects(location.lat, location.lon, date)
        except (UpstreamError, ValueError) as e:
            self.logger.warning(f"Astronomy data unavailable for {location.resolved_name}: {e}")
            raise SkyObjectsError(SkyObjectsError.UPSTREAM_ERROR, f"Failed to fetch astronomy data: {e}") from e

        if not objects:
            raise SkyObjectsError(SkyObjectsError.UPSTREAM_ERROR, "No astronomy data available.")

        self.logger.info(f"Returning {len(objects)} sky objects for {location.resolved_name} on {date}")
        return SkyObjectsResponse(location=location, date=date, objects=objects)
