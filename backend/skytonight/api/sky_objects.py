"""Sky objects endpoint: tonight's visible objects for a location."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from skytonight.api.deps import get_sky_objects_service
from skytonight.core.errors import SkyObjectsError
from skytonight.models import ErrorResponse, SkyObjectsResponse
from skytonight.services.sky_objects_service import SkyObjectsService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sky-objects"])


@router.get(
    "/sky-objects",
    response_model=SkyObjectsResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def get_sky_objects(
    location: Optional[str] = Query(None, description="Free-text location, e.g. 'Denver, CO'"),
    service: SkyObjectsService = Depends(get_sky_objects_service),
):
    """
    Get tonight's sky objects for a location.

    The location is geocoded, then sunrise/sunset, moon and planet/star
    visibility for the current UTC date are fetched from USNO.

    Args:
        location: Free-text location query (required, non-blank)

    Returns:
        Resolved location, date and the list of sky objects

    Errors:
        400 INVALID_LOCATION, 500 UPSTREAM_ERROR, 500 UNKNOWN
    """
    try:
        return service.get_sky_objects(location)
    except SkyObjectsError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error building sky objects: {e}", exc_info=True)
        raise SkyObjectsError(SkyObjectsError.UNKNOWN, f"An unexpected error occurred: {e}") from e
