"""Services package."""

from .astronomy_service import AstronomyService
from .geocoding_service import GeocodingService
from .llm_client import OpenAIChatClient
from .sky_objects_service import SkyObjectsService
from .stella_service import StellaChatService

__all__ = [
    "AstronomyService",
    "GeocodingService",
    "OpenAIChatClient",
    "SkyObjectsService",
    "StellaChatService",
]
