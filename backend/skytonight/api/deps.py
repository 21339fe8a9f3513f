"""
API dependencies.
"""

from skytonight.services.sky_objects_service import SkyObjectsService
from skytonight.services.stella_service import StellaChatService


def get_sky_objects_service() -> SkyObjectsService:
    """Sky objects pipeline with geocoder and astronomy clients from settings."""
    return SkyObjectsService()


def get_stella_service() -> StellaChatService:
    """Stella chat service with the OpenAI client from settings."""
    return StellaChatService()
