"""Models package."""

from .models import (
    ChatRole,
    ErrorInfo,
    ErrorResponse,
    Location,
    SkyObject,
    SkyObjectsResponse,
    SkyObjectType,
    StellaChatMessage,
    StellaChatMeta,
    StellaChatRequest,
    StellaChatSuccess,
    Visibility,
)

__all__ = [
    "ChatRole",
    "ErrorInfo",
    "ErrorResponse",
    "Location",
    "SkyObject",
    "SkyObjectsResponse",
    "SkyObjectType",
    "StellaChatMessage",
    "StellaChatMeta",
    "StellaChatRequest",
    "StellaChatSuccess",
    "Visibility",
]
