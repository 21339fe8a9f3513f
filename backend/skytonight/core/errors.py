"""Exception types shared by services and API routes.

Two families live here. Collaborator errors (``GeocodingError``,
``UpstreamError``, ``CompletionError``) are raised by the clients that talk
to external services. API errors (``SkyObjectsError``, ``StellaChatError``)
carry the caller-facing error code and HTTP status and are rendered by the
exception handlers registered in ``skytonight.main``.
"""

from typing import Any, Dict


class SkyTonightError(Exception):
    """Base class for all application errors."""


class GeocodingError(SkyTonightError):
    """Location text could not be resolved to coordinates."""


class UpstreamError(SkyTonightError):
    """A required astronomy data source failed or returned unusable data."""


class CompletionError(SkyTonightError):
    """The text-completion model could not produce a reply."""


class ApiError(SkyTonightError):
    """Error reported to API callers as ``{"error": {"code", "message"}}``."""

    STATUS_CODES: Dict[str, int] = {}

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    @property
    def status_code(self) -> int:
        return self.STATUS_CODES.get(self.code, 500)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message}}


class SkyObjectsError(ApiError):
    """Failure of the sky objects endpoint."""

    INVALID_LOCATION = "INVALID_LOCATION"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    UNKNOWN = "UNKNOWN"

    STATUS_CODES = {
        INVALID_LOCATION: 400,
        UPSTREAM_ERROR: 500,
        UNKNOWN: 500,
    }


class StellaChatError(ApiError):
    """Failure of the Stella chat endpoint."""

    BAD_REQUEST = "BAD_REQUEST"
    MODEL_ERROR = "MODEL_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    STATUS_CODES = {
        BAD_REQUEST: 400,
        MODEL_ERROR: 502,
        INTERNAL_ERROR: 500,
    }
