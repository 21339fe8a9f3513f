"""Data models for the Sky Tonight API.

Field names follow the JSON contract consumed by the front-end (camelCase on
the wire), while Python code uses snake_case attributes through aliases.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SkyObjectType(str, Enum):
    """Kind of celestial object."""
    STAR = "star"
    PLANET = "planet"
    CONSTELLATION = "constellation"
    OTHER = "other"


class Visibility(str, Enum):
    """Observing quality of an object tonight."""
    GOOD = "good"
    OK = "ok"
    POOR = "poor"


class ChatRole(str, Enum):
    """Speaker of a Stella chat message."""
    USER = "user"
    ASSISTANT = "assistant"


class Location(BaseModel):
    """Resolved observer location for one request."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    query: str = Field(description="Location text exactly as the user entered it")
    resolved_name: str = Field(alias="resolvedName", description="Display name from the geocoder")
    lat: float = Field(description="Latitude in degrees (-90 to 90)")
    lon: float = Field(description="Longitude in degrees (-180 to 180)")


class SkyObject(BaseModel):
    """A celestial object with its visibility window for tonight."""
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: str = Field(description="Slug identifier, unique within a response")
    name: str = Field(description="Display name")
    type: SkyObjectType = Field(description="Object type")
    visibility: Visibility = Field(description="Visibility classification")
    rise_time: str = Field(alias="riseTime", description="Rise time (ISO datetime)")
    set_time: str = Field(alias="setTime", description="Set time (ISO datetime)")
    magnitude: Optional[float] = Field(default=None, description="Visual magnitude")
    note: str = Field(min_length=1, description="Human-readable observing note")


class SkyObjectsResponse(BaseModel):
    """Successful response of the sky objects endpoint."""
    location: Location
    date: str = Field(description="ISO date (YYYY-MM-DD)")
    objects: List[SkyObject] = Field(min_length=1)


class ErrorInfo(BaseModel):
    """Machine-readable error code plus a human-readable message."""
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Error body shared by every endpoint."""
    error: ErrorInfo


class StellaChatMessage(BaseModel):
    """One turn of a Stella conversation."""
    model_config = ConfigDict(use_enum_values=True)

    role: ChatRole
    content: str = Field(min_length=1)


class StellaChatRequest(BaseModel):
    """Validated Stella chat request. Built only after request validation."""
    location: str
    date: str
    objects: List[SkyObject]
    messages: List[StellaChatMessage]


class StellaChatMeta(BaseModel):
    """Optional extras attached to a Stella reply."""
    model_config = ConfigDict(populate_by_name=True)

    suggested_object_id: Optional[str] = Field(default=None, alias="suggestedObjectId")


class StellaChatSuccess(BaseModel):
    """Successful Stella reply."""
    reply: str = Field(min_length=1)
    meta: Optional[StellaChatMeta] = None
