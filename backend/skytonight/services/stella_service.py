"""Stella, the stargazing guide: request validation, grounding and replies.

Chat request bodies arrive as untyped JSON. ``validate_chat_request`` checks
them field by field, in a fixed order, and only a body that passes every
check is turned into a ``StellaChatRequest``.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import ValidationError

from skytonight.core.errors import CompletionError, StellaChatError
from skytonight.models import (
    ChatRole,
    SkyObject,
    StellaChatMeta,
    StellaChatRequest,
    StellaChatSuccess,
    Visibility,
)
from skytonight.services.llm_client import OpenAIChatClient
from skytonight.services.visibility import is_iso_date

STELLA_SYSTEM_PROMPT = """
You are Stella, a friendly stargazing guide.

The user has provided:
- Their location
- The current date
- A short list of visible sky objects for tonight

Your job:
- Explain what these objects are in simple, beginner-friendly language
- Suggest which object(s) are good to look at and why
- Give practical tips for finding them in the sky when relevant

Tone:
- Warm, encouraging, and concise
- Assume the user is curious but not an expert
- Avoid heavy jargon; if you must use a term, explain it briefly
- With a tiny dash of celestial poetry and a touch of whimsy

Grounding:
- Base your answers on the provided sky objects, location, and date
- If the user asks about an object that is NOT in the provided list, say so gently and redirect to objects that ARE in the list
- 1-4 sentences per reply is ideal
"""

SPEAKER_LABELS = {ChatRole.USER.value: "User", ChatRole.ASSISTANT.value: "Stella"}
VALID_ROLES = set(SPEAKER_LABELS)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of chat request validation.

    Exactly one of ``request`` or (``field``, ``message``) is set.
    """

    request: Optional[StellaChatRequest] = None
    field: Optional[str] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.request is not None

    @classmethod
    def failure(cls, field: str, message: str) -> "ValidationResult":
        return cls(field=field, message=message)


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_chat_request(body: Any) -> ValidationResult:
    """Validate a decoded JSON body, stopping at the first failure.

    Order: location, date, objects, messages, presence of a user message,
    then each message's role and content.
    """
    if not isinstance(body, dict):
        return ValidationResult.failure("body", "request body must be a JSON object")

    location = body.get("location")
    if _is_blank(location):
        return ValidationResult.failure("location", "location is required and must be a non-empty string")

    date = body.get("date")
    if not isinstance(date, str) or not date:
        return ValidationResult.failure("date", "date is required and must be a string")
    if not is_iso_date(date):
        return ValidationResult.failure("date", "date must be a valid ISO date (YYYY-MM-DD)")

    objects = body.get("objects")
    if not isinstance(objects, list):
        return ValidationResult.failure("objects", "objects is required and must be an array")
    if not objects:
        return ValidationResult.failure("objects", "objects array must contain at least one object")

    messages = body.get("messages")
    if not isinstance(messages, list):
        return ValidationResult.failure("messages", "messages is required and must be an array")
    if not messages:
        return ValidationResult.failure("messages", "messages array must contain at least one message")

    if not any(isinstance(m, dict) and m.get("role") == ChatRole.USER.value for m in messages):
        return ValidationResult.failure(
            "messages", "messages array must contain at least one message with role 'user'"
        )

    for i, message in enumerate(messages):
        if not isinstance(message, dict) or message.get("role") not in VALID_ROLES:
            return ValidationResult.failure(
                f"messages[{i}].role", f'messages[{i}].role must be either "user" or "assistant"'
            )
        if _is_blank(message.get("content")):
            return ValidationResult.failure(
                f"messages[{i}].content", f"messages[{i}].content must be a non-empty string"
            )

    try:
        request = StellaChatRequest(location=location, date=date, objects=objects, messages=messages)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        return ValidationResult.failure(field, f"{field}: {error['msg']}")

    return ValidationResult(request=request)


def build_context(request: StellaChatRequest) -> str:
    """Render location, date, sky objects and the conversation as grounding text."""
    lines = [
        f"Location: {request.location}",
        f"Date: {request.date}",
        "Visible objects:",
    ]

    if not request.objects:
        lines.append("(none provided)")
    for obj in request.objects:
        lines.append(f"- {obj.name} ({obj.type}, visibility: {obj.visibility}) – {obj.note}")

    lines.append("")
    lines.append("Conversation so far:")
    for message in request.messages:
        lines.append(f"{SPEAKER_LABELS[message.role]}: {message.content}")

    return "\n".join(lines)


def find_suggested_object_id(objects: List[SkyObject]) -> Optional[str]:
    """Id of the first object with good visibility, if any."""
    for obj in objects:
        if obj.visibility == Visibility.GOOD:
            return obj.id
    return None


class StellaChatService:
    """Produce grounded Stella replies through a text-completion client."""

    def __init__(self, client: Optional[OpenAIChatClient] = None, system_prompt: str = STELLA_SYSTEM_PROMPT):
        self.client = client or OpenAIChatClient()
        self.system_prompt = system_prompt
        self.logger = logging.getLogger(__name__)

    def parse_request(self, body: Any) -> StellaChatRequest:
        """Validate a decoded body or raise ``BAD_REQUEST``."""
        result = validate_chat_request(body)
        if not result.ok:
            self.logger.info(f"Rejected chat request ({result.field}): {result.message}")
            raise StellaChatError(StellaChatError.BAD_REQUEST, result.message)
        return result.request

    def reply(self, request: StellaChatRequest) -> StellaChatSuccess:
        """
        Ask the model for a reply grounded in the request's sky objects.

        Raises:
            StellaChatError: MODEL_ERROR if the completion client fails
        """
        context = build_context(request)

        try:
            reply = self.client.complete(self.system_prompt, context, request.messages)
        except CompletionError as e:
            self.logger.warning(f"Stella model call failed: {e}")
            raise StellaChatError(StellaChatError.MODEL_ERROR, str(e) or "Failed to generate response") from e

        suggested_id = find_suggested_object_id(request.objects)
        meta = StellaChatMeta(suggested_object_id=suggested_id) if suggested_id else None
        return StellaChatSuccess(reply=reply, meta=meta)
