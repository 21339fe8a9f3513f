"""OpenAI chat completions client used by Stella."""

import logging
from typing import Dict, List, Optional

from openai import APIConnectionError, APIStatusError, OpenAI, OpenAIError

from skytonight.core import get_settings
from skytonight.core.errors import CompletionError
from skytonight.models import StellaChatMessage

FALLBACK_REPLY = "Sorry, I couldn't think of a good answer just now."


class OpenAIChatClient:
    """Minimal text-completion collaborator over the OpenAI API.

    The API key is injected at construction (defaulting to settings) so the
    client never reads the environment mid-request. The SDK client is created
    on first use.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.base_url = (base_url or settings.openai_base_url).rstrip("/")
        self.model = model or settings.openai_model
        self.temperature = temperature if temperature is not None else settings.openai_temperature
        self.max_tokens = max_tokens or settings.openai_max_tokens
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._client = None
        self.logger = logging.getLogger(__name__)

    def _ensure_client(self) -> OpenAI:
        """Lazily initialize the SDK client."""
        if not self.api_key:
            raise CompletionError("Missing OPENAI_API_KEY")

        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url, timeout=self.timeout)
        return self._client

    def build_messages(
        self, system_prompt: str, context: str, messages: List[StellaChatMessage]
    ) -> List[Dict[str, str]]:
        """Persona, grounding context, then the conversation history."""
        model_messages = [
            {"role": "system", "content": system_prompt.strip()},
            {"role": "system", "content": f"Context:\n{context}"},
        ]
        model_messages.extend({"role": m.role, "content": m.content} for m in messages)
        return model_messages

    def complete(self, system_prompt: str, context: str, messages: List[StellaChatMessage]) -> str:
        """
        Generate a reply for the conversation.

        Raises:
            CompletionError: If the key is missing, the request fails or the
                API returns a non-2xx status
        """
        client = self._ensure_client()

        self.logger.info(f"Requesting completion from {self.model} ({len(messages)} messages)")

        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=self.build_messages(system_prompt, context, messages),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except APIStatusError as e:
            raise CompletionError(f"Model error: {e.status_code} {e.message}") from e
        except APIConnectionError as e:
            raise CompletionError(f"Model request failed: {e}") from e
        except OpenAIError as e:
            raise CompletionError(f"Model error: {e}") from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError):
            content = None

        reply = content.strip() if isinstance(content, str) else ""
        if not reply:
            self.logger.warning("Model returned an empty reply; using fallback")
            return FALLBACK_REPLY
        return reply
