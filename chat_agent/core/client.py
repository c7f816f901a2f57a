"""Chat-completion clients: turn a message list into a single assistant reply."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Sequence

import openai
from openai import OpenAI  # type: ignore

from .config import Settings
from .errors import ConfigError, EmptyResponseError, ProtocolError, TransportError
from .messages import Message, Response

logger = logging.getLogger(__name__)


class ChatClient(ABC):
    """Anything that can answer an ordered list of messages with one reply.

    Implementations hold no conversation state; the same instance may be
    reused across turns.
    """

    @abstractmethod
    def chat(self, messages: Sequence[Message]) -> Response:
        """Send *messages* and return the first reply.

        Raises ``TransportError``, ``ProtocolError`` or ``EmptyResponseError``.
        """


class OpenAIChatClient(ChatClient):
    """Thin wrapper around the OpenAI Python SDK for OpenAI-compatible endpoints."""

    def __init__(self, client: OpenAI, model: str):
        self.client = client
        self.model = model

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIChatClient":
        if not settings.api_key:
            raise ConfigError(
                "OPENAI_API_KEY environment variable is not set "
                "(tried reading from environment and ~/.zshrc)"
            )

        client_kwargs: Dict[str, Any] = {
            "api_key": settings.api_key,
            "timeout": settings.timeout,
            # A turn is a single attempt; retries belong to the caller.
            "max_retries": 0,
        }
        if settings.endpoint_url:
            client_kwargs["base_url"] = settings.endpoint_url

        return cls(OpenAI(**client_kwargs), settings.model_name)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Helper methods
    # ------------------------------------------------------------------

    @staticmethod
    def _extract_text(completion: Any) -> str:
        """Return the content of the first choice of a chat completion."""
        choices = getattr(completion, "choices", None)
        if not isinstance(choices, list):
            raise ProtocolError("response has no 'choices' list")
        if not choices:
            raise EmptyResponseError("response contained zero choices")

        message = getattr(choices[0], "message", None)
        if message is None:
            raise ProtocolError("first choice has no message")

        content = getattr(message, "content", None)
        if not isinstance(content, str):
            raise ProtocolError("first choice has no text content")
        return content

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def chat(self, messages: Sequence[Message]) -> Response:
        if not messages:
            raise ValueError("at least one message is required")

        params: Dict[str, Any] = {
            "model": self.model,
            "messages": [m.to_api() for m in messages],
        }
        logger.debug("requesting completion: model=%s messages=%d", self.model, len(messages))

        try:
            completion = self.client.chat.completions.create(**params)  # type: ignore[arg-type]
        except openai.APITimeoutError as exc:
            raise TransportError(f"request timed out: {exc}") from exc
        except openai.APIConnectionError as exc:
            raise TransportError(f"connection failed: {exc}") from exc
        except openai.APIStatusError as exc:
            raise ProtocolError(
                f"endpoint returned HTTP {exc.status_code}: {exc.message}",
                status_code=exc.status_code,
            ) from exc
        except openai.APIResponseValidationError as exc:
            raise ProtocolError(f"malformed response: {exc}") from exc

        text = self._extract_text(completion)
        logger.debug("received %d characters", len(text))
        return Response(text=text)

