"""OpenAI chat-completions translation gateway."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

import openai
from openai import OpenAI

from attendql.core.types import (
    FailureKind,
    TranslationFailure,
    TranslationResult,
    TranslationSuccess,
)
from attendql.translation.gateway import TranslationGateway

if TYPE_CHECKING:
    from attendql.core.config import Settings

logger = logging.getLogger(__name__)

NO_CREDENTIAL = "no API credential configured"


class OpenAIGateway(TranslationGateway):
    """Sends translation prompts to an OpenAI-compatible chat endpoint.

    One request per prompt, bounded by a timeout, with SDK retries disabled.

    Example:
        >>> gateway = OpenAIGateway(api_key="sk-...")
        >>> result = gateway.translate(build_prompt("students absent on 2024-04-10"))
        >>> if isinstance(result, TranslationSuccess):
        ...     print(result.raw_text)
    """

    DEFAULT_MODEL = "gpt-4"
    DEFAULT_TEMPERATURE = 0.1  # favor deterministic SQL
    DEFAULT_TIMEOUT = 60.0

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: str | None = None,
        client: Any | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            api_key: OpenAI API key. Falls back to OPENAI_API_KEY env var.
            model: Model name. Defaults to gpt-4.
            temperature: Sampling temperature. Defaults to 0.1.
            timeout: Request timeout in seconds. Defaults to 60.
            base_url: Optional endpoint override.
            client: Pre-built OpenAI-compatible client (skips client construction).

        Without a key or a client, every translation fails as unreachable.
        """
        if client is None:
            api_key = api_key or os.environ.get("OPENAI_API_KEY")
            if api_key:
                client = OpenAI(
                    api_key=api_key,
                    base_url=base_url,
                    timeout=timeout,
                    max_retries=0,
                )
            else:
                logger.info("No OpenAI API key configured, translated questions will fail")
        self._client: Any | None = client
        self._model = model
        self._temperature = temperature

    @classmethod
    def from_settings(cls, settings: Settings) -> OpenAIGateway:
        """Build a gateway from process-wide settings."""
        return cls(
            api_key=settings.openai_api_key,
            model=settings.model,
            temperature=settings.temperature,
            timeout=settings.timeout_seconds,
            base_url=settings.openai_base_url,
        )

    def translate(self, prompt: str) -> TranslationResult:
        """Send one chat completion request.

        Args:
            prompt: Translation prompt text.

        Returns:
            TranslationSuccess, or TranslationFailure tagged unreachable,
            malformed_response or empty.
        """
        if self._client is None:
            return TranslationFailure(FailureKind.UNREACHABLE, NO_CREDENTIAL)

        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self._temperature,
            )
        except openai.APIResponseValidationError as e:
            logger.error(f"Malformed response from text-generation service: {e}")
            return TranslationFailure(FailureKind.MALFORMED_RESPONSE, str(e))
        except (openai.APIConnectionError, openai.APIStatusError) as e:
            logger.error(f"Error calling text-generation service: {e}", exc_info=True)
            return TranslationFailure(FailureKind.UNREACHABLE, str(e))

        choices = getattr(response, "choices", None)
        if not choices:
            logger.warning("Received response without choices from text-generation service")
            return TranslationFailure(FailureKind.MALFORMED_RESPONSE, "response has no choices")

        message = getattr(choices[0], "message", None)
        if message is None or not hasattr(message, "content"):
            logger.warning("Received unexpected response format from text-generation service")
            return TranslationFailure(FailureKind.MALFORMED_RESPONSE, "choice has no message")

        content = message.content
        if not content or not content.strip():
            return TranslationFailure(FailureKind.EMPTY, "completion has no content")

        return TranslationSuccess(content)

    @property
    def model_name(self) -> str:
        """Model identifier used for completions."""
        return self._model
