"""LLM provider adapters (Gemini, OpenAI, Anthropic).

Each adapter turns ``(system prompt, history, user message)`` into the shape
its SDK expects and maps SDK failures onto :mod:`safetybot.chat.errors`.
SDK clients are created with the configured timeout and with SDK-level
retries disabled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from safetybot.config import PROVIDER_KEY_ENV, Settings

from .errors import (
    MalformedUpstreamResponseError,
    ProviderNotConfiguredError,
    UpstreamError,
    UpstreamRejectedError,
    UpstreamTimeoutError,
)

logger = logging.getLogger(__name__)

# HTTP statuses that mean the provider refused the request itself
REJECTION_STATUSES = {401, 403, 429}


@dataclass(frozen=True)
class ChatTurn:
    """A prior conversation turn; ``role`` is ``user`` or ``assistant``."""

    role: str
    content: str


class LLMProvider:
    """Base class for provider adapters."""

    name: str = ""

    def complete(
        self,
        system_prompt: str,
        history: list[ChatTurn],
        user_message: str,
        *,
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        raise NotImplementedError


# =============================================================================
# Google Gemini
# =============================================================================


class GeminiProvider(LLMProvider):
    name = "google"

    def __init__(self, api_key: str, timeout_seconds: float):
        from google import genai
        from google.genai import types

        self._types = types
        self._client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
        )

    def complete(self, system_prompt, history, user_message, *, model, max_tokens, temperature):
        import httpx
        from google.genai import errors

        types = self._types
        contents = [
            types.Content(
                role="model" if turn.role == "assistant" else "user",
                parts=[types.Part(text=turn.content)],
            )
            for turn in history
        ]
        contents.append(types.Content(role="user", parts=[types.Part(text=user_message)]))

        try:
            response = self._client.models.generate_content(
                model=model,
                contents=contents,
                config=types.GenerateContentConfig(
                    system_instruction=system_prompt,
                    max_output_tokens=max_tokens,
                    temperature=temperature,
                ),
            )
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(str(e), self.name) from e
        except errors.APIError as e:
            if e.code in REJECTION_STATUSES:
                raise UpstreamRejectedError(str(e), self.name) from e
            if e.code in (408, 504):
                raise UpstreamTimeoutError(str(e), self.name) from e
            raise UpstreamError(str(e), self.name) from e
        except httpx.HTTPError as e:
            raise UpstreamError(str(e), self.name) from e

        try:
            text = response.text
        except (AttributeError, ValueError) as e:
            raise MalformedUpstreamResponseError(str(e), self.name) from e
        if not text:
            raise MalformedUpstreamResponseError("Gemini returned no text", self.name)
        return text


# =============================================================================
# OpenAI
# =============================================================================


class OpenAIProvider(LLMProvider):
    name = "openai"

    def __init__(self, api_key: str, timeout_seconds: float):
        from openai import OpenAI

        self._client = OpenAI(api_key=api_key, timeout=timeout_seconds, max_retries=0)

    def complete(self, system_prompt, history, user_message, *, model, max_tokens, temperature):
        import openai

        messages = [{"role": "system", "content": system_prompt}]
        messages.extend({"role": turn.role, "content": turn.content} for turn in history)
        messages.append({"role": "user", "content": user_message})

        try:
            response = self._client.chat.completions.create(
                model=model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except openai.APITimeoutError as e:
            raise UpstreamTimeoutError(str(e), self.name) from e
        except (openai.RateLimitError, openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise UpstreamRejectedError(str(e), self.name) from e
        except openai.APIError as e:
            raise UpstreamError(str(e), self.name) from e

        if not response.choices or not response.choices[0].message.content:
            raise MalformedUpstreamResponseError("OpenAI returned no message content", self.name)
        return response.choices[0].message.content


# =============================================================================
# Anthropic
# =============================================================================


class AnthropicProvider(LLMProvider):
    name = "anthropic"

    def __init__(self, api_key: str, timeout_seconds: float):
        import anthropic

        self._client = anthropic.Anthropic(api_key=api_key, timeout=timeout_seconds, max_retries=0)

    def complete(self, system_prompt, history, user_message, *, model, max_tokens, temperature):
        import anthropic

        # The Messages API requires the conversation to open with a user turn
        turns = list(history)
        while turns and turns[0].role != "user":
            turns.pop(0)
        messages = [{"role": turn.role, "content": turn.content} for turn in turns]
        messages.append({"role": "user", "content": user_message})

        try:
            response = self._client.messages.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system_prompt,
                messages=messages,
            )
        except anthropic.APITimeoutError as e:
            raise UpstreamTimeoutError(str(e), self.name) from e
        except (anthropic.RateLimitError, anthropic.AuthenticationError, anthropic.PermissionDeniedError) as e:
            raise UpstreamRejectedError(str(e), self.name) from e
        except anthropic.APIError as e:
            raise UpstreamError(str(e), self.name) from e

        text = "".join(
            block.text for block in (response.content or []) if getattr(block, "type", None) == "text"
        )
        if not text:
            raise MalformedUpstreamResponseError("Anthropic returned no text block", self.name)
        return text


PROVIDERS: dict[str, type[LLMProvider]] = {
    "google": GeminiProvider,
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
}


def build_provider(settings: Settings) -> LLMProvider:
    """Create the adapter for ``settings.ai_provider``.

    Raises:
        ProviderNotConfiguredError: If the provider is unknown or has no API key.
    """
    name = settings.ai_provider
    provider_cls = PROVIDERS.get(name)
    if provider_cls is None:
        raise ProviderNotConfiguredError(f"Unknown AI provider: {name}", name)

    api_key = settings.api_key_for(name)
    if not api_key:
        raise ProviderNotConfiguredError(
            f"{PROVIDER_KEY_ENV[name]} is not set", name, key_name=PROVIDER_KEY_ENV[name]
        )

    logger.info("Using AI provider %s", name)
    return provider_cls(api_key, settings.llm_timeout_seconds)

