"""Assembles the LLM request and invokes the configured provider."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from safetybot.config import Settings

from .errors import ChatError
from .prompts import ResponseLength, build_system_prompt
from .providers import ChatTurn, LLMProvider, build_provider

logger = logging.getLogger(__name__)

ALLOWED_ROLES = ("user", "assistant")


@dataclass(frozen=True)
class Reply:
    text: str
    provider: str
    model: str


def normalize_history(history: Iterable) -> list[ChatTurn]:
    """Keep user/assistant turns with content, as :class:`ChatTurn` objects.

    Accepts ``ChatTurn`` instances, objects with ``role``/``content``
    attributes, or dicts.
    """
    turns = []
    for turn in history or []:
        if isinstance(turn, dict):
            role, content = turn.get("role"), turn.get("content")
        else:
            role, content = getattr(turn, "role", None), getattr(turn, "content", None)
        if role in ALLOWED_ROLES and content:
            turns.append(ChatTurn(role=role, content=str(content)))
    return turns


class PromptDispatcher:
    """Sends the user turn plus knowledge context to the LLM.

    The provider adapter is created on first use, so a missing API key only
    fails chat requests and not application startup. There is no retry.

    Args:
        settings: Application settings (provider, models, token limits).
        provider: Pre-built adapter; skips ``provider_factory`` when given.
        provider_factory: Builds the adapter from settings.
    """

    def __init__(
        self,
        settings: Settings,
        provider: LLMProvider | None = None,
        provider_factory: Callable[[Settings], LLMProvider] = build_provider,
    ):
        self.settings = settings
        self._provider = provider
        self._provider_factory = provider_factory

    @property
    def provider_name(self) -> str:
        if self._provider is not None and self._provider.name:
            return self._provider.name
        return self.settings.ai_provider

    def get_provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = self._provider_factory(self.settings)
        return self._provider

    def dispatch(
        self,
        user_message: str,
        context_text: str,
        history: Iterable,
        *,
        model: str | None = None,
        response_length: ResponseLength = "short",
    ) -> Reply:
        """Send one chat turn and return the model's reply.

        Raises:
            ChatError: Typed provider failure (not configured, rejected,
                timeout, malformed response, other upstream error).
        """
        provider = self.get_provider()
        model = model or self.settings.default_model_for()
        max_tokens = (
            self.settings.long_max_tokens if response_length == "long" else self.settings.short_max_tokens
        )

        try:
            text = provider.complete(
                build_system_prompt(response_length),
                normalize_history(history),
                user_message + context_text,
                model=model,
                max_tokens=max_tokens,
                temperature=self.settings.temperature,
            )
        except ChatError as e:
            logger.error(
                "LLM call failed (provider=%s model=%s type=%s): %s",
                self.provider_name,
                model,
                e.error_type,
                e.detail,
            )
            raise

        return Reply(text=text, provider=self.provider_name, model=model)
