"""Chat domain - context assembly, disclosure policy and LLM dispatch."""

from .router import router
from .schemas import ChatRequest, ChatResponse, HealthResponse, HistoryMessage
from .policy import DisclosurePolicy, classify_disclosure, wants_detail
from .context import ContextFormatter, law_heading, summarize
from .prompts import SYSTEM_PROMPT, build_system_prompt
from .errors import (
    ChatError,
    MalformedUpstreamResponseError,
    ProviderNotConfiguredError,
    UpstreamError,
    UpstreamRejectedError,
    UpstreamTimeoutError,
)
from .providers import (
    AnthropicProvider,
    ChatTurn,
    GeminiProvider,
    LLMProvider,
    OpenAIProvider,
    build_provider,
)
from .dispatcher import PromptDispatcher, Reply, normalize_history

__all__ = [
    # Router
    "router",
    # Schemas
    "ChatRequest",
    "ChatResponse",
    "HealthResponse",
    "HistoryMessage",
    # Policy
    "DisclosurePolicy",
    "classify_disclosure",
    "wants_detail",
    # Context
    "ContextFormatter",
    "law_heading",
    "summarize",
    # Prompts
    "SYSTEM_PROMPT",
    "build_system_prompt",
    # Errors
    "ChatError",
    "MalformedUpstreamResponseError",
    "ProviderNotConfiguredError",
    "UpstreamError",
    "UpstreamRejectedError",
    "UpstreamTimeoutError",
    # Providers
    "AnthropicProvider",
    "ChatTurn",
    "GeminiProvider",
    "LLMProvider",
    "OpenAIProvider",
    "build_provider",
    # Dispatch
    "PromptDispatcher",
    "Reply",
    "normalize_history",
]
