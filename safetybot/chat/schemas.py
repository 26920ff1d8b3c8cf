"""Pydantic models for chat API requests and responses."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, accepts snake_case too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HistoryMessage(CamelModel):
    """A prior turn of the conversation."""

    role: Literal["user", "assistant"]
    content: str


class ChatRequest(CamelModel):
    """Request for a chat reply."""

    message: str = Field(..., min_length=1, description="The user's message")
    conversation_history: list[HistoryMessage] = Field(default_factory=list)
    model: str | None = Field(None, description="Override the provider's default model")
    response_length: Literal["short", "long"] | None = Field(
        None, description="'short' (2-5 sentences) or 'long' (detailed)"
    )

    @field_validator("message")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ChatResponse(CamelModel):
    """Reply plus a summary of the knowledge that was injected."""

    reply: str
    knowledge_used: bool
    knowledge_count: int
    case_count: int
    law_count: int
    provider: str
    model: str


class HealthResponse(CamelModel):
    status: str
    provider: str
    api_configured: bool
    timestamp: str
