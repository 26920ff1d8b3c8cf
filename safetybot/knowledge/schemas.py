"""Pydantic models for knowledge API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class KnowledgeItemCreate(BaseModel):
    """Request to append an FAQ item to a group."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    category_id: str = Field(..., min_length=1, description="Target FAQ group id")
    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)
    keywords: list[str] = Field(..., min_length=1, description="One keyword or a list of keywords")

    @field_validator("category_id", "question", "answer")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("keywords", mode="before")
    @classmethod
    def coerce_keywords(cls, value):
        if isinstance(value, str):
            value = [value]
        if isinstance(value, list):
            value = [str(v).strip() for v in value if str(v).strip()]
        return value


class KnowledgeItemRead(BaseModel):
    question: str
    answer: str
    keywords: list[str]


class KnowledgeItemAdded(BaseModel):
    message: str
    category_id: str = Field(..., serialization_alias="categoryId")
    item: KnowledgeItemRead
    count: int
