"""Record types held by the knowledge store."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RecordCategory(str, Enum):
    """Collection a record belongs to."""

    KNOWLEDGE = "knowledge"
    CASE = "case"
    LAW = "law"


@dataclass(frozen=True)
class Record:
    """A single searchable unit: FAQ item, accident case report or law article.

    ``title``, ``tags`` and ``body`` are the scored fields. Variant-specific
    detail lives in the optional secondary fields, which are empty strings for
    variants that do not have them.

    ``source_url`` is kept exactly as loaded. Nothing in the system builds
    a URL from ``id`` or ``article_number``.
    """

    id: str
    category: RecordCategory
    title: str
    tags: tuple[str, ...] = ()
    body: str = ""
    source_url: str | None = None

    # Case reports
    situation: str = ""
    cause: str = ""

    # Law articles
    law_name: str = ""
    article_number: str = ""
    chapter: str = ""

    # FAQ items
    group_id: str = ""
    group_name: str = ""

    @property
    def searchable_body(self) -> str:
        """Body text plus secondary text fields, used for body-term matching."""
        parts = [self.body, self.situation, self.cause, self.chapter, self.article_number]
        return "\n".join(p for p in parts if p)


@dataclass
class KnowledgeGroup:
    """A named FAQ group from the knowledge document (e.g. ``safety_basics``)."""

    id: str
    name: str
    items: list[Record]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "items": [faq_item_to_dict(item) for item in self.items],
        }


def faq_item_to_dict(record: Record) -> dict:
    """Serialize an FAQ record back to the on-disk item shape."""
    item = {
        "question": record.title,
        "answer": record.body,
        "keywords": list(record.tags),
    }
    if record.source_url:
        item["url"] = record.source_url
    return item
