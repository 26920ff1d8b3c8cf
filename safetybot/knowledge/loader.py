"""Loaders for the on-disk knowledge files.

Three JSON documents back the store:

- ``knowledge.json``: FAQ envelope ``{version, generated, count, categories, metadata}``
  where each category is ``{id, name, items: [{question, answer, keywords}]}``.
- ``jirei.json``: accident case reports, either a flat array or the converter
  envelope ``{version, generated, totalCases, cases: [...]}``.
- ``laws.json``: law articles, either a flat array or the converter envelope
  ``{version, generated, totalArticles, laws: [...]}``.

The ``load_*`` functions raise :class:`StoreLoadError` on missing or malformed
files. :meth:`KnowledgeStore.load` catches it and falls back to an empty
collection.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .models import KnowledgeGroup, Record, RecordCategory


class StoreLoadError(Exception):
    """Raised when a knowledge file cannot be read or parsed."""

    pass


@dataclass
class KnowledgeDocument:
    """Parsed FAQ document with its envelope fields."""

    groups: list[KnowledgeGroup] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    version: str = "1.0"
    generated: str | None = None


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise StoreLoadError(f"Knowledge file not found: {path}")
    try:
        with open(path, encoding="utf-8-sig") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise StoreLoadError(f"Failed to read {path}: {e}") from e


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_tags(values: Any) -> tuple[str, ...]:
    """Normalize a keyword value (string or list) into a duplicate-free tuple."""
    if values is None:
        return ()
    if isinstance(values, str):
        values = [values]
    tags: list[str] = []
    for value in values:
        tag = _as_str(value)
        if tag and tag not in tags:
            tags.append(tag)
    return tuple(tags)


def _optional_url(raw: dict) -> str | None:
    # Kept byte-for-byte; only surrounding whitespace from the file is dropped
    url = raw.get("url") or raw.get("sourceUrl") or raw.get("source_url")
    if not url:
        return None
    return str(url).strip() or None


def _records_array(data: Any, envelope_key: str, path: Path) -> list[dict]:
    if isinstance(data, list):
        items = data
    elif isinstance(data, dict) and isinstance(data.get(envelope_key), list):
        items = data[envelope_key]
    else:
        raise StoreLoadError(f"{path}: expected an array or an object with '{envelope_key}'")
    return [item for item in items if isinstance(item, dict)]


# =============================================================================
# FAQ items
# =============================================================================


def faq_record(group_id: str, group_name: str, index: int, raw: dict) -> Record:
    """Build an FAQ record from an on-disk item."""
    return Record(
        id=f"{group_id}-{index}",
        category=RecordCategory.KNOWLEDGE,
        title=_as_str(raw.get("question")),
        tags=_as_tags(raw.get("keywords")),
        body=_as_str(raw.get("answer")),
        source_url=_optional_url(raw),
        group_id=group_id,
        group_name=group_name,
    )


def parse_knowledge_document(data: Any, path: Path | None = None) -> KnowledgeDocument:
    """Parse the FAQ envelope into groups of records."""
    if not isinstance(data, dict) or not isinstance(data.get("categories", []), list):
        raise StoreLoadError(f"{path or 'knowledge'}: expected an object with 'categories'")

    groups = []
    for raw_group in data.get("categories", []):
        if not isinstance(raw_group, dict) or not raw_group.get("id"):
            continue
        group_id = _as_str(raw_group["id"])
        group_name = _as_str(raw_group.get("name")) or group_id
        items = [
            faq_record(group_id, group_name, i, raw)
            for i, raw in enumerate(raw_group.get("items") or [])
            if isinstance(raw, dict)
        ]
        groups.append(KnowledgeGroup(id=group_id, name=group_name, items=items))

    metadata = data.get("metadata")
    return KnowledgeDocument(
        groups=groups,
        metadata=dict(metadata) if isinstance(metadata, dict) else {},
        version=_as_str(data.get("version")) or "1.0",
        generated=data.get("generated"),
    )


def load_knowledge_document(path: Path) -> KnowledgeDocument:
    """Load the FAQ document from ``path``.

    Raises:
        StoreLoadError: If the file is missing or malformed.
    """
    return parse_knowledge_document(_read_json(path), path)


# =============================================================================
# Case reports
# =============================================================================


def case_record(index: int, raw: dict) -> Record:
    """Build a case-report record.

    Tags are the explicit ``keywords`` (if any) followed by the classification
    columns of the case CSV (industry, equipment, accident type, categorization).
    """
    tags = _as_tags(
        list(_as_tags(raw.get("keywords")))
        + [raw.get(key) for key in ("industry", "equipment", "type", "categorization")]
    )
    return Record(
        id=_as_str(raw.get("id")) or f"case-{index}",
        category=RecordCategory.CASE,
        title=_as_str(raw.get("title")),
        tags=tags,
        body=_as_str(raw.get("measure")),
        source_url=_optional_url(raw),
        situation=_as_str(raw.get("situation")),
        cause=_as_str(raw.get("cause")),
    )


def load_cases(path: Path) -> list[Record]:
    """Load accident case reports from ``path``.

    Raises:
        StoreLoadError: If the file is missing or malformed.
    """
    items = _records_array(_read_json(path), "cases", path)
    return [case_record(i, raw) for i, raw in enumerate(items)]


# =============================================================================
# Law articles
# =============================================================================


def law_record(index: int, raw: dict) -> Record:
    """Build a law-article record.

    Tags come from the front-matter ``tags`` only. The law name stays out of
    the tags because its bigrams (安全, 衛生, 労働) occur in most questions.
    """
    law_name = _as_str(raw.get("law")) or _as_str(raw.get("category"))
    article_number = _as_str(raw.get("articleNumber") or raw.get("article_number"))
    record_id = _as_str(raw.get("id"))
    if not record_id:
        record_id = f"{law_name}-{article_number}" if law_name and article_number else f"law-{index}"
    return Record(
        id=record_id,
        category=RecordCategory.LAW,
        title=_as_str(raw.get("title")),
        tags=_as_tags(raw.get("tags")),
        body=_as_str(raw.get("content")),
        source_url=_optional_url(raw),
        law_name=law_name,
        article_number=article_number,
        chapter=_as_str(raw.get("chapter")),
    )


def load_laws(path: Path) -> list[Record]:
    """Load law articles from ``path``.

    Raises:
        StoreLoadError: If the file is missing or malformed.
    """
    items = _records_array(_read_json(path), "laws", path)
    return [law_record(i, raw) for i, raw in enumerate(items)]
