"""Ordering and per-category selection of scored records."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from safetybot.knowledge.models import Record, RecordCategory


@dataclass(frozen=True)
class ScoredRecord:
    record: Record
    score: int

    @property
    def category(self) -> RecordCategory:
        return self.record.category


@dataclass(frozen=True)
class CategoryCaps:
    """Maximum number of records kept per category."""

    knowledge: int = 3
    case: int = 5
    law: int = 5

    def limit_for(self, category: RecordCategory) -> int:
        return {
            RecordCategory.KNOWLEDGE: self.knowledge,
            RecordCategory.CASE: self.case,
            RecordCategory.LAW: self.law,
        }[category]


@dataclass
class SearchResult:
    """Selected records per category, each list in rank order."""

    knowledge: list[ScoredRecord] = field(default_factory=list)
    cases: list[ScoredRecord] = field(default_factory=list)
    laws: list[ScoredRecord] = field(default_factory=list)
    terms: list[str] = field(default_factory=list)

    def for_category(self, category: RecordCategory) -> list[ScoredRecord]:
        return {
            RecordCategory.KNOWLEDGE: self.knowledge,
            RecordCategory.CASE: self.cases,
            RecordCategory.LAW: self.laws,
        }[category]

    @property
    def total(self) -> int:
        return len(self.knowledge) + len(self.cases) + len(self.laws)

    def __bool__(self) -> bool:
        return self.total > 0


def rank(scored: Iterable[ScoredRecord]) -> list[ScoredRecord]:
    """Sort by descending score, dropping zero scores.

    ``sorted`` is stable, so equal scores keep their input (store) order.
    """
    return sorted((s for s in scored if s.score > 0), key=lambda s: s.score, reverse=True)


def select_top(ranked: list[ScoredRecord], caps: CategoryCaps | None = None) -> SearchResult:
    """Take a prefix of each category from one globally ranked list."""
    caps = caps or CategoryCaps()
    result = SearchResult()
    for item in ranked:
        bucket = result.for_category(item.category)
        if len(bucket) < caps.limit_for(item.category):
            bucket.append(item)
    return result
