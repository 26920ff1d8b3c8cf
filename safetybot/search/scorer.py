"""Weighted keyword relevance scoring."""

from __future__ import annotations

import re
from dataclasses import dataclass

from safetybot.knowledge.models import Record, RecordCategory


# Markers of a legal-intent question (article, clause, statute, obligation ...)
LEGAL_REGISTER_TERMS: tuple[str, ...] = (
    "条文", "条項", "法令", "法律", "法規", "規則", "政令", "省令", "施行令",
    "安衛法", "安衛則", "労働安全衛生法", "義務", "罰則", "違反", "規定", "定め",
)

ARTICLE_PATTERN = re.compile(r"第[0-9０-９一二三四五六七八九十百千]+条")


@dataclass(frozen=True)
class ScoringWeights:
    """Score increments per match type.

    Defaults rank an exact title hit above an exact tag hit, term hits in the
    title or tags above body hits.
    """

    title_exact: int = 5
    tag_exact: int = 4
    title_term: int = 2
    tag_term: int = 2
    body_term: int = 1
    case_bonus: int = 1
    law_bonus: int = 2


def has_legal_intent(query: str) -> bool:
    return any(term in query for term in LEGAL_REGISTER_TERMS) or bool(ARTICLE_PATTERN.search(query))


class RelevanceScorer:
    """Scores a record against a query. Zero means "not a match"."""

    def __init__(self, weights: ScoringWeights | None = None):
        self.weights = weights or ScoringWeights()

    def score(self, record: Record, query_raw: str, terms: list[str]) -> int:
        """Compute the relevance score of ``record``.

        Args:
            record: The record to score.
            query_raw: The user's message as typed.
            terms: Terms from :class:`KeywordExtractor`, already lowercased.

        Returns:
            Non-negative integer score.
        """
        query = query_raw.strip().lower()
        if not query and not terms:
            return 0

        w = self.weights
        score = 0

        title = record.title.lower()
        if query and query in title:
            score += w.title_exact
        else:
            score += w.title_term * sum(1 for t in terms if t in title)

        for tag in record.tags:
            tag_lower = tag.lower()
            if not tag_lower:
                continue
            if query and (tag_lower in query or query in tag_lower):
                score += w.tag_exact
            else:
                score += w.tag_term * sum(
                    1 for t in terms if t in tag_lower or tag_lower in t
                )

        body = record.searchable_body.lower()
        if body:
            score += w.body_term * sum(1 for t in terms if t in body)

        if score > 0:
            if record.category is RecordCategory.CASE:
                score += w.case_bonus
            elif record.category is RecordCategory.LAW and has_legal_intent(query):
                score += w.law_bonus

        return score
