"""Search facade: extract terms, score the whole store, rank and select."""

from __future__ import annotations

import logging

from safetybot.config import Settings
from safetybot.knowledge.store import KnowledgeStore

from .keywords import KeywordExtractor
from .ranker import CategoryCaps, ScoredRecord, SearchResult, rank, select_top
from .scorer import RelevanceScorer, ScoringWeights

logger = logging.getLogger(__name__)


class KnowledgeSearch:
    """Keyword relevance search over a :class:`KnowledgeStore`.

    Every call rescans the full store; there is no index or cache.
    """

    def __init__(
        self,
        store: KnowledgeStore,
        extractor: KeywordExtractor | None = None,
        scorer: RelevanceScorer | None = None,
        caps: CategoryCaps | None = None,
    ):
        self.store = store
        self.extractor = extractor or KeywordExtractor()
        self.scorer = scorer or RelevanceScorer()
        self.caps = caps or CategoryCaps()

    @classmethod
    def from_settings(cls, store: KnowledgeStore, settings: Settings) -> KnowledgeSearch:
        """Build a search configured from the tuning values in ``settings``."""
        return cls(
            store,
            extractor=KeywordExtractor(
                bigram_min_length=settings.bigram_min_length,
                trigram_min_length=settings.trigram_min_length,
                use_vocabulary=settings.use_domain_vocabulary,
            ),
            scorer=RelevanceScorer(
                ScoringWeights(
                    title_exact=settings.weight_title_exact,
                    tag_exact=settings.weight_tag_exact,
                    title_term=settings.weight_title_term,
                    tag_term=settings.weight_tag_term,
                    body_term=settings.weight_body_term,
                    case_bonus=settings.weight_case_bonus,
                    law_bonus=settings.weight_law_bonus,
                )
            ),
            caps=CategoryCaps(
                knowledge=settings.max_knowledge_items,
                case=settings.max_case_items,
                law=settings.max_law_items,
            ),
        )

    def rank_all(self, query: str, terms: list[str] | None = None) -> list[ScoredRecord]:
        """Score every record and return all matches in rank order."""
        if not query.strip():
            return []
        if terms is None:
            terms = self.extractor.extract(query)
        return rank(
            ScoredRecord(record, self.scorer.score(record, query, terms))
            for record in self.store.records()
        )

    def search(self, query: str) -> SearchResult:
        """Return the top records per category for ``query``."""
        if not query.strip():
            return SearchResult()

        terms = self.extractor.extract(query)
        ranked = self.rank_all(query, terms)
        result = select_top(ranked, self.caps)
        result.terms = terms
        logger.debug(
            "Search %r: %d terms, %d matches (knowledge=%d cases=%d laws=%d)",
            query,
            len(terms),
            len(ranked),
            len(result.knowledge),
            len(result.cases),
            len(result.laws),
        )
        return result
