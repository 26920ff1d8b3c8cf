"""Search domain - keyword extraction, relevance scoring and ranking."""

from .keywords import DOMAIN_VOCABULARY, ENVIRONMENT_ASSOCIATIONS, KeywordExtractor, ngrams
from .scorer import LEGAL_REGISTER_TERMS, RelevanceScorer, ScoringWeights, has_legal_intent
from .ranker import CategoryCaps, ScoredRecord, SearchResult, rank, select_top
from .service import KnowledgeSearch

__all__ = [
    # Keywords
    "DOMAIN_VOCABULARY",
    "ENVIRONMENT_ASSOCIATIONS",
    "KeywordExtractor",
    "ngrams",
    # Scoring
    "LEGAL_REGISTER_TERMS",
    "RelevanceScorer",
    "ScoringWeights",
    "has_legal_intent",
    # Ranking
    "CategoryCaps",
    "ScoredRecord",
    "SearchResult",
    "rank",
    "select_top",
    # Facade
    "KnowledgeSearch",
]
