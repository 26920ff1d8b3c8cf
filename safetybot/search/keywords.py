"""Query term extraction for Japanese free-text questions.

Japanese text has no word boundaries, so plain token matching misses most
compound words (a query for 階段転落事例 never appears verbatim in a record).
Long tokens are therefore also broken into 2- and 3-character n-grams, and a
small domain vocabulary adds hazard terms that a workplace implies.
"""

from __future__ import annotations

import re


# Whitespace plus ASCII and Japanese punctuation
SPLIT_PATTERN = re.compile(r"[\s,.;:、。，．・?？!！「」『』（）()\[\]【】〔〕\"'“”‘’/／]+")

MIN_TERM_LENGTH = 2

# Hazard types, locations and equipment matched verbatim against the raw query
DOMAIN_VOCABULARY: tuple[str, ...] = (
    # Hazard types
    "墜落", "転落", "転倒", "挟まれ", "巻き込まれ", "激突", "飛来", "落下",
    "崩壊", "倒壊", "感電", "火災", "爆発", "やけど", "火傷", "切れ", "こすれ",
    "中毒", "酸欠", "熱中症", "腰痛", "騒音", "粉じん", "有機溶剤", "化学物質",
    # Locations and workplace types
    "倉庫", "建設現場", "工事現場", "工場", "製造現場", "厨房", "店舗",
    "事務所", "物流", "足場", "屋根", "階段", "高所", "タンク", "マンホール",
    # Equipment
    "フォークリフト", "クレーン", "移動式クレーン", "はしご", "脚立",
    "ローラー", "コンベヤ", "プレス", "チェーンソー", "グラインダー",
    "トラック", "重機", "ドラグ・ショベル", "保護具", "安全帯", "墜落制止用器具",
)

# Workplace terms and the hazards commonly associated with them
ENVIRONMENT_ASSOCIATIONS: dict[str, tuple[str, ...]] = {
    "倉庫": ("フォークリフト", "荷崩れ", "転倒", "墜落"),
    "物流": ("フォークリフト", "トラック", "荷崩れ", "腰痛"),
    "建設現場": ("墜落", "転落", "足場", "崩壊"),
    "工事現場": ("墜落", "転落", "足場", "重機"),
    "工場": ("挟まれ", "巻き込まれ", "プレス", "コンベヤ"),
    "製造現場": ("挟まれ", "巻き込まれ", "プレス", "コンベヤ"),
    "厨房": ("切れ", "やけど", "転倒"),
    "店舗": ("転倒", "脚立", "腰痛"),
    "事務所": ("転倒", "腰痛"),
    "屋根": ("墜落", "踏み抜き"),
    "高所": ("墜落", "安全帯", "墜落制止用器具"),
    "タンク": ("酸欠", "中毒"),
    "マンホール": ("酸欠", "中毒"),
}


def ngrams(term: str, size: int) -> list[str]:
    """Return every contiguous substring of ``term`` of length ``size``."""
    return [term[i : i + size] for i in range(len(term) - size + 1)]


class KeywordExtractor:
    """Derives query terms from a user message.

    Args:
        bigram_min_length: Base terms at least this long also emit bigrams.
        trigram_min_length: Base terms at least this long also emit trigrams.
        use_vocabulary: Whether to add domain vocabulary matches and their
            associated hazard terms.
    """

    def __init__(
        self,
        bigram_min_length: int = 4,
        trigram_min_length: int = 5,
        use_vocabulary: bool = True,
        vocabulary: tuple[str, ...] = DOMAIN_VOCABULARY,
        associations: dict[str, tuple[str, ...]] | None = None,
    ):
        self.bigram_min_length = bigram_min_length
        self.trigram_min_length = trigram_min_length
        self.use_vocabulary = use_vocabulary
        self.vocabulary = vocabulary
        self.associations = ENVIRONMENT_ASSOCIATIONS if associations is None else associations

    def base_terms(self, query: str) -> list[str]:
        """Split a query on whitespace and punctuation, dropping short tokens."""
        return [t for t in SPLIT_PATTERN.split(query.lower()) if len(t) >= MIN_TERM_LENGTH]

    def extract(self, query: str) -> list[str]:
        """Extract the de-duplicated query terms, in first-seen order.

        Returns an empty list for empty or whitespace-only input.
        """
        if not query or not query.strip():
            return []

        terms: list[str] = []
        seen: set[str] = set()

        def add(term: str) -> None:
            if term not in seen:
                seen.add(term)
                terms.append(term)

        for term in self.base_terms(query):
            add(term)
            if len(term) >= self.bigram_min_length:
                for gram in ngrams(term, 2):
                    add(gram)
            if len(term) >= self.trigram_min_length:
                for gram in ngrams(term, 3):
                    add(gram)

        if self.use_vocabulary:
            lowered = query.lower()
            for word in self.vocabulary:
                if word.lower() in lowered:
                    add(word.lower())
                    for related in self.associations.get(word, ()):
                        add(related.lower())

        if not terms:
            compact = re.sub(r"\s+", "", query.lower())
            if len(compact) >= MIN_TERM_LENGTH:
                add(compact)

        return terms
