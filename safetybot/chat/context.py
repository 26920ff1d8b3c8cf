"""Rendering of search results into the context block sent to the LLM.

The block is plain text appended to the user's message. Each section carries
its own instruction line because the LLM is where the citation and
disclosure rules are actually enforced.
"""

from __future__ import annotations

from collections.abc import Sequence

from safetybot.knowledge.models import Record, RecordCategory
from safetybot.search.ranker import ScoredRecord, SearchResult

from .policy import DisclosurePolicy, classify_disclosure


DEFAULT_SECTION_ORDER: tuple[RecordCategory, ...] = (
    RecordCategory.KNOWLEDGE,
    RecordCategory.CASE,
    RecordCategory.LAW,
)

KNOWLEDGE_HEADER = "【参考ナレッジベース】"
CASE_DETAIL_HEADER = "【関連する災害事例】"
CASE_MEASURE_HEADER = "【関連する安全対策（災害事例より）】"
LAW_HEADER = "【関連する法令】"

CASE_DETAIL_INSTRUCTION = (
    "指示: ユーザーは事例の紹介を求めています。事例を紹介する際は、各事例について"
    "「事例名」「発生状況」「原因」「対策」「詳細URL」の順で示してください。"
    "詳細URLには各事例の「URL:」欄に記載された文字列を一字一句そのまま使用し、"
    "URLを推測・生成・短縮・変更してはいけません。「URL:」欄がない事例にはURLを示さないでください。"
)

CASE_MEASURE_INSTRUCTION = (
    "指示: これは事例を求めていない一般的な質問です。以下の対策内容のみを回答の参考にし、"
    "災害事例の事例名・発生状況・原因・URLは回答に含めないでください。"
)

LAW_INSTRUCTION = (
    "指示: 法令を引用する場合は、以下に記載された条文のみを根拠とし、"
    "記載のない条文番号やURLを創作してはいけません。"
    "URLは「URL:」欄に記載されたものを一字一句そのまま使用し、"
    "「URL:」欄がない条文についてはURLを示さないでください。"
)


def summarize(text: str, max_chars: int) -> str:
    """First sentence of ``text``, truncated to ``max_chars`` characters."""
    text = " ".join(text.split())
    if not text:
        return ""
    end = text.find("。")
    sentence = text[: end + 1] if end != -1 else text
    if len(sentence) > max_chars:
        sentence = sentence[:max_chars].rstrip() + "…"
    return sentence


def law_heading(record: Record) -> str:
    """Heading such as ``労働安全衛生規則 第518条（作業床の設置等）``."""
    parts = [p for p in (record.law_name, record.article_number) if p]
    heading = " ".join(parts)
    if record.title and record.title not in heading:
        heading = f"{heading}（{record.title}）" if heading else record.title
    return heading


class ContextFormatter:
    """Renders selected records into the LLM context block.

    Args:
        law_summary_chars: Maximum length of the law article summary.
    """

    def __init__(self, law_summary_chars: int = 120):
        self.law_summary_chars = law_summary_chars

    def format(
        self,
        result: SearchResult,
        user_query: str,
        order: Sequence[RecordCategory] | None = None,
    ) -> str:
        """Render ``result`` for ``user_query``.

        Args:
            result: Selected records per category.
            user_query: The raw user message; decides the case disclosure policy.
            order: Section order; defaults to knowledge, cases, laws.

        Returns:
            The context text, or an empty string when nothing was selected.
        """
        policy = classify_disclosure(user_query)
        sections = []
        for category in order or DEFAULT_SECTION_ORDER:
            items = result.for_category(category)
            if not items:
                continue
            if category is RecordCategory.KNOWLEDGE:
                sections.append(self.format_knowledge(items))
            elif category is RecordCategory.CASE:
                sections.append(self.format_cases(items, policy))
            elif category is RecordCategory.LAW:
                sections.append(self.format_laws(items))

        if not sections:
            return ""
        return "\n\n" + "\n\n".join(sections) + "\n"

    def format_knowledge(self, items: list[ScoredRecord]) -> str:
        lines = [KNOWLEDGE_HEADER]
        for i, item in enumerate(items, 1):
            lines.append(f"{i}. Q: {item.record.title}")
            lines.append(f"   A: {item.record.body}")
        return "\n".join(lines)

    def format_cases(self, items: list[ScoredRecord], policy: DisclosurePolicy) -> str:
        if policy is DisclosurePolicy.EXAMPLES_REQUESTED:
            lines = [CASE_DETAIL_HEADER, CASE_DETAIL_INSTRUCTION]
            for i, item in enumerate(items, 1):
                record = item.record
                lines.append(f"{i}. 事例名: {record.title}")
                lines.append(f"   発生状況: {record.situation}")
                lines.append(f"   原因: {record.cause}")
                lines.append(f"   対策: {record.body}")
                if record.source_url:
                    lines.append(f"   URL: {record.source_url}")
            return "\n".join(lines)

        lines = [CASE_MEASURE_HEADER, CASE_MEASURE_INSTRUCTION]
        for i, item in enumerate(items, 1):
            lines.append(f"{i}. 対策: {item.record.body}")
        return "\n".join(lines)

    def format_laws(self, items: list[ScoredRecord]) -> str:
        lines = [LAW_HEADER, LAW_INSTRUCTION]
        for i, item in enumerate(items, 1):
            record = item.record
            lines.append(f"{i}. {law_heading(record)}")
            if record.chapter:
                lines.append(f"   章: {record.chapter}")
            summary = summarize(record.body, self.law_summary_chars)
            if summary:
                lines.append(f"   要旨: {summary}")
            if record.source_url:
                lines.append(f"   URL: {record.source_url}")
        return "\n".join(lines)
