"""Structured law markdown to ``laws.json`` conversion.

Each article is one markdown file::

    ---
    tags:
      - 墜落
      - 作業床
    url: https://laws.e-gov.go.jp/law/...   (optional)
    ---
    # 第518条（作業床の設置等）
    **法令:** 労働安全衛生規則
    **条文番号:** 第518条
    **章:** 第二編 第九章 墜落、飛来崩壊等による危険の防止

    ## 条文
    事業者は、高さが二メートル以上の箇所で...

Files are grouped in one sub-directory per law. The URL is copied from the
front matter when present and is never derived from the article number.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

# Directory name -> law name, in output order
LAW_DIRECTORIES = {
    "aneihou": "労働安全衛生法",
    "sekourei": "労働安全衛生法施行令",
    "kisoku": "労働安全衛生規則",
}

FRONT_MATTER = re.compile(r"^---\n(.*?)\n---", re.DOTALL)
TITLE = re.compile(r"^# (.+)$", re.MULTILINE)
LAW_NAME = re.compile(r"\*\*法令:\*\* (.+)$", re.MULTILINE)
ARTICLE_NUMBER = re.compile(r"\*\*条文番号:\*\* (.+)$", re.MULTILINE)
CHAPTER = re.compile(r"\*\*章:\*\* (.+)$", re.MULTILINE)
BODY = re.compile(r"## 条文\s*\n(.+)\Z", re.DOTALL)


def _match(pattern: re.Pattern, text: str) -> str:
    m = pattern.search(text)
    return m.group(1).strip() if m else ""


def parse_law_markdown(content: str, default_law: str) -> dict | None:
    """Parse one article file. Returns ``None`` when a required part is missing."""
    content = content.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")

    front = FRONT_MATTER.match(content)
    if not front:
        return None
    try:
        meta = yaml.safe_load(front.group(1)) or {}
    except yaml.YAMLError as e:
        logger.warning("Invalid front matter: %s", e)
        return None
    if not isinstance(meta, dict):
        meta = {}

    title = _match(TITLE, content)
    body = _match(BODY, content)
    if not title or not body:
        return None

    tags = meta.get("tags") or []
    if isinstance(tags, str):
        tags = [tags]

    law = {
        "category": default_law,
        "law": _match(LAW_NAME, content) or default_law,
        "articleNumber": _match(ARTICLE_NUMBER, content),
        "chapter": _match(CHAPTER, content),
        "title": title,
        "content": body,
        "tags": [str(t).strip() for t in tags if str(t).strip()],
    }
    url = meta.get("url") or meta.get("source_url")
    if url:
        law["url"] = str(url).strip()
    return law


def convert_law_markdown(laws_dir: Path, json_path: Path) -> int:
    """Convert every article under ``laws_dir`` into the law envelope at ``json_path``.

    Returns:
        Number of articles written.
    """
    laws = []
    for directory, law_name in LAW_DIRECTORIES.items():
        law_dir = laws_dir / directory
        if not law_dir.is_dir():
            logger.warning("Law directory not found: %s", law_dir)
            continue

        parsed = 0
        for path in sorted(law_dir.glob("*.md")):
            law = parse_law_markdown(path.read_text(encoding="utf-8"), law_name)
            if law is None:
                logger.debug("Skipped %s", path)
                continue
            laws.append(law)
            parsed += 1
        logger.info("%s: %d articles", law_name, parsed)

    document = {
        "version": "1.0",
        "generated": datetime.now(timezone.utc).isoformat(),
        "totalArticles": len(laws),
        "laws": laws,
    }
    json_path.parent.mkdir(parents=True, exist_ok=True)
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(document, f, ensure_ascii=False, indent=2)

    logger.info("Wrote %d articles to %s", len(laws), json_path)
    return len(laws)
