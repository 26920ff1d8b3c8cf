"""Disclosure policy for accident case reports.

Case detail (situation, cause, source URL) is shown only when the user asks
for examples. Any other question gets the remedial measures alone.
"""

from __future__ import annotations

import re
from enum import Enum


class DisclosurePolicy(str, Enum):
    EXAMPLES_REQUESTED = "examples_requested"
    GENERAL_INQUIRY = "general_inquiry"


EXAMPLE_REQUEST_PATTERN = re.compile(
    r"事例|実例|具体例|災害例|事故例|(?<!バイ)ケース(?!バイケース)|例を(?:教え|見せ|挙げ|あげ|示し|紹介)"
    r"|examples?\b|case stud(?:y|ies)|show me (?:a |some )?cases?",
    re.IGNORECASE,
)

DETAIL_REQUEST_PATTERN = re.compile(r"詳しく|詳細|もっと教えて|くわしく|in detail|more detail", re.IGNORECASE)


def classify_disclosure(message: str) -> DisclosurePolicy:
    """Decide which disclosure policy applies to ``message``."""
    if EXAMPLE_REQUEST_PATTERN.search(message or ""):
        return DisclosurePolicy.EXAMPLES_REQUESTED
    return DisclosurePolicy.GENERAL_INQUIRY


def wants_detail(message: str) -> bool:
    """Whether the user explicitly asked for a detailed answer."""
    return bool(DETAIL_REQUEST_PATTERN.search(message or ""))
