"""Accident case CSV to ``jirei.json`` conversion."""

from __future__ import annotations

import csv
import io
import json
import logging
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

CASE_COLUMNS = (
    "id",
    "url",
    "title",
    "situation",
    "cause",
    "measure",
    "industry",
    "equipment",
    "type",
    "categorization",
)

# id, url, title, situation, cause and measure are mandatory
MIN_COLUMNS = 6


def parse_cases_csv(text: str) -> list[dict[str, str]]:
    """Parse the case CSV (header row first) into case dicts.

    Quoted fields may span lines and contain doubled quotes. A leading BOM
    is ignored. Rows with fewer than six columns or a blank id are skipped.
    """
    text = text.lstrip("\ufeff")
    reader = csv.reader(io.StringIO(text, newline=""))
    next(reader, None)

    cases = []
    for row in reader:
        if len(row) < MIN_COLUMNS or not row[0].strip():
            continue
        padded = row + [""] * (len(CASE_COLUMNS) - len(row))
        cases.append({name: padded[i].strip() for i, name in enumerate(CASE_COLUMNS)})
    return cases


def convert_cases_csv(csv_path: Path, json_path: Path) -> int:
    """Convert ``csv_path`` into the case envelope at ``json_path``.

    Returns:
        Number of cases written.
    """
    with open(csv_path, encoding="utf-8-sig", newline="") as f:
        cases = parse_cases_csv(f.read())

    document = {
        "version": "1.0",
        "generated": datetime.now(timezone.utc).isoformat(),
        "totalCases": len(cases),
        "cases": cases,
    }
    json_path.parent.mkdir(parents=True, exist_ok=True)
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(document, f, ensure_ascii=False, indent=2)

    logger.info("Wrote %d cases to %s", len(cases), json_path)
    return len(cases)
