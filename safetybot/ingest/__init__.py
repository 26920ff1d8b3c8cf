"""Offline conversion of source data into the knowledge JSON files."""

from .cases import CASE_COLUMNS, convert_cases_csv, parse_cases_csv
from .laws import LAW_DIRECTORIES, convert_law_markdown, parse_law_markdown

__all__ = [
    "CASE_COLUMNS",
    "convert_cases_csv",
    "parse_cases_csv",
    "LAW_DIRECTORIES",
    "convert_law_markdown",
    "parse_law_markdown",
]
