"""Command line entry: ``python -m safetybot.ingest {cases,laws} SOURCE OUTPUT``."""

import argparse
import logging
from pathlib import Path

from .cases import convert_cases_csv
from .laws import convert_law_markdown


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="python -m safetybot.ingest")
    sub = parser.add_subparsers(dest="command", required=True)

    cases = sub.add_parser("cases", help="Convert the accident case CSV to jirei.json")
    cases.add_argument("source", type=Path, nargs="?", default=Path("data/jirei.csv"))
    cases.add_argument("output", type=Path, nargs="?", default=Path("data/jirei.json"))

    laws = sub.add_parser("laws", help="Convert structured law markdown to laws.json")
    laws.add_argument("source", type=Path, nargs="?", default=Path("data/structured-laws"))
    laws.add_argument("output", type=Path, nargs="?", default=Path("data/laws.json"))

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    if args.command == "cases":
        count = convert_cases_csv(args.source, args.output)
    else:
        count = convert_law_markdown(args.source, args.output)
    print(f"✓ {count} records written to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
