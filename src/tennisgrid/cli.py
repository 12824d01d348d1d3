"""Command-line interface for generating and diagnosing daily grids."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Optional

from tennisgrid.config import get_settings
from tennisgrid.errors import GridError
from tennisgrid.models import Category
from tennisgrid.persistence import CompatibilityStore
from tennisgrid.puzzles import PuzzleService
from tennisgrid.repository import load_snapshot


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate tennis category-grid puzzles")
    parser.add_argument("snapshot", type=Path, help="Path to players/tournaments JSON snapshot")
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Compatibility matrix SQLite path (defaults to TENNISGRID_DB_PATH or tennisgrid.sqlite)",
    )
    parser.add_argument("--no-cache", action="store_true", help="Ignore the stored compatibility matrix")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("catalog", help="List every candidate category")

    generate = subparsers.add_parser("generate", help="Generate the grid for a date")
    generate.add_argument("--date", type=date.fromisoformat, default=None, help="Puzzle date (YYYY-MM-DD)")
    generate.add_argument("--test-token", type=int, default=None, help="Numeric token shifting the seed for test runs")
    generate.add_argument("--max-attempts", type=int, default=None, help="Maximum selection/validation cycles")
    generate.add_argument("--timeout", type=float, default=None, help="Stop retrying after this many seconds")
    generate.add_argument("--output", type=Path, default=None, help="Optional path to write the puzzle JSON")

    explain = subparsers.add_parser("explain", help="Count answers for a row/column pair")
    explain.add_argument("row", help="Row category id")
    explain.add_argument("column", help="Column category id")

    rebuild = subparsers.add_parser("rebuild", help="Recompute the compatibility matrix")
    rebuild.add_argument("--report", type=Path, default=None, help="Optional path to write a summary JSON")
    return parser.parse_args(argv)


def _find_category(catalog: list[Category], category_id: str) -> Category:
    for category in catalog:
        if category.id == category_id:
            return category
    raise SystemExit(f"Unknown category id {category_id!r}; run the 'catalog' command to list ids")


def main(argv: Optional[list[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = get_settings()
    if args.db is not None:
        settings = replace(settings, db_path=args.db)

    try:
        repository = load_snapshot(args.snapshot)
        store = None if args.no_cache and args.command != "rebuild" else CompatibilityStore(settings.db_path)
        service = PuzzleService(repository, settings=settings, store=store)

        if args.command == "catalog":
            for category in service.catalog():
                print(f"{category.id}\t{category.type}\t{category.label}")

        elif args.command == "generate":
            puzzle = service.generate_daily_puzzle(
                args.date,
                args.test_token,
                max_attempts=args.max_attempts,
                timeout=args.timeout,
            )
            print(f"Daily quiz for {puzzle.date.isoformat()} (seed {puzzle.seed}, {puzzle.attempts} attempts)")
            print("Rows:    " + " | ".join(category.label for category in puzzle.quiz.rows))
            print("Columns: " + " | ".join(category.label for category in puzzle.quiz.columns))
            if puzzle.warning:
                print(f"Warning: {puzzle.warning}")
            if args.output:
                payload = {
                    "date": puzzle.date.isoformat(),
                    "quiz": puzzle.quiz.model_dump(mode="json"),
                    "seed": puzzle.seed,
                    "attempts": puzzle.attempts,
                    "solvable": puzzle.solvable,
                    "warning": puzzle.warning,
                }
                args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
                print(f"Wrote puzzle to {args.output}")

        elif args.command == "explain":
            catalog = service.catalog()
            row = _find_category(catalog, args.row)
            column = _find_category(catalog, args.column)
            explanation = service.explain_cell(row, column)
            print(f"{row.label} x {column.label}: {explanation.count} players ({explanation.source})")
            for name in explanation.sample_solutions:
                print(f"  - {name}")

        elif args.command == "rebuild":
            summary = service.rebuild_compatibility_matrix()
            print(
                f"Checked {summary.pairs_checked} pairs, {summary.valid_pairs} compatible "
                f"({summary.compatibility_rate * 100:.2f}%)"
            )
            if args.report:
                report_payload = {
                    "pairs_checked": summary.pairs_checked,
                    "valid_pairs": summary.valid_pairs,
                    "completed": summary.completed,
                    "category_metadata": [item.model_dump() for item in summary.category_metadata],
                }
                args.report.write_text(json.dumps(report_payload, indent=2), encoding="utf-8")
                print(f"Wrote rebuild report to {args.report}")
    except GridError as exc:
        raise SystemExit(f"error: {exc}") from exc


if __name__ == "__main__":
    main()
