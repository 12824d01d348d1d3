"""Lightweight REST client for the tennisgrid API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def _load_category(raw: str) -> dict:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid category JSON: {exc}") from exc


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the tennisgrid REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--date", default=None, help="Puzzle date (YYYY-MM-DD); defaults to today")
    parser.add_argument("--test-token", default=None, help="Seed perturbation token for test runs")
    parser.add_argument("--output", type=Path, default=None, help="Write the daily quiz JSON here")
    parser.add_argument(
        "--explain",
        nargs=2,
        metavar=("ROW_JSON", "COL_JSON"),
        help="Explain a cell given two category JSON objects",
    )
    parser.add_argument("--rebuild", action="store_true", help="Trigger a compatibility matrix rebuild")
    parser.add_argument("--metadata", action="store_true", help="Print stored category metadata and exit")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url, timeout=None) as client:
        if args.metadata:
            resp = client.get("/compatibility/metadata")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        if args.rebuild:
            resp = client.post("/compatibility/rebuild")
            resp.raise_for_status()
            payload = resp.json()
            print(f"Checked {payload['pairs_checked']} pairs, {payload['valid_pairs']} compatible")
            return

        if args.explain:
            row, column = (_load_category(raw) for raw in args.explain)
            resp = client.post("/explain-cell", json={"row_category": row, "col_category": column})
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        params = {key: value for key, value in {"date": args.date, "t": args.test_token}.items() if value}
        resp = client.get("/daily-quiz", params=params)
        if resp.status_code == 503:
            raise SystemExit(f"Quiz unavailable: {resp.json().get('detail')}")
        resp.raise_for_status()
        payload = resp.json()
        print(f"Quiz for {payload['date']} (seed {payload['seed']}, {payload['attempts']} attempts)")
        print("Rows:", ", ".join(category["label"] for category in payload["quiz"]["rows"]))
        print("Columns:", ", ".join(category["label"] for category in payload["quiz"]["columns"]))
        if payload.get("warning"):
            print(f"Warning: {payload['warning']}")
        if args.output:
            args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            print(f"Saved quiz to {args.output}")


if __name__ == "__main__":
    main()
