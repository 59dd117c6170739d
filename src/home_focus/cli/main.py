from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

from ..core import evaluate_dashboard, normalize
from ..io import dump_result_file, load_snapshot_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hf-narrate",
        description="Arbitrate the dashboard focus narrative for a home snapshot.",
    )
    parser.add_argument("input", help="JSON file with system records, home score and flags")
    parser.add_argument(
        "--out",
        default="examples/output/narrative.json",
        help="Output JSON file path (default: examples/output/narrative.json)",
    )
    parser.add_argument(
        "--as-of",
        default="",
        help="Reference date (YYYY-MM-DD) for replacement-year math (default: today)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    input_path = Path(args.input).resolve()
    output_path = Path(args.out).resolve()

    if not input_path.exists() or not input_path.is_file():
        print(f"error: input file not found: {input_path}", file=sys.stderr)
        return 2

    try:
        as_of = date.fromisoformat(args.as_of) if args.as_of else None
    except ValueError:
        print(f"error: invalid --as-of date: {args.as_of}", file=sys.stderr)
        return 2

    try:
        snapshot = load_snapshot_file(input_path)
    except Exception as exc:
        print(f"error: invalid input: {exc}", file=sys.stderr)
        return 2

    context = normalize(
        snapshot.records,
        snapshot.home_score,
        has_overdue_maintenance=snapshot.flags.get("has_overdue_maintenance", False),
        has_changed_since_last_visit=snapshot.flags.get("has_changed_since_last_visit", False),
        is_new_user=snapshot.flags.get("is_new_user", False),
        as_of=as_of,
    )
    payload = evaluate_dashboard(context)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    dump_result_file(output_path, payload)

    print(f"state={payload['focus']['state']}")
    print(f"source={payload['focus']['source_system'] or '-'}")
    print(f"wrote={output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
