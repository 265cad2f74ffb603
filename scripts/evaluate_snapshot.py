#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from hrms_engine.errors import EngineError
from hrms_engine.logging_utils import setup_logging
from hrms_engine.schemas import Carryover
from hrms_engine.services.calendar_days import to_calendar_date
from hrms_engine.services.report import build_employee_report, load_snapshot


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the monthly engine report for one employee snapshot.")
    parser.add_argument("snapshot", type=Path, help="Path to an employee snapshot JSON file")
    parser.add_argument("--year", type=int, required=True)
    parser.add_argument("--month", type=int, required=True, choices=range(1, 13))
    parser.add_argument("--as-of", required=True, help="Evaluation date (YYYY-MM-DD or DD-MM-YYYY)")
    parser.add_argument("--seed-low-seconds", type=int, default=0)
    parser.add_argument("--seed-leave-hours", type=float, default=0.0)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logging()

    as_of: date | None = to_calendar_date(args.as_of)
    if as_of is None:
        print(json.dumps({"error": {"code": "INVALID_AS_OF", "message": f"Unparseable date: {args.as_of}"}}))
        return 1

    seed = None
    if args.seed_low_seconds or args.seed_leave_hours:
        seed = Carryover(
            extra_time_leave_hours=args.seed_leave_hours,
            low_time_seconds=args.seed_low_seconds,
        )

    try:
        raw = args.snapshot.read_bytes()
    except OSError as exc:
        print(json.dumps({"error": {"code": "SNAPSHOT_UNREADABLE", "message": str(exc)}}))
        return 1

    try:
        snapshot = load_snapshot(raw)
    except EngineError as exc:
        print(json.dumps(exc.to_payload(), ensure_ascii=False, indent=2))
        return 1

    report = build_employee_report(
        snapshot,
        year=args.year,
        month=args.month,
        as_of=as_of,
        carryover_seed=seed,
    )
    print(json.dumps(report.model_dump(mode="json"), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
