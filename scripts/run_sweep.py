"""Run one aggregation sweep against the configured state backend.

Usage:
    python scripts/run_sweep.py                      # now
    python scripts/run_sweep.py --at "2026-02-01 12:00"
"""

from __future__ import annotations

import argparse
import importlib
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.wakeup_streak.wakeup_streak.container import build_container
from src.wakeup_streak.wakeup_streak.main import configure_logging


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run the daily wake-up aggregation once.")
    parser.add_argument("--at", help="synthetic local time, YYYY-MM-DD HH:MM")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(settings)

    now = datetime.strptime(args.at, "%Y-%m-%d %H:%M") if args.at else container.clock.now()
    result = container.scheduler.trigger(now)
    if result is None:
        raise SystemExit("A sweep is already running.")

    for o in result.outcomes:
        status = "delivered" if o.delivered else "NOT delivered"
        print(f"{o.group_id}: {o.kind.value} streak={o.current_streak} best={o.best_streak} ({status})")
    print(f"OK: {len(result.outcomes)} group(s) judged at {now:%Y-%m-%d %H:%M}")


if __name__ == "__main__":
    main()
