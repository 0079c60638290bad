"""Example: drive the engine directly (no Flask).

Goal: show that the transport is a thin layer; rules live in the engine.
"""

from datetime import datetime

from config import testing

from src.wakeup_streak.wakeup_streak.common.clock import FixedClock
from src.wakeup_streak.wakeup_streak.container import build_container


def main():
    clock = FixedClock(datetime(2026, 2, 2, 6, 55))
    container = build_container(testing, clock=clock)
    engine = container.engine

    engine.on_time_set("u1", "g1", 7, 0, clock.now(), display_name="Aki")
    engine.on_report("u1", "g1", clock.now())

    result = container.scheduler.trigger(datetime(2026, 2, 2, 12, 0))
    print(result.outcomes)
    print(engine.on_query_streak("g1"))


if __name__ == "__main__":
    main()
