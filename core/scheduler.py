"""
Daily run loop: processes school emails once a day at a fixed hour
"""

import time
from datetime import datetime, timedelta
from typing import Callable, Optional


def next_run_time(now: datetime, hour: int) -> datetime:
    """The next occurrence of hour:00 strictly after now"""
    run_at = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if run_at <= now:
        run_at += timedelta(days=1)
    return run_at


def seconds_until_next_run(now: datetime, hour: int) -> float:
    return (next_run_time(now, hour) - now).total_seconds()


def run_daily(job: Callable[[], object], hour: int = 6,
              sleep: Callable[[float], None] = time.sleep,
              clock: Callable[[], datetime] = datetime.now,
              max_runs: Optional[int] = None) -> int:
    """Sleep until hour:00, run the job, repeat. Returns the number of runs made.

    A failing run is reported and the loop keeps going.
    """
    runs = 0
    while max_runs is None or runs < max_runs:
        now = clock()
        wait = seconds_until_next_run(now, hour)
        print(f"[*] Next run at {next_run_time(now, hour):%Y-%m-%d %H:%M} "
              f"({wait / 3600:.1f} hours from now)")
        sleep(wait)

        try:
            job()
        except Exception as e:
            print(f"[-] Scheduled run failed: {e}")
        runs += 1

    return runs
