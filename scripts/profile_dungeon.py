import os
import sys
import time
from statistics import mean, pstdev

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from delve.dungeon import Dungeon, DungeonConfig  # noqa: E402

SEEDS = [11, 222, 3333, 4444, 55555, 67890, 72223, 88888, 99999, 123456]
CONFIG = DungeonConfig(n_rows=101, n_cols=101)


def run():
    runtimes = []
    for s in SEEDS:
        t0 = time.perf_counter()
        d = Dungeon(CONFIG, seed=s, enable_metrics=True)
        t1 = time.perf_counter()
        rt = (t1 - t0) * 1000
        slowest = max(d.metrics["phase_ms"].items(), key=lambda kv: kv[1])
        print(
            f"seed={s} ms={rt:.1f} rooms={len(d.rooms)} doors={d.metrics['doors_created']} "
            f"collapsed={d.metrics['deadends_collapsed']} slowest={slowest[0]}:{slowest[1]}"
        )
        runtimes.append(rt)
    print("\nSummary:")
    print(
        f"count={len(runtimes)} avg_ms={mean(runtimes):.1f} sd_ms={pstdev(runtimes):.1f} min_ms={min(runtimes):.1f} max_ms={max(runtimes):.1f}"
    )


if __name__ == "__main__":
    run()
