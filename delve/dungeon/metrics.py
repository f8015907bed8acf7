from typing import Dict


def init_metrics() -> Dict[str, object]:
    return {
        "rooms_attempted": 0,
        "rooms_placed": 0,
        "rooms_rejected": {"room_cap": 0, "out_of_bounds": 0, "blocked": 0, "overlap": 0},
        "doors_created": 0,
        "doors_skipped": 0,
        "corridor_cells": 0,
        "stair_candidates": 0,
        "stairs_placed": 0,
        "deadends_collapsed": 0,
        "doors_dropped": 0,
        "doors_mirrored": 0,
        "blocks_cleared": 0,
        "runtime_ms": 0,
        "phase_ms": {},
    }
