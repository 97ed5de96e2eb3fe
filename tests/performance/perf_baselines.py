"""Timing budgets for the geometry and pixel hot paths.

Each entry names the statement to time and the per-call ceiling in
microseconds. Pixel benchmarks run on a ``FRAME_SIZE`` frame, a quarter of
a 1080x1440 capture on each side.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final

FRAME_SIZE: Final[tuple[int, int]] = (270, 360)


@dataclass(frozen=True)
class PerfBaseline:
    stmt: str
    loops: int
    max_us_per_call: float


PERF_BASELINES: Final[dict[str, PerfBaseline]] = {
    "compute_slices": PerfBaseline(
        "compute_slices(CollageFormat.GRID, 1080, 1440)", loops=10_000, max_us_per_call=50.0
    ),
    "compute_crop_window": PerfBaseline(
        "compute_crop_window(1080, 1440, 390, 844)", loops=10_000, max_us_per_call=50.0
    ),
    "capture_slice": PerfBaseline(
        "compositor.capture_slice(frame, 2, CollageFormat.THREE_STRIPS, frame.size)",
        loops=1_000,
        max_us_per_call=2_000.0,
    ),
    "apply_filter_vintage": PerfBaseline(
        "apply_filter(frame, catalog.lookup('vintage'))", loops=5, max_us_per_call=1_500_000.0
    ),
}
