"""Progress bar fill geometry shared by the capsule and rectangle renderers."""

from __future__ import annotations

import math


def compute_fill_width(current: float, required: float, track_width: float) -> float:
    """Map ``current / required`` onto ``track_width`` pixels.

    A non-positive ``required`` yields a 1px sliver instead of a zero-width
    draw; overshoot clamps to the full track.
    """
    if required <= 0:
        return 1
    if current > required:
        return track_width

    width = math.floor(current / required * track_width + 0.5)
    return max(0, min(width, track_width))
