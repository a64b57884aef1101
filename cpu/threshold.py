"""
CPU reference implementation for double thresholding with single-pass hysteresis.
"""

from __future__ import annotations

import numpy as np

from common.raster import EDGE, NOT_EDGE, RASTER_DTYPE, WEAK_EDGE, as_raster


def _interior(shape: tuple[int, int], margin: int) -> tuple[slice, slice]:
    h, w = shape
    return slice(margin, max(margin, h - margin)), slice(margin, max(margin, w - margin))


def classify(
    local_max: np.ndarray,
    high_thresh: float,
    low_thresh: float,
    margin: int,
) -> np.ndarray:
    """
    First pass: strong (>= high_thresh) -> EDGE, weak (>= low_thresh) -> WEAK_EDGE.

    Pixels within margin of the border stay NOT_EDGE. high_thresh < low_thresh
    is not rejected.
    """
    src = as_raster(local_max, "classify")
    classified = np.full(src.shape, NOT_EDGE, dtype=RASTER_DTYPE)

    rows, cols = _interior(src.shape, margin)
    region = src[rows, cols]
    classified[rows, cols] = np.where(
        region >= low_thresh,
        np.where(region >= high_thresh, EDGE, WEAK_EDGE),
        NOT_EDGE,
    )
    return classified


def hysteresis(classified: np.ndarray, margin: int) -> np.ndarray:
    """
    Second pass: a weak pixel becomes EDGE when one of its 8 neighbours is EDGE
    in the classified input, otherwise NOT_EDGE.

    Exactly one pass over the first-pass result; promotion does not chain
    through other weak pixels.
    """
    src = as_raster(classified, "hysteresis")
    h, w = src.shape

    strong = np.pad(src == EDGE, 1, mode="constant", constant_values=False)
    near_strong = np.zeros((h, w), dtype=bool)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            near_strong |= strong[1 + dy:h + 1 + dy, 1 + dx:w + 1 + dx]

    rows, cols = _interior(src.shape, margin)
    in_region = np.zeros((h, w), dtype=bool)
    in_region[rows, cols] = True

    weak = in_region & (src == WEAK_EDGE)
    edges = src.copy()
    edges[weak & near_strong] = EDGE
    edges[weak & ~near_strong] = NOT_EDGE
    return edges


def double_threshold(
    local_max: np.ndarray,
    high_thresh: float,
    low_thresh: float,
    margin: int,
) -> np.ndarray:
    """
    Classify suppressed magnitudes into an edge map.

    Args:
        local_max: (H, W) integer output of non-maximum suppression
        high_thresh: strong edge threshold
        low_thresh: weak edge threshold
        margin: border width forced to NOT_EDGE

    Returns:
        (H, W) int32 edge map with values in {0, 255}
    """
    return hysteresis(classify(local_max, high_thresh, low_thresh, margin), margin)
