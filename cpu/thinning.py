from __future__ import annotations

import numpy as np

from common.raster import EDGE, NOT_EDGE


def thin(edges: np.ndarray) -> None:
    """
    Remove the bottom-right pixel of every solid 2x2 block of EDGE, in place.

    Scans y then x over [1, H-1) x [1, W-1); each check sees the removals
    already made earlier in the scan, so the pass must stay sequential.
    """
    if edges.ndim != 2:
        raise ValueError("thin expects 2D edge map")

    h, w = edges.shape
    if h < 3 or w < 3:
        return

    on = edges == EDGE
    # Pixels only ever go EDGE -> NOT_EDGE, so a pixel can be removed only if
    # its block was solid before the pass started.
    block = on[1:h - 1, 1:w - 1] & on[:h - 2, :w - 2] & on[:h - 2, 1:w - 1] & on[1:h - 1, :w - 2]

    for y, x in np.argwhere(block) + 1:  # argwhere is row-major
        if (
            edges[y - 1, x - 1] == EDGE
            and edges[y - 1, x] == EDGE
            and edges[y, x - 1] == EDGE
        ):
            edges[y, x] = NOT_EDGE
