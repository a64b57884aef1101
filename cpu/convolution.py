"""
CPU reference implementation for 2D convolution.
"""

from __future__ import annotations

import numpy as np

from common.raster import RASTER_DTYPE, as_kernel, as_raster


def convolve(raster: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """
    Apply a square kernel to an integer raster.

    The n-pixel border (n = (size - 1) // 2) keeps the input values; interior
    sums are rounded half to even and not clamped.

    Args:
        raster: (H, W) integer raster
        kernel: (K, K) float or integer kernel, indexed [x offset, y offset]

    Returns:
        (H, W) int32 raster
    """
    src = as_raster(raster, "convolve")
    k = as_kernel(kernel, "convolve")

    h, w = src.shape
    n = (k.shape[0] - 1) // 2
    filtered = src.copy()

    if h <= 2 * n or w <= 2 * n:
        return filtered

    # Same accumulation order as a per-pixel loop: x offset outer, y offset inner
    acc = np.zeros((h - 2 * n, w - 2 * n), dtype=np.float64)
    for i in range(-n, n + 1):
        for j in range(-n, n + 1):
            weight = k[n + i, n + j]
            if weight == 0:
                continue
            acc += src[n + j:h - n + j, n + i:w - n + i] * float(weight)

    filtered[n:h - n, n:w - n] = np.rint(acc).astype(RASTER_DTYPE)
    return filtered
