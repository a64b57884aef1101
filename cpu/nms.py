"""
CPU reference implementation for non-maximum suppression.
"""

from __future__ import annotations

import numpy as np

try:
    import cupy as cp
except Exception:  # pragma: no cover
    cp = None

from common.raster import RASTER_DTYPE, check_same_shape

# tan(22.5 deg) and tan(67.5 deg)
TAN_22_5 = 0.4142
TAN_67_5 = 2.4142

# Tangent used where diff_x == 0; lands in the vertical band
ZERO_DX_TANGENT = 3

NMS_MARGIN = 2


def integer_tangent(diff_x: np.ndarray, diff_y: np.ndarray) -> np.ndarray:
    """
    diff_y / diff_x as integer division truncated toward zero.

    Pixels with diff_x == 0 get ZERO_DX_TANGENT. Works on NumPy and CuPy
    arrays; the result lives on the same device as the inputs.
    """
    xp = cp.get_array_module(diff_x) if cp is not None else np
    dx = diff_x.astype(xp.int64)
    dy = diff_y.astype(xp.int64)
    zero = dx == 0
    safe_dx = xp.where(zero, 1, dx)
    quotient = xp.sign(dy) * xp.sign(safe_dx) * (xp.abs(dy) // xp.abs(safe_dx))
    return xp.where(zero, ZERO_DX_TANGENT, quotient).astype(xp.float64)


def non_max_suppression(
    magnitude: np.ndarray,
    diff_x: np.ndarray,
    diff_y: np.ndarray,
) -> np.ndarray:
    """
    Keep only local maxima of the gradient magnitude along the gradient direction.

    Args:
        magnitude: (H, W) float64 gradient magnitude
        diff_x: (H, W) integer Sobel X response
        diff_y: (H, W) integer Sobel Y response

    Returns:
        (H, W) int32 raster; truncated magnitude at maxima, 0 elsewhere and
        within 2 pixels of the border
    """
    mag = np.asarray(magnitude, dtype=np.float64)
    h, w = check_same_shape(mag, np.asarray(diff_x), np.asarray(diff_y))
    local_max = np.zeros((h, w), dtype=RASTER_DTYPE)

    m = NMS_MARGIN
    if h <= 2 * m or w <= 2 * m:
        return local_max

    def shifted(dx: int, dy: int) -> np.ndarray:
        # magnitude at (x + dx, y + dy) for every processed (x, y)
        return mag[m + dy:h - m + dy, m + dx:w - m + dx]

    center = shifted(0, 0)
    tangent = integer_tangent(
        np.asarray(diff_x)[m:h - m, m:w - m],
        np.asarray(diff_y)[m:h - m, m:w - m],
    )

    horizontal = (tangent >= -TAN_22_5) & (tangent < TAN_22_5)
    vertical = (tangent < -TAN_67_5) | (tangent >= TAN_67_5)
    plus_45 = (tangent >= -TAN_67_5) & (tangent < -TAN_22_5)
    minus_45 = (tangent >= TAN_22_5) & (tangent < TAN_67_5)

    suppressed = (
        (horizontal & ((center < shifted(0, 1)) | (center < shifted(0, -1))))
        | (vertical & ((center < shifted(1, 0)) | (center < shifted(-1, 0))))
        | (plus_45 & ((center < shifted(1, -1)) | (center < shifted(-1, 1))))
        | (minus_45 & ((center < shifted(1, 1)) | (center < shifted(-1, -1))))
    )

    local_max[m:h - m, m:w - m] = np.where(suppressed, 0, np.trunc(center)).astype(RASTER_DTYPE)
    return local_max
