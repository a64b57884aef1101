from __future__ import annotations

from typing import Tuple

import numpy as np

from cpu.convolution import convolve
from cpu.kernels import SOBEL_X, SOBEL_Y


def gradient_magnitude(diff_x: np.ndarray, diff_y: np.ndarray) -> np.ndarray:
    """
    Per-pixel L2 norm of two integer difference rasters, as float64.
    """
    dx = diff_x.astype(np.int64)
    dy = diff_y.astype(np.int64)
    return np.sqrt((dx * dx + dy * dy).astype(np.float64))


def compute_gradient(blurred: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Sobel differences and gradient magnitude of a smoothed raster.

    The 1-pixel border of diff_x / diff_y holds raw blurred values (convolve
    leaves it untouched), so the border magnitude is sqrt(2) * pixel.

    Returns:
        diff_x: (H, W) int32
        diff_y: (H, W) int32
        magnitude: (H, W) float64
    """
    diff_x = convolve(blurred, SOBEL_X)
    diff_y = convolve(blurred, SOBEL_Y)
    return diff_x, diff_y, gradient_magnitude(diff_x, diff_y)
