"""
Fixed convolution kernels and Gaussian kernel generation.

Kernels are indexed kernel[i, j], i along x and j along y.
"""

from __future__ import annotations

import math

import numpy as np


def _frozen(values, dtype) -> np.ndarray:
    arr = np.array(values, dtype=dtype)
    arr.setflags(write=False)
    return arr


SOBEL_X = _frozen(
    [[1, 0, -1],
     [2, 0, -2],
     [1, 0, -1]],
    np.int32,
)
SOBEL_Y = _frozen(
    [[1, 2, 1],
     [0, 0, 0],
     [-1, -2, -1]],
    np.int32,
)

# 5x5 Gaussian, sigma = 1.4
GAUSS_5_SIGMA_1_4 = _frozen(
    [[0.0121461242019898, 0.0261099442007322, 0.0336973192407131, 0.0261099442007322, 0.0121461242019898],
     [0.0261099442007322, 0.0561273024075996, 0.0724375208467849, 0.0561273024075996, 0.0261099442007322],
     [0.0336973192407131, 0.0724375208467849, 0.0934873796057929, 0.0724375208467849, 0.0336973192407131],
     [0.0261099442007322, 0.0561273024075996, 0.0724375208467849, 0.0561273024075996, 0.0261099442007322],
     [0.0121461242019898, 0.0261099442007322, 0.0336973192407131, 0.0261099442007322, 0.0121461242019898]],
    np.float64,
)


def gaussian_kernel(size: int = 5, sigma: float = 1.4) -> np.ndarray:
    """
    Normalized Gaussian smoothing kernel.

    Args:
        size: odd kernel size (2n + 1); even sizes are not checked
        sigma: standard deviation, > 0

    Returns:
        (size, size) float64 kernel summing to 1
    """
    if size == 5 and sigma == 1.4:
        return GAUSS_5_SIGMA_1_4.copy()

    n = (size - 1) // 2
    d2 = 1.0 / (2.0 * sigma * sigma)
    d1 = d2 / math.pi

    offsets = np.arange(-n, n + 1)
    ii, jj = np.meshgrid(offsets, offsets, indexing="ij")

    kernel = np.zeros((size, size), dtype=np.float64)
    kernel[: 2 * n + 1, : 2 * n + 1] = d1 * np.exp(-(ii * ii + jj * jj) * d2)
    kernel /= kernel.sum()
    return kernel
