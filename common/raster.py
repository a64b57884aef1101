"""
Shared raster conventions and validation helpers.

Rasters are 2D arrays in image order: shape (H, W), indexed raster[y, x].
Kernels are written kernel[i, j] with i stepping along x and j along y.
"""

from __future__ import annotations

import numpy as np

RASTER_DTYPE = np.int32

NOT_EDGE = 0
WEAK_EDGE = 128
EDGE = 255


class DimensionMismatchError(ValueError):
    """Raised when grids that must share a shape do not."""


def as_raster(raster: np.ndarray, name: str = "raster") -> np.ndarray:
    """
    Validate an integer raster and return it as int32.

    Args:
        raster: 2D integer array-like (H, W)
        name: caller name used in error messages

    Returns:
        int32 view or copy of the raster; values outside the int32 range
        raise ValueError instead of wrapping
    """
    arr = np.asarray(raster)
    if arr.ndim != 2:
        raise ValueError(f"{name} expects 2D raster, got shape {arr.shape}")
    if not np.issubdtype(arr.dtype, np.integer):
        raise ValueError(f"{name} expects an integer raster, got {arr.dtype}")
    if arr.size and not np.can_cast(arr.dtype, RASTER_DTYPE):
        limits = np.iinfo(RASTER_DTYPE)
        if arr.min() < limits.min or arr.max() > limits.max:
            raise ValueError(f"{name} raster values exceed the {np.dtype(RASTER_DTYPE)} range")
    return arr.astype(RASTER_DTYPE, copy=False)


def as_kernel(kernel: np.ndarray, name: str = "kernel") -> np.ndarray:
    """
    Validate a square convolution kernel.

    Even sizes are accepted; the centring uses floor division.
    """
    k = np.asarray(kernel)
    if k.ndim != 2:
        raise ValueError(f"{name} expects 2D kernel, got shape {k.shape}")
    if k.shape[0] != k.shape[1]:
        raise DimensionMismatchError(f"{name} expects a square kernel, got {k.shape}")
    if not (np.issubdtype(k.dtype, np.integer) or np.issubdtype(k.dtype, np.floating)):
        raise ValueError(f"{name} expects a numeric kernel, got {k.dtype}")
    return k


def check_same_shape(*grids: np.ndarray) -> tuple[int, int]:
    """
    Ensure every grid has the same 2D shape.

    Returns:
        (H, W) shared by all grids
    """
    shape = grids[0].shape
    if len(shape) != 2:
        raise ValueError(f"Expected 2D grids, got shape {shape}")
    for g in grids[1:]:
        if g.shape != shape:
            raise DimensionMismatchError(f"Grid shapes differ: {shape} vs {g.shape}")
    return shape[0], shape[1]
