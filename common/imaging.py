"""
Image file collaborators: BGR images in, grey rasters out, and back.
"""

from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np

from common.raster import RASTER_DTYPE, as_raster


def to_grey_array(bgr: np.ndarray) -> np.ndarray:
    """
    Convert a BGR image to a grey raster.

    grey = (30 * R + 59 * G + 11 * B) // 100

    Args:
        bgr: (H, W, 3) or (H, W, 4) uint8 image in OpenCV channel order

    Returns:
        (H, W) int32 raster
    """
    arr = np.asarray(bgr)
    if arr.ndim != 3 or arr.shape[2] < 3:
        raise ValueError(f"to_grey_array expects (H, W, 3) image, got shape {arr.shape}")

    channels = arr[..., :3].astype(np.int64)
    b, g, r = channels[..., 0], channels[..., 1], channels[..., 2]
    return ((30 * r + 59 * g + 11 * b) // 100).astype(RASTER_DTYPE)


def load_grey_image(path: str | Path) -> np.ndarray:
    """
    Read an image file and return its grey raster.
    """
    path = Path(path)
    img = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if img is None:
        raise FileNotFoundError(f"Could not read image: {path}")
    return to_grey_array(img)


def _renderable(raster: np.ndarray, name: str) -> np.ndarray:
    """
    Integer raster for rendering. Float grids such as the gradient
    magnitude are truncated toward zero first.
    """
    arr = np.asarray(raster)
    if arr.ndim == 2 and np.issubdtype(arr.dtype, np.floating):
        limits = np.iinfo(RASTER_DTYPE)
        if not np.all(np.isfinite(arr)) or (
            arr.size and (arr.min() < limits.min or arr.max() > limits.max)
        ):
            raise ValueError(f"{name} expects finite values within the int32 range")
        arr = np.trunc(arr).astype(RASTER_DTYPE)
    return as_raster(arr, name)


def save_raster(path: str | Path, raster: np.ndarray) -> None:
    """
    Write a raster as an 8-bit grey image, clipping values to 0-255.

    Float grids are truncated to integers first.
    """
    arr = _renderable(raster, "save_raster")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(path), np.clip(arr, 0, 255).astype(np.uint8)):
        raise RuntimeError(f"Failed to write image: {path}")


def to_bw(raster: np.ndarray, threshold: int) -> np.ndarray:
    """
    Binary rendering: values above threshold become 255, the rest 0.
    """
    arr = _renderable(raster, "to_bw")
    return np.where(arr > threshold, 255, 0).astype(np.uint8)
