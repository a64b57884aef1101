"""
CPU reference implementation for Canny edge detection.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Dict

import numpy as np

from common.imaging import to_grey_array
from common.log import setup_logger
from common.raster import as_raster
from cpu.convolution import convolve
from cpu.gradient import compute_gradient
from cpu.kernels import gaussian_kernel
from cpu.nms import non_max_suppression
from cpu.thinning import thin
from cpu.threshold import double_threshold

logger = setup_logger("canny.cpu")

DEFAULT_HIGH_THRESH = 40.0
DEFAULT_LOW_THRESH = 10.0
DEFAULT_KERNEL_SIZE = 5
DEFAULT_SIGMA = 1.4


@dataclass
class CannyResultCPU:
    blurred: np.ndarray
    diff_x: np.ndarray
    diff_y: np.ndarray
    gradient: np.ndarray  # float64 magnitude
    local_max: np.ndarray
    edges: np.ndarray  # 0 or 255
    timings: Dict[str, float] = field(default_factory=dict)


def _as_grey(gray: np.ndarray) -> np.ndarray:
    arr = np.asarray(gray)
    if arr.ndim == 3:
        return to_grey_array(arr)
    return as_raster(arr, "cpu_canny")


def cpu_canny(
    gray: np.ndarray,
    high_thresh: float = DEFAULT_HIGH_THRESH,
    low_thresh: float = DEFAULT_LOW_THRESH,
    kernel_size: int = DEFAULT_KERNEL_SIZE,
    sigma: float = DEFAULT_SIGMA,
) -> CannyResultCPU:
    """
    Run the full edge pipeline and keep every intermediate grid.

    Args:
        gray: (H, W) integer raster, or (H, W, 3) BGR image
        high_thresh: strong edge threshold
        low_thresh: weak edge threshold
        kernel_size: odd Gaussian kernel size
        sigma: Gaussian standard deviation

    Returns:
        CannyResultCPU; edges has the input's (H, W) and values 0 / 255
    """
    grey = _as_grey(gray)
    timings: Dict[str, float] = {}

    t0 = time.perf_counter()
    blurred = convolve(grey, gaussian_kernel(kernel_size, sigma))
    t1 = time.perf_counter()
    diff_x, diff_y, gradient = compute_gradient(blurred)
    t2 = time.perf_counter()
    local_max = non_max_suppression(gradient, diff_x, diff_y)
    t3 = time.perf_counter()
    edges = double_threshold(local_max, high_thresh, low_thresh, margin=(kernel_size - 1) // 2)
    t4 = time.perf_counter()
    thin(edges)
    t5 = time.perf_counter()

    timings["t_blur_ms"] = (t1 - t0) * 1000.0
    timings["t_gradient_ms"] = (t2 - t1) * 1000.0
    timings["t_nms_ms"] = (t3 - t2) * 1000.0
    timings["t_threshold_ms"] = (t4 - t3) * 1000.0
    timings["t_thin_ms"] = (t5 - t4) * 1000.0
    timings["t_total_ms"] = (t5 - t0) * 1000.0

    logger.debug(
        "shape=%s high=%.1f low=%.1f kernel=%d sigma=%.2f total=%.2fms",
        grey.shape, high_thresh, low_thresh, kernel_size, sigma, timings["t_total_ms"],
    )

    return CannyResultCPU(
        blurred=blurred,
        diff_x=diff_x,
        diff_y=diff_y,
        gradient=gradient,
        local_max=local_max,
        edges=edges,
        timings=timings,
    )


def detect_edges(
    gray: np.ndarray,
    high_thresh: float = DEFAULT_HIGH_THRESH,
    low_thresh: float = DEFAULT_LOW_THRESH,
    kernel_size: int = DEFAULT_KERNEL_SIZE,
    sigma: float = DEFAULT_SIGMA,
) -> np.ndarray:
    """
    Edge map of a grey raster: 255 on edges, 0 elsewhere.
    """
    return cpu_canny(gray, high_thresh, low_thresh, kernel_size, sigma).edges
