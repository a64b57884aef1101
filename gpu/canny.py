"""
GPU Canny edge detection implementation using CuPy/CUDA.

Stages 1-5 run on the device with the same arithmetic as the CPU reference;
thinning is sequential and runs on the host.
"""

from __future__ import annotations

import time
from typing import Dict, Tuple

import numpy as np

try:
    import cupy as cp
except Exception as exc:  # pragma: no cover
    cp = None
    _gpu_import_error = exc
else:
    _gpu_import_error = None

from common.raster import EDGE, NOT_EDGE
from cpu.kernels import SOBEL_X, SOBEL_Y, gaussian_kernel
from cpu.nms import NMS_MARGIN, TAN_22_5, TAN_67_5, integer_tangent
from cpu.thinning import thin


def gpu_available() -> bool:
    """True when CuPy imports and sees at least one CUDA device."""
    if cp is None:
        return False
    try:
        return cp.cuda.runtime.getDeviceCount() > 0
    except Exception:
        return False


def gpu_canny_edges(
    gray_gpu: cp.ndarray,
    high_thresh: float = 40.0,
    low_thresh: float = 10.0,
    kernel_size: int = 5,
    sigma: float = 1.4,
) -> Tuple[cp.ndarray, Dict[str, float]]:
    """
    GPU edge detector matching cpu.canny.cpu_canny output.

    Args:
        gray_gpu: 2D integer CuPy array on device
        high_thresh: strong edge threshold
        low_thresh: weak edge threshold
        kernel_size: odd Gaussian kernel size
        sigma: Gaussian standard deviation

    Returns:
        edges: 2D int32 CuPy array (0 or 255) on device
        timings: dict with per-stage timings in ms
    """
    if cp is None:
        raise RuntimeError(f"CuPy not available for GPU Canny: {_gpu_import_error}")

    if gray_gpu.ndim != 2:
        raise ValueError("gpu_canny_edges expects 2D grayscale image")
    if not np.issubdtype(gray_gpu.dtype, np.integer):
        raise ValueError(f"gpu_canny_edges expects an integer raster, got {gray_gpu.dtype}")

    grey = gray_gpu.astype(cp.int32)
    timings: Dict[str, float] = {}

    t0 = time.perf_counter()
    # Stage 1: Gaussian blur
    blurred = _convolve(grey, gaussian_kernel(kernel_size, sigma))

    # Stage 2: Gradient computation (Sobel)
    diff_x = _convolve(blurred, SOBEL_X)
    diff_y = _convolve(blurred, SOBEL_Y)
    dx64 = diff_x.astype(cp.int64)
    dy64 = diff_y.astype(cp.int64)
    magnitude = cp.sqrt((dx64 * dx64 + dy64 * dy64).astype(cp.float64))

    # Stage 3: Non-maximum suppression
    local_max = _non_maximum_suppression(magnitude, diff_x, diff_y)

    # Stage 4: Double-threshold and single-pass hysteresis
    edges_gpu = _double_threshold_hysteresis(
        local_max, high_thresh, low_thresh, (kernel_size - 1) // 2
    )
    cp.cuda.Stream.null.synchronize()
    t1 = time.perf_counter()

    # Stage 5: Thinning (sequential, host)
    edges = cp.asnumpy(edges_gpu)
    thin(edges)
    t2 = time.perf_counter()

    timings["t_device_ms"] = (t1 - t0) * 1000.0
    timings["t_thin_ms"] = (t2 - t1) * 1000.0
    timings["t_total_ms"] = (t2 - t0) * 1000.0

    return cp.asarray(edges), timings


def _convolve(img: cp.ndarray, kernel: np.ndarray) -> cp.ndarray:
    """
    Border-preserving convolution (vectorized over the interior).
    Kernel indexed [x offset, y offset]; results rounded half to even.
    """
    if kernel.ndim != 2 or kernel.shape[0] != kernel.shape[1]:
        raise ValueError(f"Expected square kernel, got {kernel.shape}")

    h, w = img.shape
    n = (kernel.shape[0] - 1) // 2
    filtered = img.copy()
    if h <= 2 * n or w <= 2 * n:
        return filtered

    acc = cp.zeros((h - 2 * n, w - 2 * n), dtype=cp.float64)
    for i in range(-n, n + 1):
        for j in range(-n, n + 1):
            weight = float(kernel[n + i, n + j])
            if weight == 0:
                continue
            acc += img[n + j:h - n + j, n + i:w - n + i] * weight

    filtered[n:h - n, n:w - n] = cp.rint(acc).astype(cp.int32)
    return filtered


def _non_maximum_suppression(
    magnitude: cp.ndarray, diff_x: cp.ndarray, diff_y: cp.ndarray
) -> cp.ndarray:
    """
    Vectorized non-maximum suppression over [2, W-2) x [2, H-2).
    """
    h, w = magnitude.shape
    m = NMS_MARGIN
    local_max = cp.zeros((h, w), dtype=cp.int32)
    if h <= 2 * m or w <= 2 * m:
        return local_max

    def shifted(dx: int, dy: int) -> cp.ndarray:
        return magnitude[m + dy:h - m + dy, m + dx:w - m + dx]

    tangent = integer_tangent(diff_x[m:h - m, m:w - m], diff_y[m:h - m, m:w - m])

    center = shifted(0, 0)
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

    local_max[m:h - m, m:w - m] = cp.where(suppressed, 0, cp.trunc(center)).astype(cp.int32)
    return local_max


def _double_threshold_hysteresis(
    local_max: cp.ndarray, high_thresh: float, low_thresh: float, margin: int
) -> cp.ndarray:
    """
    Classify, then promote weak pixels 8-adjacent to a strong pixel (one pass).
    """
    from cupyx.scipy.ndimage import binary_dilation

    h, w = local_max.shape
    in_region = cp.zeros((h, w), dtype=bool)
    in_region[margin:max(margin, h - margin), margin:max(margin, w - margin)] = True

    candidate = in_region & (local_max >= low_thresh)
    strong = candidate & (local_max >= high_thresh)
    weak = candidate & ~strong

    # 8-connected neighbourhood; a weak pixel is never strong itself
    structure = cp.ones((3, 3), dtype=bool)
    near_strong = binary_dilation(strong, structure=structure)

    edges = cp.full((h, w), NOT_EDGE, dtype=cp.int32)
    edges[strong] = EDGE
    edges[weak & near_strong] = EDGE
    return edges
