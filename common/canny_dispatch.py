"""
Edge detection dispatch function supporting CPU, GPU, and AUTO modes.
"""

from __future__ import annotations

from typing import Any, Dict

import numpy as np

try:
    import cupy as cp
    from gpu.canny import gpu_available, gpu_canny_edges
except Exception as exc:
    cp = None
    gpu_canny_edges = None
    gpu_available = None
    _gpu_import_error = exc
else:
    _gpu_import_error = None

from common.config import canny_params
from common.imaging import to_grey_array
from common.log import setup_logger
from common.raster import as_raster
from cpu.canny import cpu_canny

logger = setup_logger("canny.dispatch")


def _run_cpu(gray: np.ndarray, params: Dict[str, Any]) -> tuple[np.ndarray, dict]:
    result = cpu_canny(gray, **params)
    return result.edges, result.timings


def _run_gpu(gray: np.ndarray, params: Dict[str, Any]) -> tuple[np.ndarray, dict]:
    gray_gpu = cp.asarray(gray, dtype=cp.int32)
    edges_gpu, timings = gpu_canny_edges(gray_gpu, **params)
    return cp.asnumpy(edges_gpu), timings


def _failover(gray: np.ndarray, params: Dict[str, Any], fallback_mode: str, reason: Any) -> tuple[np.ndarray, dict]:
    if fallback_mode != "CPU":
        raise ValueError(f"Fallback mode {fallback_mode} not supported")
    logger.warning("GPU edge detection failed over to CPU: %s", reason)
    return _run_cpu(gray, params)


def dispatch_canny(
    gray: np.ndarray,
    cfg: Dict[str, Any],
) -> tuple[np.ndarray, dict]:
    """
    Dispatch edge detection based on config mode.

    Args:
        gray: (H, W) integer raster or (H, W, 3) BGR image (CPU numpy array)
        cfg: Configuration dict ("canny" and "backend" sections)

    Returns:
        edges: (H, W) int32 edge map (0 or 255)
        timings: dict with timing information
    """
    gray = np.asarray(gray)
    gray = to_grey_array(gray) if gray.ndim == 3 else as_raster(gray, "dispatch_canny")

    params = canny_params(cfg)
    backend_cfg = cfg.get("backend", {})
    mode = backend_cfg.get("mode", "CPU")
    allow_failover = bool(backend_cfg.get("allow_failover", False))
    fallback_mode = backend_cfg.get("fallback_mode", "CPU")

    if mode == "CPU":
        return _run_cpu(gray, params)

    elif mode == "GPU":
        if gpu_canny_edges is None:
            if allow_failover:
                return _failover(gray, params, fallback_mode, _gpu_import_error)
            # No failover - propagate error
            raise RuntimeError(f"GPU edge detection unavailable: {_gpu_import_error}")

        try:
            return _run_gpu(gray, params)
        except Exception as e:
            if allow_failover:
                return _failover(gray, params, fallback_mode, e)
            raise

    elif mode == "AUTO":
        # Decide based on resolution and device presence
        min_h, min_w = backend_cfg.get("gpu_min_resolution", [480, 640])
        h, w = gray.shape
        use_gpu = h >= min_h and w >= min_w and gpu_available is not None and gpu_available()

        if use_gpu:
            return _run_gpu(gray, params)
        return _run_cpu(gray, params)

    else:
        raise ValueError(f"Unknown backend mode: {mode}")
