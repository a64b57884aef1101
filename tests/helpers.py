from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, Iterable, Sequence

import cv2
import numpy as np


def write_csv(path: Path, header: Sequence[str], rows: Iterable[Sequence]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for row in rows:
            writer.writerow(row)


def save_edge_overlay(gray: np.ndarray, edges: np.ndarray, path: Path) -> None:
    """
    Draw edge pixels in red over the grey image and save.
    """
    base = np.clip(gray, 0, 255).astype(np.uint8)
    img = cv2.cvtColor(base, cv2.COLOR_GRAY2BGR)
    img[edges == 255] = (0, 0, 255)
    path.parent.mkdir(parents=True, exist_ok=True)
    cv2.imwrite(str(path), img)


def synthetic_frame(h: int, w: int, seed: int) -> np.ndarray:
    """
    Grey raster with a few filled shapes and mild noise.
    """
    rng = np.random.default_rng(seed)
    img = np.full((h, w), 40, dtype=np.uint8)
    cv2.rectangle(img, (w // 8, h // 8), (w // 2, h // 2), 200, thickness=-1)
    cv2.circle(img, (3 * w // 4, 2 * h // 3), min(h, w) // 6, 120, thickness=-1)
    noise = rng.integers(-8, 9, size=(h, w))
    return np.clip(img.astype(np.int32) + noise, 0, 255).astype(np.int32)


def edge_agreement(a: np.ndarray, b: np.ndarray) -> Dict[str, float]:
    """
    Pixel agreement between two 0/255 edge maps.
    """
    count_a = int(np.count_nonzero(a == 255))
    count_b = int(np.count_nonzero(b == 255))
    return {
        "edge_count_a": count_a,
        "edge_count_b": count_b,
        "match_ratio": float(np.count_nonzero(a == b)) / a.size,
        "a_only_ratio": float(np.count_nonzero((a == 255) & (b == 0))) / a.size,
        "b_only_ratio": float(np.count_nonzero((a == 0) & (b == 255))) / a.size,
    }
