"""Tests for cpu.threshold module."""

import numpy as np
import pytest

from common.raster import EDGE, NOT_EDGE, WEAK_EDGE
from cpu.threshold import classify, double_threshold, hysteresis


@pytest.fixture
def local_max() -> np.ndarray:
    rng = np.random.default_rng(5)
    values = rng.integers(0, 100, size=(20, 24)).astype(np.int32)
    # sparse, like a suppressed gradient
    values[rng.random(values.shape) < 0.6] = 0
    return values


class TestClassify:
    """Tests for the first thresholding pass."""

    def test_three_classes(self) -> None:
        values = np.zeros((5, 5), dtype=np.int32)
        values[1, 1] = 9
        values[1, 2] = 10
        values[1, 3] = 39
        values[2, 2] = 40
        values[3, 3] = 250
        out = classify(values, high_thresh=40, low_thresh=10, margin=1)

        assert out[1, 1] == NOT_EDGE
        assert out[1, 2] == WEAK_EDGE
        assert out[1, 3] == WEAK_EDGE
        assert out[2, 2] == EDGE
        assert out[3, 3] == EDGE

    def test_margin_forced_to_zero(self) -> None:
        values = np.full((8, 8), 200, dtype=np.int32)
        out = classify(values, 40, 10, margin=2)
        assert np.all(out[2:6, 2:6] == EDGE)
        assert np.count_nonzero(out) == 16

    def test_margin_larger_than_image(self) -> None:
        values = np.full((3, 3), 200, dtype=np.int32)
        assert np.all(classify(values, 40, 10, margin=2) == NOT_EDGE)

    def test_inverted_thresholds_not_rejected(self) -> None:
        values = np.zeros((3, 3), dtype=np.int32)
        values[1, 1] = 20
        # 20 >= low (30) fails, so nothing is kept even though 20 >= high
        assert classify(values, high_thresh=10, low_thresh=30, margin=1)[1, 1] == NOT_EDGE
        values[1, 1] = 35
        assert classify(values, high_thresh=10, low_thresh=30, margin=1)[1, 1] == EDGE


class TestHysteresis:
    """Tests for the single promotion pass."""

    def test_weak_next_to_strong_is_promoted(self) -> None:
        classified = np.zeros((5, 5), dtype=np.int32)
        classified[2, 2] = EDGE
        classified[1, 1] = WEAK_EDGE
        out = hysteresis(classified, margin=1)
        assert out[1, 1] == EDGE
        assert out[2, 2] == EDGE

    def test_isolated_weak_is_dropped(self) -> None:
        classified = np.zeros((5, 5), dtype=np.int32)
        classified[2, 2] = WEAK_EDGE
        assert np.all(hysteresis(classified, margin=1) == NOT_EDGE)

    def test_promotion_does_not_chain(self) -> None:
        """A weak pixel two hops from a strong one through another weak pixel stays off."""
        local_max = np.zeros((7, 7), dtype=np.int32)
        local_max[3, 1] = 50  # strong
        local_max[3, 2] = 20  # weak, touches strong
        local_max[3, 3] = 20  # weak, touches only the weak pixel
        local_max[3, 4] = 20
        out = double_threshold(local_max, high_thresh=40, low_thresh=10, margin=1)

        assert out[3, 1] == EDGE
        assert out[3, 2] == EDGE
        assert out[3, 3] == NOT_EDGE
        assert out[3, 4] == NOT_EDGE

    def test_chain_in_any_scan_direction_is_not_followed(self) -> None:
        local_max = np.zeros((7, 7), dtype=np.int32)
        local_max[5, 3] = 50
        local_max[4, 3] = 20
        local_max[3, 3] = 20
        out = double_threshold(local_max, 40, 10, margin=1)
        assert out[4, 3] == EDGE
        assert out[3, 3] == NOT_EDGE

    def test_returns_new_array(self) -> None:
        classified = np.zeros((5, 5), dtype=np.int32)
        classified[2, 2] = WEAK_EDGE
        out = hysteresis(classified, margin=1)
        assert classified[2, 2] == WEAK_EDGE
        assert out is not classified


class TestDoubleThreshold:
    """Tests for double_threshold."""

    def test_no_weak_values_remain(self, local_max: np.ndarray) -> None:
        out = double_threshold(local_max, 60, 20, margin=2)
        assert set(np.unique(out)).issubset({NOT_EDGE, EDGE})

    def test_high_threshold_monotonic(self, local_max: np.ndarray) -> None:
        counts = [
            int(np.count_nonzero(double_threshold(local_max, high, 10, margin=2) == EDGE))
            for high in (20, 40, 60, 80, 100)
        ]
        assert counts == sorted(counts, reverse=True)

    def test_low_threshold_monotonic(self, local_max: np.ndarray) -> None:
        kept = [
            int(np.count_nonzero(classify(local_max, 60, low, margin=2)))
            for low in (50, 40, 30, 20, 10)
        ]
        assert kept == sorted(kept)

        edges = [
            int(np.count_nonzero(double_threshold(local_max, 60, low, margin=2) == EDGE))
            for low in (50, 40, 30, 20, 10)
        ]
        assert edges == sorted(edges)

    def test_zero_margin_handles_image_edges(self) -> None:
        local_max = np.zeros((3, 3), dtype=np.int32)
        local_max[0, 0] = 50
        local_max[0, 1] = 20
        local_max[2, 2] = 20
        out = double_threshold(local_max, 40, 10, margin=0)
        assert out[0, 0] == EDGE
        assert out[0, 1] == EDGE
        assert out[2, 2] == NOT_EDGE
