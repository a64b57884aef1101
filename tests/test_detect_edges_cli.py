"""Tests for the detect_edges command."""

from pathlib import Path

import cv2
import numpy as np

from detect_edges import main


def test_writes_edge_image(tmp_path: Path, capsys) -> None:
    src = tmp_path / "stripe.png"
    img = np.zeros((10, 10), dtype=np.uint8)
    img[:, 4:6] = 255
    cv2.imwrite(str(src), img)
    out = tmp_path / "out" / "edges.png"

    assert main([str(src), "-o", str(out)]) == 0

    edges = cv2.imread(str(out), cv2.IMREAD_GRAYSCALE)
    expected = np.zeros((10, 10), dtype=np.uint8)
    expected[2:8, 3] = 255
    expected[2:8, 6] = 255
    assert np.array_equal(edges, expected)
    assert "mode=CPU" in capsys.readouterr().out


def test_threshold_flags_override_config(tmp_path: Path) -> None:
    src = tmp_path / "stripe.png"
    img = np.zeros((10, 10), dtype=np.uint8)
    img[:, 4:6] = 255
    cv2.imwrite(str(src), img)
    out = tmp_path / "edges.png"

    main([str(src), "-o", str(out), "--high", "5000", "--low", "4000"])

    assert not cv2.imread(str(out), cv2.IMREAD_GRAYSCALE).any()
