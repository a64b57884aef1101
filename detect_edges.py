#!/usr/bin/env python3
"""Detect edges in an image and write the edge map.

Reads any OpenCV-readable image, converts it to a grey raster and writes a
0/255 edge image of the same size.
"""

from __future__ import annotations

import argparse
from typing import List, Optional

from common.canny_dispatch import dispatch_canny
from common.config import load_config
from common.imaging import load_grey_image, save_raster


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Canny-style edge detection")
    parser.add_argument("image", help="Input image path")
    parser.add_argument("-o", "--output", required=True, help="Output edge image path")
    parser.add_argument("--config", default=None, help="JSON config merged over the defaults")
    parser.add_argument("--high", type=float, default=None, help="High threshold")
    parser.add_argument("--low", type=float, default=None, help="Low threshold")
    parser.add_argument("--kernel-size", type=int, default=None, help="Gaussian kernel size (odd)")
    parser.add_argument("--sigma", type=float, default=None, help="Gaussian sigma")
    parser.add_argument("--mode", choices=["CPU", "GPU", "AUTO"], default=None, help="Backend")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    cfg = load_config(args.config)
    overrides = {
        "high_thresh": args.high,
        "low_thresh": args.low,
        "kernel_size": args.kernel_size,
        "sigma": args.sigma,
    }
    for key, value in overrides.items():
        if value is not None:
            cfg["canny"][key] = value
    if args.mode is not None:
        cfg["backend"]["mode"] = args.mode

    gray = load_grey_image(args.image)
    edges, timings = dispatch_canny(gray, cfg)
    save_raster(args.output, edges)

    canny_cfg = cfg["canny"]
    print(
        f"Edge detection (high={canny_cfg['high_thresh']}, low={canny_cfg['low_thresh']}, "
        f"mode={cfg['backend']['mode']}, {timings.get('t_total_ms', 0.0):.1f} ms): "
        f"{args.image} -> {args.output}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
