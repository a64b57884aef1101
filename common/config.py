import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_CONFIG: Dict[str, Any] = {
    "canny": {
        "high_thresh": 40.0,
        "low_thresh": 10.0,
        "kernel_size": 5,
        "sigma": 1.4,
    },
    "backend": {
        "mode": "CPU",
        "allow_failover": False,
        "fallback_mode": "CPU",
        "gpu_min_resolution": [480, 640],
    },
    "outputs": {
        "root": "outputs",
        "debug_dir": "outputs/debug",
        "metrics_csv": "outputs/edges_smoke.csv",
        "report_txt": "outputs/edges_smoke_report.txt",
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base without mutating inputs."""
    merged = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = _deep_merge(merged[k], v)
        else:
            merged[k] = v
    return merged


def _read_json(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_config(
    default_path: Optional[Path | str] = None,
    local_path: Path | str = Path("configs/local.json"),
) -> Dict[str, Any]:
    """
    Load the built-in defaults, then merge a config file and local overrides.

    An explicit default_path must exist; the local override is optional.
    """
    cfg = copy.deepcopy(DEFAULT_CONFIG)

    if default_path is not None:
        default_path = Path(default_path)
        if not default_path.exists():
            raise FileNotFoundError(f"Config not found: {default_path}")
        cfg = _deep_merge(cfg, _read_json(default_path))

    local_path = Path(local_path)
    if local_path.exists():
        cfg = _deep_merge(cfg, _read_json(local_path))

    return cfg


def canny_params(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Keyword arguments for the edge pipeline taken from the "canny" section.
    """
    canny_cfg = _deep_merge(DEFAULT_CONFIG["canny"], cfg.get("canny", {}))
    return {
        "high_thresh": float(canny_cfg["high_thresh"]),
        "low_thresh": float(canny_cfg["low_thresh"]),
        "kernel_size": int(canny_cfg["kernel_size"]),
        "sigma": float(canny_cfg["sigma"]),
    }


def ensure_output_dirs(cfg: Dict[str, Any]) -> None:
    """
    Create output directories referenced by the config if they do not exist.
    """
    outputs = cfg.get("outputs", {})
    paths = [
        outputs.get("root"),
        outputs.get("debug_dir"),
        Path(outputs.get("metrics_csv", "")).parent if outputs.get("metrics_csv") else None,
        Path(outputs.get("report_txt", "")).parent if outputs.get("report_txt") else None,
    ]
    for p in paths:
        if not p:
            continue
        Path(p).mkdir(parents=True, exist_ok=True)
