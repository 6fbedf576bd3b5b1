"""
Utility helpers to load run settings and configure logging.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

import yaml

CONFIG_DIR = Path(__file__).resolve().parent
ROOT_DIR = CONFIG_DIR.parent
DEFAULT_RUN_FILE = CONFIG_DIR / "forecast_run_001.yaml"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@lru_cache
def _read_yaml(path: Path) -> Dict:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def load_run_settings(path: Optional[str] = None) -> Dict:
    """
    Load run settings from a YAML file, then apply environment overrides.

    The file is read once; overrides are applied to a fresh dict on every call.

    DEMAND_SIM_SEED replaces run.seed and DEMAND_SIM_LOG_LEVEL replaces
    logging.level. A relative run.output_dir is resolved against the repo root.

    Returns:
        Dict with 'run' and 'logging' sections.
    """
    candidate = Path(path) if path else DEFAULT_RUN_FILE
    if not candidate.is_absolute():
        candidate = ROOT_DIR / candidate
    settings = _read_yaml(candidate)

    run = dict(settings.get("run") or {})
    seed = os.getenv("DEMAND_SIM_SEED")
    if seed:
        run["seed"] = int(seed)
    output_dir = run.get("output_dir")
    if output_dir and not Path(output_dir).is_absolute():
        run["output_dir"] = str(ROOT_DIR / output_dir)

    log_cfg = dict(settings.get("logging") or {})
    log_level = os.getenv("DEMAND_SIM_LOG_LEVEL")
    if log_level:
        log_cfg["level"] = log_level

    return {"run": run, "logging": log_cfg, "config_path": str(candidate)}


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
    )


__all__ = ["load_run_settings", "configure_logging", "CONFIG_DIR", "ROOT_DIR"]
