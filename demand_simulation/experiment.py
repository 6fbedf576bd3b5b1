"""
Run scaffolding for the demand simulation pipeline.

This module wires the four stages together (sales generation, back-test and
future forecast, evaluation, inventory planning) and writes the resulting
tables for the Streamlit dashboard or any other consumer.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Mapping, Optional, Tuple

import numpy as np
import yaml

from config.run_loader import load_run_settings

from . import utils
from .dates import to_date_key
from .errors import ConfigError, InvalidFactorError, InvalidRangeError
from .evaluation import evaluate_forecast
from .forecast import simulate_forecast
from .inventory import plan_inventory
from .records import (
    EvaluationResult,
    ForecastRecord,
    InventoryRecommendation,
    SalesRecord,
)
from .simulator import generate_sales
from .utils import EXPORT_FORMATS

logger = logging.getLogger(__name__)


@dataclass
class RunConfig:
    start_date: date
    end_date: date
    forecast_horizon_days: int = 90
    safety_stock_factor: float = 0.20
    seed: Optional[int] = None
    output_dir: Optional[Path] = None
    export_format: str = "csv"

    @property
    def history_days(self) -> int:
        return (self.end_date - self.start_date).days + 1


@dataclass(frozen=True)
class PipelineResult:
    history: Tuple[SalesRecord, ...]
    backtest: Tuple[ForecastRecord, ...]
    evaluation: EvaluationResult
    forecast: Tuple[ForecastRecord, ...]
    inventory: Tuple[InventoryRecommendation, ...]


def run_pipeline(
    config: RunConfig, rng: Optional[np.random.Generator] = None
) -> PipelineResult:
    if rng is None:
        rng = np.random.default_rng(config.seed)

    history = generate_sales(config.start_date, config.end_date, rng)

    backtest_origin = history[0].date - timedelta(days=1)
    backtest = simulate_forecast(history, len(history), origin=backtest_origin)
    evaluation = evaluate_forecast(history, backtest)

    forecast = simulate_forecast(history, config.forecast_horizon_days)
    inventory = plan_inventory(forecast, config.safety_stock_factor)

    logger.info(
        f"Pipeline finished: {len(history)} history days, "
        f"{len(forecast)} forecast days, MAE={evaluation.mean_absolute_error:.2f}"
    )
    return PipelineResult(
        history=history,
        backtest=backtest,
        evaluation=evaluation,
        forecast=forecast,
        inventory=inventory,
    )


def save_run_outputs(
    result: PipelineResult,
    output_dir: Path,
    format: str = "csv",
) -> None:
    if format not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported format: {format}")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    tables = {
        "sales_history": utils.sales_frame(result.history),
        "backtest_forecast": utils.forecast_frame(result.backtest),
        "forecast": utils.forecast_frame(result.forecast),
        "inventory": utils.inventory_frame(result.inventory),
    }
    for name, df in tables.items():
        utils.export_frame(df, output_dir / f"{name}.{format}", format)

    with open(output_dir / "evaluation.yaml", "w", encoding="utf-8") as f:
        yaml.safe_dump(asdict(result.evaluation), f, sort_keys=False)

    logger.info(f"Run outputs written to {output_dir} in {format} format")


def _require(raw: Mapping[str, object], key: str) -> object:
    if key not in raw or raw[key] is None:
        raise ConfigError(f"Run config is missing required key '{key}'.")
    return raw[key]


def _integer(raw: Mapping[str, object], key: str, default: Optional[int]) -> Optional[int]:
    value = raw.get(key, default)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ConfigError(f"Run config value '{key}' must be an integer, got {value!r}.")
    return int(value)


def parse_run_config(raw: Mapping[str, object]) -> RunConfig:
    start_date = to_date_key(_require(raw, "start_date"))
    end_date = to_date_key(_require(raw, "end_date"))
    if start_date > end_date:
        raise InvalidRangeError(
            f"start_date {start_date.isoformat()} is after end_date {end_date.isoformat()}."
        )

    horizon = _integer(raw, "forecast_horizon_days", 90)
    seed = _integer(raw, "seed", None)
    try:
        factor = float(raw.get("safety_stock_factor", 0.20))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Malformed run config value: {exc}") from exc

    if horizon < 0:
        raise InvalidRangeError(f"forecast_horizon_days must be >= 0, got {horizon}.")
    if np.isnan(factor) or factor < 0:
        raise InvalidFactorError(f"safety_stock_factor must be >= 0, got {factor}.")

    export_format = raw.get("export_format", "csv")
    if export_format not in EXPORT_FORMATS:
        raise ConfigError(f"Unsupported export_format: {export_format}")

    output_dir = raw.get("output_dir")
    return RunConfig(
        start_date=start_date,
        end_date=end_date,
        forecast_horizon_days=horizon,
        safety_stock_factor=factor,
        seed=seed,
        output_dir=Path(output_dir) if output_dir else None,
        export_format=export_format,
    )


def load_run(config_path: Path) -> PipelineResult:
    """
    Run the pipeline from a YAML file with a top-level ``run`` section.

    Settings go through ``config.run_loader.load_run_settings``, so relative
    paths resolve against the repository root and DEMAND_SIM_SEED applies.
    """
    settings = load_run_settings(str(config_path))
    if not settings["run"]:
        raise ConfigError(f"No 'run' section in {settings['config_path']}.")
    config = parse_run_config(settings["run"])

    result = run_pipeline(config)
    if config.output_dir is not None:
        save_run_outputs(result, config.output_dir, config.export_format)
    return result


__all__ = [
    "RunConfig",
    "PipelineResult",
    "run_pipeline",
    "save_run_outputs",
    "parse_run_config",
    "load_run",
]
