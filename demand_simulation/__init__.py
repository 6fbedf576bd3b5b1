"""
Demand Simulation Module

This module generates a synthetic daily sales history, simulates a forecast
over a future horizon, scores a back-test against the history and turns the
forecast into recommended stock levels.
"""

import logging
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from .dates import DateLike
from .records import SalesRecord
from .simulator import generate_sales
from .utils import export_frame

logger = logging.getLogger(__name__)


class SeriesGenerator:
    """Sales series generator holding its own seedable random source."""

    def __init__(
        self,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize the series generator.

        Args:
            seed: Random seed for reproducible results
            rng: Existing generator to draw from; takes precedence over seed
        """
        self._rng = rng if rng is not None else np.random.default_rng(seed)

        logger.info("SeriesGenerator initialized")

    def generate(self, start_date: DateLike, end_date: DateLike) -> Tuple[SalesRecord, ...]:
        """
        Generate one sales record per day between the two dates, inclusive.

        Args:
            start_date: First day, as a date or YYYY-MM-DD string
            end_date: Last day, as a date or YYYY-MM-DD string

        Returns:
            Tuple of SalesRecord in date order
        """
        return generate_sales(start_date, end_date, self._rng)

    def export_data(self, data: pd.DataFrame, filepath: str, format: str = "csv"):
        """Export a tabular view of generated records, see ``utils.export_frame``."""
        export_frame(data, filepath, format)
        logger.info(f"Data exported to {filepath} in {format} format")


# Convenience re-exports for the pipeline
from .errors import (  # noqa: E402
    ConfigError,
    DemandSimulationError,
    EmptyHistoryError,
    InvalidFactorError,
    InvalidRangeError,
)
from .evaluation import evaluate_forecast  # noqa: E402
from .experiment import (  # noqa: E402
    PipelineResult,
    RunConfig,
    load_run,
    parse_run_config,
    run_pipeline,
    save_run_outputs,
)
from .forecast import simulate_forecast  # noqa: E402
from .inventory import plan_inventory  # noqa: E402
from .records import (  # noqa: E402
    EvaluationResult,
    ForecastRecord,
    InventoryRecommendation,
)

__all__ = [
    "SeriesGenerator",
    "SalesRecord",
    "ForecastRecord",
    "EvaluationResult",
    "InventoryRecommendation",
    "DemandSimulationError",
    "InvalidRangeError",
    "EmptyHistoryError",
    "InvalidFactorError",
    "ConfigError",
    "generate_sales",
    "simulate_forecast",
    "evaluate_forecast",
    "plan_inventory",
    "RunConfig",
    "PipelineResult",
    "run_pipeline",
    "save_run_outputs",
    "parse_run_config",
    "load_run",
]
