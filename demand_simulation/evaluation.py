# demand_simulation/evaluation.py
import logging
from typing import Sequence

import numpy as np

from .records import EvaluationResult, ForecastRecord, SalesRecord

logger = logging.getLogger(__name__)


def evaluate_forecast(
    actual: Sequence[SalesRecord],
    predicted: Sequence[ForecastRecord],
) -> EvaluationResult:
    """
    MAE and RMSE over the dates present in both series.

    Actual records without a predicted counterpart are dropped rather than
    scored as zero error. When no dates overlap the result is (0, 0).
    """
    predicted_by_date = {record.date: record.predicted_sales for record in predicted}
    pairs = [
        (record.actual_sales, predicted_by_date[record.date])
        for record in actual
        if record.date in predicted_by_date
    ]
    if not pairs:
        logger.info("No overlapping dates between actual and predicted series")
        return EvaluationResult(mean_absolute_error=0.0, root_mean_squared_error=0.0)

    matched = np.array(pairs, dtype=float)
    errors = matched[:, 0] - matched[:, 1]
    mae = float(np.mean(np.abs(errors)))
    rmse = float(np.sqrt(np.mean(errors**2)))

    logger.info(f"Evaluated {len(pairs)} matched days: MAE={mae:.2f}, RMSE={rmse:.2f}")
    return EvaluationResult(mean_absolute_error=mae, root_mean_squared_error=rmse)
