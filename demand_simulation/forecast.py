"""
Component-wise forecast simulation.

The forecast is not fitted. It extrapolates the history's average daily slope,
damped to a tenth, from the last observed value and adds the same yearly and
weekend components used to generate the series. The uncertainty band is a
fixed +/- 5 units around the raw prediction.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from . import features as feat
from .dates import DateLike, days_following, round_half_up, to_date_key
from .errors import EmptyHistoryError, InvalidRangeError
from .records import ForecastRecord, SalesRecord

logger = logging.getLogger(__name__)

TREND_DAMPING = 0.1
UNCERTAINTY_HALF_WIDTH = 5.0


def average_daily_slope(history: Sequence[SalesRecord]) -> float:
    """(last - first) / len(history); zero for histories of one record or fewer."""
    if len(history) <= 1:
        return 0.0
    return (history[-1].actual_sales - history[0].actual_sales) / len(history)


def simulate_forecast(
    history: Sequence[SalesRecord],
    horizon_days: int,
    origin: Optional[DateLike] = None,
) -> Tuple[ForecastRecord, ...]:
    """
    Simulate ``horizon_days`` forecast records for the days following ``origin``.

    Args:
        history: Ordered sales history; its first and last values set the slope
            and its last value and date anchor the trend.
        horizon_days: Number of days to forecast.
        origin: Day before the first forecast date. Defaults to the last
            historical date. The back-test passes the day before the history
            starts so the forecast lines up with the historical span.

    Returns:
        Tuple of ForecastRecord, one per forecast day, in date order.
    """
    if horizon_days < 0:
        raise InvalidRangeError(f"Forecast horizon must be >= 0, got {horizon_days}.")
    if horizon_days == 0:
        return ()
    if not history:
        raise EmptyHistoryError("Cannot forecast without at least one historical record.")

    anchor = to_date_key(origin) if origin is not None else history[-1].date
    dates = days_following(anchor, horizon_days)

    last_value = float(history[-1].actual_sales)
    slope = average_daily_slope(history)
    # days from the last observation; non-positive across a back-test
    offsets = (dates - pd.Timestamp(history[-1].date)).days.to_numpy(dtype=float)

    trend = last_value + offsets * slope * TREND_DAMPING
    yearly = feat.yearly_seasonality(dates).to_numpy()
    weekly = feat.weekly_seasonality(dates).to_numpy()
    raw = trend + yearly + weekly

    predicted = round_half_up(np.maximum(0, raw))
    lower = round_half_up(np.maximum(0, raw - UNCERTAINTY_HALF_WIDTH))
    # raw + 5 goes negative only when the damped trend runs far below zero
    upper = np.maximum(predicted, round_half_up(raw + UNCERTAINTY_HALF_WIDTH))

    records = tuple(
        ForecastRecord(
            date=day.date(),
            predicted_sales=int(predicted[i]),
            lower_bound=int(lower[i]),
            upper_bound=int(upper[i]),
            trend_component=float(trend[i]),
            yearly_component=float(yearly[i]),
            weekly_component=float(weekly[i]),
        )
        for i, day in enumerate(dates)
    )
    logger.info(
        f"Simulated {len(records)}-day forecast after {anchor.isoformat()} "
        f"(slope={slope:.4f})"
    )
    return records
