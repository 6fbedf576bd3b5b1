# demand_simulation/simulator.py
import logging
from typing import Tuple

import numpy as np

from . import features as feat
from .dates import DateLike, daily_range, round_half_up
from .records import SalesRecord

logger = logging.getLogger(__name__)

BASE_SALES = 100.0


def generate_sales(
    start_date: DateLike,
    end_date: DateLike,
    rng: np.random.Generator,
) -> Tuple[SalesRecord, ...]:
    """
    Sales = base + trend + yearly season + weekend lift + uniform noise,
    clipped at zero and rounded, one record per day from start to end inclusive.
    """
    dates = daily_range(start_date, end_date)
    T = len(dates)

    mu = (
        BASE_SALES
        + feat.linear_trend(T).to_numpy()
        + feat.yearly_seasonality(dates).to_numpy()
        + feat.weekly_seasonality(dates).to_numpy()
    )
    noise = feat.uniform_noise(T, rng).to_numpy()
    sales = round_half_up(np.maximum(0, mu + noise))

    records = tuple(
        SalesRecord(date=day.date(), actual_sales=int(value))
        for day, value in zip(dates, sales)
    )
    logger.info(
        f"Generated {len(records)} daily sales records "
        f"({dates[0].date()} to {dates[-1].date()})"
    )
    return records
