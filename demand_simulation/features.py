# demand_simulation/features.py
import numpy as np
import pandas as pd

TREND_RAMP = 50.0
YEARLY_AMPLITUDE = 10.0
DAYS_PER_YEAR = 365
WEEKEND_LIFT = 15.0
NOISE_HALF_WIDTH = 5.0


def linear_trend(T, ramp=TREND_RAMP, name="trend"):
    """Ramp from 0 towards ``ramp`` over T days: (i / T) * ramp."""
    if T == 0:
        return pd.Series(np.zeros(0), name=name)
    steps = np.arange(T, dtype=float)
    return pd.Series(steps / T * ramp, name=name)


def yearly_seasonality(dates, amplitude=YEARLY_AMPLITUDE, name="yearly_seasonality"):
    """One sine cycle per calendar year, driven by the 1-based day of year."""
    day_of_year = pd.DatetimeIndex(dates).dayofyear.to_numpy()
    seasonal = amplitude * np.sin(day_of_year * (2 * np.pi / DAYS_PER_YEAR))
    return pd.Series(seasonal, name=name)


def weekly_seasonality(dates, lift=WEEKEND_LIFT, name="weekly_seasonality"):
    """Flat weekday level with a lift on Saturday and Sunday."""
    weekday = pd.DatetimeIndex(dates).dayofweek.to_numpy()  # 0=Mon,...,6=Sun
    weekend = np.where(weekday >= 5, lift, 0.0)
    return pd.Series(weekend, name=name)


def uniform_noise(T, rng, half_width=NOISE_HALF_WIDTH, name="noise"):
    """Independent draws from [-half_width, half_width), one per day."""
    return pd.Series(rng.uniform(-half_width, half_width, size=T), name=name)
