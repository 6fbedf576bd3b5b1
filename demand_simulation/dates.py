# demand_simulation/dates.py
from datetime import date, datetime, timedelta
from typing import Union

import numpy as np
import pandas as pd

from .errors import InvalidRangeError

# Calendar date used to join records; exported as ISO "YYYY-MM-DD".
DateKey = date

DateLike = Union[date, datetime, pd.Timestamp, str]


def to_date_key(value: DateLike) -> DateKey:
    """Normalise a date-like value to a ``date``, rejecting anything malformed."""
    if value is pd.NaT:
        raise InvalidRangeError("Date is missing (NaT).")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as exc:
            raise InvalidRangeError(
                f"Malformed date '{value}', expected YYYY-MM-DD."
            ) from exc
    raise InvalidRangeError(f"Unsupported date value: {value!r}")


def iso_key(value: DateKey) -> str:
    return value.isoformat()


def daily_range(start: DateLike, end: DateLike) -> pd.DatetimeIndex:
    """Inclusive daily calendar from ``start`` to ``end``."""
    start_key = to_date_key(start)
    end_key = to_date_key(end)
    if start_key > end_key:
        raise InvalidRangeError(
            f"Start date {start_key.isoformat()} is after end date {end_key.isoformat()}."
        )
    return pd.date_range(start=start_key, end=end_key, freq="D")


def days_following(origin: DateLike, periods: int) -> pd.DatetimeIndex:
    """The ``periods`` calendar days immediately after ``origin``."""
    first = to_date_key(origin) + timedelta(days=1)
    return pd.date_range(start=first, periods=periods, freq="D")


def round_half_up(values):
    """Round halves upward, floor(x + 0.5), returning ints."""
    return np.floor(np.asarray(values, dtype=float) + 0.5).astype(int)
