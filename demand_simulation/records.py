"""
Value objects passed between pipeline stages.

Every record is frozen and keyed by a ``date``; ``ds`` gives the ISO string
used in exported tables.
"""

from __future__ import annotations

from dataclasses import dataclass

from .dates import DateKey, iso_key


@dataclass(frozen=True)
class SalesRecord:
    date: DateKey
    actual_sales: int

    @property
    def ds(self) -> str:
        return iso_key(self.date)


@dataclass(frozen=True)
class ForecastRecord:
    date: DateKey
    predicted_sales: int
    lower_bound: int
    upper_bound: int
    trend_component: float
    yearly_component: float
    weekly_component: float

    @property
    def ds(self) -> str:
        return iso_key(self.date)


@dataclass(frozen=True)
class EvaluationResult:
    mean_absolute_error: float
    root_mean_squared_error: float


@dataclass(frozen=True)
class InventoryRecommendation:
    date: DateKey
    predicted_sales: int
    recommended_stock: int

    @property
    def ds(self) -> str:
        return iso_key(self.date)


__all__ = [
    "SalesRecord",
    "ForecastRecord",
    "EvaluationResult",
    "InventoryRecommendation",
]
