# demand_simulation/utils.py
from typing import Sequence

import pandas as pd

from .records import ForecastRecord, InventoryRecommendation, SalesRecord

FORECAST_COLUMNS = [
    "ds",
    "yhat",
    "yhat_lower",
    "yhat_upper",
    "trend",
    "yearly_seasonality",
    "weekly_seasonality",
]


def sales_frame(history: Sequence[SalesRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"ds": r.ds, "y": r.actual_sales} for r in history],
        columns=["ds", "y"],
    )


def forecast_frame(forecast: Sequence[ForecastRecord]) -> pd.DataFrame:
    rows = [
        {
            "ds": r.ds,
            "yhat": r.predicted_sales,
            "yhat_lower": r.lower_bound,
            "yhat_upper": r.upper_bound,
            "trend": r.trend_component,
            "yearly_seasonality": r.yearly_component,
            "weekly_seasonality": r.weekly_component,
        }
        for r in forecast
    ]
    return pd.DataFrame(rows, columns=FORECAST_COLUMNS)


def inventory_frame(recommendations: Sequence[InventoryRecommendation]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"ds": r.ds, "yhat": r.predicted_sales, "recommended_inventory": r.recommended_stock}
            for r in recommendations
        ],
        columns=["ds", "yhat", "recommended_inventory"],
    )


def combined_frame(
    history: Sequence[SalesRecord], forecast: Sequence[ForecastRecord]
) -> pd.DataFrame:
    """Actual rows followed by forecast rows, tagged by ``type``."""
    actual = sales_frame(history).assign(type="Actual")
    predicted = forecast_frame(forecast)[["ds", "yhat", "yhat_lower", "yhat_upper"]]
    predicted = predicted.assign(type="Forecast")
    return pd.concat([actual, predicted], ignore_index=True)[
        ["ds", "type", "y", "yhat", "yhat_lower", "yhat_upper"]
    ]


def components_frame(forecast: Sequence[ForecastRecord]) -> pd.DataFrame:
    return forecast_frame(forecast)[
        ["ds", "trend", "yearly_seasonality", "weekly_seasonality"]
    ]


EXPORT_FORMATS = ("csv", "json", "parquet")


def export_frame(df: pd.DataFrame, filepath, format: str = "csv") -> None:
    """
    Write a table to file.

    Args:
        df: DataFrame to write
        filepath: Output file path
        format: Export format ('csv', 'json', 'parquet')
    """
    if format == "csv":
        df.to_csv(filepath, index=False)
    elif format == "json":
        df.to_json(filepath, orient="records")
    elif format == "parquet":
        df.to_parquet(filepath, index=False)
    else:
        raise ValueError(f"Unsupported format: {format}")
