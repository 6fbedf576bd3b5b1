import math
from datetime import date

import pytest

from demand_simulation import evaluate_forecast
from demand_simulation.records import EvaluationResult, ForecastRecord, SalesRecord


def _forecast(day, yhat):
    return ForecastRecord(
        date=day,
        predicted_sales=yhat,
        lower_bound=max(0, yhat - 5),
        upper_bound=yhat + 5,
        trend_component=float(yhat),
        yearly_component=0.0,
        weekly_component=0.0,
    )


def test_single_matched_day():
    actual = [SalesRecord(date(2024, 1, 1), 100)]
    predicted = [_forecast(date(2024, 1, 1), 90)]

    result = evaluate_forecast(actual, predicted)

    assert result == EvaluationResult(mean_absolute_error=10.0, root_mean_squared_error=10.0)


def test_mae_and_rmse_over_matched_days():
    actual = [
        SalesRecord(date(2024, 1, 1), 100),
        SalesRecord(date(2024, 1, 2), 120),
        SalesRecord(date(2024, 1, 3), 90),
        SalesRecord(date(2024, 1, 4), 110),
    ]
    predicted = [_forecast(date(2024, 1, d), 100) for d in (1, 2, 3, 4)]

    result = evaluate_forecast(actual, predicted)

    assert result.mean_absolute_error == pytest.approx(10.0)
    assert result.root_mean_squared_error == pytest.approx(math.sqrt((0 + 400 + 100 + 100) / 4))


def test_unmatched_days_are_dropped_not_scored():
    actual = [
        SalesRecord(date(2024, 1, 1), 100),
        SalesRecord(date(2024, 1, 2), 500),
    ]
    predicted = [_forecast(date(2024, 1, 1), 96), _forecast(date(2024, 2, 1), 0)]

    result = evaluate_forecast(actual, predicted)

    assert result.mean_absolute_error == 4.0
    assert result.root_mean_squared_error == 4.0


def test_no_overlap_returns_zero_errors():
    actual = [SalesRecord(date(2024, 1, 1), 100)]
    predicted = [_forecast(date(2024, 1, 2), 100)]

    assert evaluate_forecast(actual, predicted) == EvaluationResult(0.0, 0.0)
    assert evaluate_forecast([], []) == EvaluationResult(0.0, 0.0)


def test_inputs_are_not_modified():
    actual = [SalesRecord(date(2024, 1, 1), 100)]
    predicted = [_forecast(date(2024, 1, 1), 80)]

    evaluate_forecast(actual, predicted)

    assert actual == [SalesRecord(date(2024, 1, 1), 100)]
    assert predicted == [_forecast(date(2024, 1, 1), 80)]
