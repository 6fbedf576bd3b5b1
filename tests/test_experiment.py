from datetime import date
from pathlib import Path

import numpy as np
import pandas as pd
import pytest
import yaml

from demand_simulation import (
    RunConfig,
    load_run,
    parse_run_config,
    run_pipeline,
    save_run_outputs,
)
from config.run_loader import _read_yaml
from demand_simulation.errors import ConfigError, InvalidFactorError, InvalidRangeError


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    monkeypatch.delenv("DEMAND_SIM_SEED", raising=False)
    _read_yaml.cache_clear()
    yield
    _read_yaml.cache_clear()


@pytest.fixture
def config():
    return RunConfig(
        start_date=date(2024, 1, 1),
        end_date=date(2024, 3, 31),
        forecast_horizon_days=30,
        safety_stock_factor=0.2,
        seed=42,
    )


def test_run_pipeline_produces_all_stages(config):
    result = run_pipeline(config)

    assert len(result.history) == config.history_days == 91
    assert [r.date for r in result.backtest] == [r.date for r in result.history]
    assert len(result.forecast) == 30
    assert result.forecast[0].date == date(2024, 4, 1)
    assert [r.date for r in result.inventory] == [r.date for r in result.forecast]
    assert result.evaluation.mean_absolute_error > 0
    assert result.evaluation.root_mean_squared_error >= result.evaluation.mean_absolute_error


def test_run_pipeline_is_reproducible_for_a_seed(config):
    assert run_pipeline(config) == run_pipeline(config)


def test_run_pipeline_accepts_explicit_generator(config):
    first = run_pipeline(config, rng=np.random.default_rng(9))
    second = run_pipeline(config, rng=np.random.default_rng(9))
    assert first.history == second.history


def test_run_pipeline_zero_horizon(config):
    config.forecast_horizon_days = 0
    result = run_pipeline(config)
    assert result.forecast == ()
    assert result.inventory == ()


def test_save_run_outputs_writes_tables(config, tmp_path):
    result = run_pipeline(config)
    save_run_outputs(result, tmp_path / "out")

    out = tmp_path / "out"
    history = pd.read_csv(out / "sales_history.csv")
    assert list(history.columns) == ["ds", "y"]
    assert history["ds"].iloc[0] == "2024-01-01"
    inventory = pd.read_csv(out / "inventory.csv")
    assert list(inventory.columns) == ["ds", "yhat", "recommended_inventory"]
    assert len(inventory) == 30
    assert (out / "forecast.csv").exists()
    assert (out / "backtest_forecast.csv").exists()

    evaluation = yaml.safe_load((out / "evaluation.yaml").read_text())
    assert evaluation["mean_absolute_error"] == pytest.approx(
        result.evaluation.mean_absolute_error
    )


def test_save_run_outputs_json(config, tmp_path):
    save_run_outputs(run_pipeline(config), tmp_path, format="json")
    records = pd.read_json(tmp_path / "forecast.json", orient="records")
    assert len(records) == 30


def test_save_run_outputs_rejects_unknown_format(config, tmp_path):
    with pytest.raises(ValueError):
        save_run_outputs(run_pipeline(config), tmp_path, format="xlsx")


def test_parse_run_config_defaults():
    cfg = parse_run_config({"start_date": "2022-01-01", "end_date": date(2024, 12, 31)})

    assert cfg.start_date == date(2022, 1, 1)
    assert cfg.end_date == date(2024, 12, 31)
    assert cfg.forecast_horizon_days == 90
    assert cfg.safety_stock_factor == 0.2
    assert cfg.seed is None
    assert cfg.output_dir is None
    assert cfg.export_format == "csv"


@pytest.mark.parametrize(
    "raw, error",
    [
        ({"end_date": "2024-01-01"}, ConfigError),
        ({"start_date": "2024-01-01"}, ConfigError),
        ({"start_date": "2024-02-01", "end_date": "2024-01-01"}, InvalidRangeError),
        ({"start_date": "2024-13-01", "end_date": "2024-12-01"}, InvalidRangeError),
        (
            {"start_date": "2024-01-01", "end_date": "2024-02-01", "forecast_horizon_days": -3},
            InvalidRangeError,
        ),
        (
            {"start_date": "2024-01-01", "end_date": "2024-02-01", "safety_stock_factor": -0.1},
            InvalidFactorError,
        ),
        (
            {"start_date": "2024-01-01", "end_date": "2024-02-01", "seed": "abc"},
            ConfigError,
        ),
        (
            {"start_date": "2024-01-01", "end_date": "2024-02-01", "export_format": "xml"},
            ConfigError,
        ),
        (
            {"start_date": "2024-01-01", "end_date": "2024-02-01", "forecast_horizon_days": 7.9},
            ConfigError,
        ),
        (
            {"start_date": "2024-01-01", "end_date": "2024-02-01", "forecast_horizon_days": True},
            ConfigError,
        ),
        (
            {"start_date": "2024-01-01", "end_date": "2024-02-01", "forecast_horizon_days": "30"},
            ConfigError,
        ),
        (
            {"start_date": "2024-01-01", "end_date": "2024-02-01", "seed": 4.5},
            ConfigError,
        ),
    ],
)
def test_parse_run_config_rejects_bad_input(raw, error):
    with pytest.raises(error):
        parse_run_config(raw)


def test_load_run_reads_yaml_and_exports(tmp_path):
    config_path = tmp_path / "run.yaml"
    config_path.write_text(
        yaml.safe_dump(
            {
                "run": {
                    "start_date": "2023-06-01",
                    "end_date": "2023-06-30",
                    "forecast_horizon_days": 14,
                    "safety_stock_factor": 0.1,
                    "seed": 3,
                    "output_dir": str(tmp_path / "outputs"),
                }
            }
        )
    )

    result = load_run(config_path)

    assert len(result.history) == 30
    assert len(result.inventory) == 14
    assert Path(tmp_path / "outputs" / "inventory.csv").exists()


def test_load_run_requires_run_section(tmp_path):
    config_path = tmp_path / "run.yaml"
    config_path.write_text("logging:\n  level: INFO\n")

    with pytest.raises(ConfigError):
        load_run(config_path)


def test_parse_run_config_accepts_numpy_integers():
    cfg = parse_run_config(
        {
            "start_date": "2024-01-01",
            "end_date": "2024-02-01",
            "forecast_horizon_days": np.int64(12),
            "seed": np.int32(5),
        }
    )
    assert cfg.forecast_horizon_days == 12
    assert cfg.seed == 5


def _write_run(path, **run):
    path.write_text(yaml.safe_dump({"run": run}))
    return path


def test_load_run_resolves_relative_output_dir_against_root(monkeypatch, tmp_path):
    root = tmp_path / "repo"
    elsewhere = tmp_path / "cwd"
    elsewhere.mkdir()
    monkeypatch.setattr("config.run_loader.ROOT_DIR", root)
    monkeypatch.chdir(elsewhere)
    config_path = _write_run(
        tmp_path / "run.yaml",
        start_date="2023-06-01",
        end_date="2023-06-10",
        forecast_horizon_days=5,
        seed=3,
        output_dir="relative_out",
    )

    load_run(config_path)

    assert (root / "relative_out" / "inventory.csv").exists()
    assert not (elsewhere / "relative_out").exists()


def test_load_run_applies_seed_override(monkeypatch, tmp_path):
    config_path = _write_run(
        tmp_path / "run.yaml", start_date="2023-06-01", end_date="2023-06-20", seed=3
    )
    expected = run_pipeline(
        RunConfig(start_date=date(2023, 6, 1), end_date=date(2023, 6, 20), seed=77)
    )

    monkeypatch.setenv("DEMAND_SIM_SEED", "77")

    assert load_run(config_path).history == expected.history


def test_backtest_trend_ends_on_last_observation(config):
    result = run_pipeline(config)
    assert result.backtest[-1].trend_component == pytest.approx(result.history[-1].actual_sales)
