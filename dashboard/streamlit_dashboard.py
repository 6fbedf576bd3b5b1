import sys
from datetime import date
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
import streamlit as st
from lets_plot import (
    LetsPlot,
    aes,
    element_text,
    geom_line,
    geom_ribbon,
    ggplot,
    ggsize,
    ggtitle,
    layer_tooltips,
    scale_color_manual,
    scale_linetype_manual,
    theme,
    theme_minimal,
)

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from config.run_loader import configure_logging, load_run_settings
from demand_simulation import (
    DemandSimulationError,
    PipelineResult,
    parse_run_config,
    run_pipeline,
)
from demand_simulation import utils

LetsPlot.setup_html()

st.set_page_config(page_title="Sales Forecasting & Inventory", layout="wide")

st.title("Sales Forecasting & Inventory Optimization")
st.caption(
    "Simulated daily sales history, a component-wise forecast of future demand, "
    "and the stock levels recommended on top of it."
)

CONFIG_DEFAULT = ROOT_DIR / "config" / "forecast_run_001.yaml"

COLOR_PALETTE = {
    "Actual": "#264653",
    "Forecast": "#e76f51",
    "Trend": "#e9c46a",
    "Yearly": "#f4a261",
    "Weekly": "#2a9d8f",
    "Recommended": "#6a4c93",
}


@st.cache_data
def load_settings(path_str: str) -> Dict[str, Any]:
    return load_run_settings(path_str)


@st.cache_data
def compute_run(
    start_date: date,
    end_date: date,
    horizon: int,
    safety_factor: float,
    seed: int,
) -> PipelineResult:
    config = parse_run_config(
        {
            "start_date": start_date,
            "end_date": end_date,
            "forecast_horizon_days": horizon,
            "safety_stock_factor": safety_factor,
            "seed": seed,
        }
    )
    return run_pipeline(config)


def _melt_series(df: pd.DataFrame, columns: Dict[str, str]) -> pd.DataFrame:
    rows: List[Dict[str, Any]] = []
    for row in df.itertuples(index=False):
        for column, label in columns.items():
            value = getattr(row, column)
            if pd.isna(value):
                continue
            rows.append({"date": pd.Timestamp(row.ds), "value": value, "series": label})
    return pd.DataFrame(rows, columns=["date", "value", "series"])


def make_history_plot(result: PipelineResult) -> str:
    combined = utils.combined_frame(result.history, result.forecast)
    line_df = _melt_series(combined, {"y": "Actual", "yhat": "Forecast"})
    band_df = combined[combined["type"] == "Forecast"].copy()
    band_df["date"] = pd.to_datetime(band_df["ds"])

    tooltip = layer_tooltips().format("@date", "%b %d, %Y").line("@series: @value")
    plot = (
        ggplot()
        + geom_ribbon(
            data=band_df,
            mapping=aes(x="date", ymin="yhat_lower", ymax="yhat_upper"),
            fill=COLOR_PALETTE["Forecast"],
            alpha=0.2,
        )
        + geom_line(
            data=line_df,
            mapping=aes("date", "value", color="series", linetype="series"),
            size=0.8,
            tooltips=tooltip,
        )
        + scale_color_manual(values=COLOR_PALETTE)
        + scale_linetype_manual(values={"Actual": "solid", "Forecast": "dashed"})
        + theme_minimal()
        + theme(legend_position="top", title=element_text(size=16))
        + ggsize(1080, 420)
        + ggtitle("Historical Sales & Future Forecast")
    )
    return plot.to_html()


def make_components_plot(result: PipelineResult) -> str:
    components = utils.components_frame(result.forecast)
    line_df = _melt_series(
        components,
        {"trend": "Trend", "yearly_seasonality": "Yearly", "weekly_seasonality": "Weekly"},
    )
    plot = (
        ggplot(line_df, aes("date", "value", color="series"))
        + geom_line(size=1.0)
        + scale_color_manual(values=COLOR_PALETTE)
        + theme_minimal()
        + theme(legend_position="top", title=element_text(size=16))
        + ggsize(1080, 360)
        + ggtitle("Forecast Components")
    )
    return plot.to_html()


def make_inventory_plot(result: PipelineResult) -> str:
    inventory = utils.inventory_frame(result.inventory)
    line_df = _melt_series(
        inventory, {"yhat": "Forecast", "recommended_inventory": "Recommended"}
    )
    plot = (
        ggplot(line_df, aes("date", "value", color="series"))
        + geom_line(size=1.0)
        + scale_color_manual(values=COLOR_PALETTE)
        + theme_minimal()
        + theme(legend_position="top", title=element_text(size=16))
        + ggsize(1080, 360)
        + ggtitle("Forecasted Sales vs. Recommended Inventory")
    )
    return plot.to_html()


with st.sidebar:
    st.header("Run Settings")
    config_input = st.text_input(
        "Run config",
        value=str(CONFIG_DEFAULT),
        help="YAML file with the default date range, horizon and safety factor.",
    )
    try:
        settings = load_settings(config_input)
    except FileNotFoundError:
        st.error("Config file not found. Update the path to continue.")
        st.stop()

    configure_logging(settings["logging"].get("level", "INFO"))
    try:
        defaults = parse_run_config(settings["run"])
    except DemandSimulationError as exc:
        st.error(f"Invalid run config: {exc}")
        st.stop()

    start_input = st.date_input("History start", value=defaults.start_date)
    end_input = st.date_input("History end", value=defaults.end_date)
    horizon_input = st.number_input(
        "Forecast horizon (days)",
        min_value=0,
        max_value=730,
        value=defaults.forecast_horizon_days,
        step=1,
    )
    factor_input = st.slider(
        "Safety stock factor",
        min_value=0.0,
        max_value=1.0,
        value=float(defaults.safety_stock_factor),
        step=0.05,
    )
    seed_input = st.number_input(
        "Random seed",
        min_value=0,
        value=defaults.seed if defaults.seed is not None else 0,
        step=1,
    )

try:
    result = compute_run(
        start_input, end_input, int(horizon_input), float(factor_input), int(seed_input)
    )
except DemandSimulationError as exc:
    st.error(str(exc))
    st.stop()

metric_cols = st.columns(4)
metric_cols[0].metric("Mean Absolute Error", f"{result.evaluation.mean_absolute_error:.2f}")
metric_cols[1].metric(
    "Root Mean Squared Error", f"{result.evaluation.root_mean_squared_error:.2f}"
)
metric_cols[2].metric("History days", len(result.history))
metric_cols[3].metric("Forecast days", len(result.forecast))

st.components.v1.html(make_history_plot(result), height=460, scrolling=False)
if result.forecast:
    st.components.v1.html(make_components_plot(result), height=400, scrolling=False)
    st.components.v1.html(make_inventory_plot(result), height=400, scrolling=False)
else:
    st.info("Forecast horizon is zero; nothing to plan.")

with st.expander("Inventory recommendations", expanded=False):
    inventory_df = utils.inventory_frame(result.inventory)
    st.dataframe(inventory_df, use_container_width=True)
    st.download_button(
        "Download CSV",
        data=inventory_df.to_csv(index=False).encode("utf-8"),
        file_name="inventory_recommendations.csv",
        mime="text/csv",
    )
