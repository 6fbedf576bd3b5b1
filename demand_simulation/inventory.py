# demand_simulation/inventory.py
import logging
import math
from typing import Sequence, Tuple

from .dates import round_half_up
from .errors import InvalidFactorError
from .records import ForecastRecord, InventoryRecommendation

logger = logging.getLogger(__name__)


def plan_inventory(
    forecast: Sequence[ForecastRecord],
    safety_factor: float,
) -> Tuple[InventoryRecommendation, ...]:
    """Recommended stock = predicted sales * (1 + safety_factor), rounded."""
    if math.isnan(safety_factor) or safety_factor < 0:
        raise InvalidFactorError(f"Safety stock factor must be >= 0, got {safety_factor}.")

    stock = round_half_up(
        [record.predicted_sales * (1 + safety_factor) for record in forecast]
    )
    recommendations = tuple(
        InventoryRecommendation(
            date=record.date,
            predicted_sales=record.predicted_sales,
            recommended_stock=int(level),
        )
        for record, level in zip(forecast, stock)
    )
    logger.info(
        f"Planned inventory for {len(recommendations)} days "
        f"with safety factor {safety_factor:.2f}"
    )
    return recommendations
