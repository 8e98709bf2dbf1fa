# carbonwise/forecast.py
from __future__ import annotations
import random
from typing import List, Optional

from .calculator import round_half_up
from .config import FORECAST_SEED
from .schemas import Prediction

HORIZON_MONTHS = 12
MAX_TREND = 0.1             # +/-10% over the year
CONFIDENCE_STEP = 0.05      # lost per month ahead
CONFIDENCE_FLOOR = 0.5


def _default_rng() -> random.Random:
    return random.Random(FORECAST_SEED) if FORECAST_SEED is not None else random.Random()


def predict_future_footprint(
    total: float,
    months: int = HORIZON_MONTHS,
    rng: Optional[random.Random] = None,
) -> List[Prediction]:
    """
    Linear projection of `total` with one random yearly trend in [-10%, +10%].
    Confidence drops 5 points a month and never goes below 0.5.
    """
    rng = rng or _default_rng()
    trend = rng.uniform(-MAX_TREND, MAX_TREND)
    monthly_change = trend / 12

    predictions: List[Prediction] = []
    for i in range(1, months + 1):
        predictions.append(Prediction(
            month=i,
            predicted=round_half_up(total * (1 + monthly_change * i)),
            confidence=round(max(CONFIDENCE_FLOOR, 1 - i * CONFIDENCE_STEP), 2),
        ))
    return predictions
