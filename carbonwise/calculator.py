# carbonwise/calculator.py
from __future__ import annotations
import math
from typing import List

from .factors import (
    TRANSPORT_FACTORS,
    HOME_FACTORS,
    DIET_FACTORS,
    MEAT_SERVING_KG,
    SHOPPING_FACTORS,
    WEEKS_PER_YEAR,
    MONTHS_PER_YEAR,
    DAYS_PER_YEAR,
    WORLD_AVERAGE_KG,
)
from .mapper import canonical_diet
from .schemas import Anomaly, EmissionsBreakdown, LifestyleInput

# Sanity limits; anything above is treated as a likely typo
ANOMALY_RULES = [
    ("transport", "carKm", 1000, "Car kilometers seem unusually high. Please verify your input.", "high"),
    ("transport", "flightHours", 200, "Flight hours seem unusually high. Please verify your input.", "high"),
    ("home", "electricity", 2000, "Electricity consumption seems unusually high. Please verify your input.", "medium"),
]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ---------- per-category annual kg CO2e (unrounded) ----------
def transport_kg(data: LifestyleInput) -> float:
    t = data.transport
    return (t.carKm * WEEKS_PER_YEAR * TRANSPORT_FACTORS["car"]
            + t.flightHours * TRANSPORT_FACTORS["plane"]
            + t.publicTransport * WEEKS_PER_YEAR * TRANSPORT_FACTORS["bus"])


def home_kg(data: LifestyleInput) -> float:
    h = data.home
    return (h.electricity * MONTHS_PER_YEAR * HOME_FACTORS["electricity"]
            + h.gas * MONTHS_PER_YEAR * HOME_FACTORS["naturalGas"])


def diet_kg(data: LifestyleInput) -> float:
    d = data.diet
    per_day = DIET_FACTORS[canonical_diet(d.type)]
    return per_day * DAYS_PER_YEAR + d.meatServings * WEEKS_PER_YEAR * MEAT_SERVING_KG


def shopping_kg(data: LifestyleInput) -> float:
    s = data.shopping
    return s.clothing * SHOPPING_FACTORS["clothing"] + s.electronics * SHOPPING_FACTORS["electronics"]


def calculate_emissions(data: LifestyleInput) -> EmissionsBreakdown:
    """
    Annual emissions per category, rounded to whole kg. The total is the sum
    of the rounded categories so the breakdown always adds up.
    """
    transport = round_half_up(transport_kg(data))
    home = round_half_up(home_kg(data))
    diet = round_half_up(diet_kg(data))
    shopping = round_half_up(shopping_kg(data))
    return EmissionsBreakdown(
        transport=transport,
        home=home,
        diet=diet,
        shopping=shopping,
        total=transport + home + diet + shopping,
    )


def detect_anomalies(data: LifestyleInput) -> List[Anomaly]:
    anomalies: List[Anomaly] = []
    for section, field, limit, message, severity in ANOMALY_RULES:
        value = getattr(getattr(data, section), field)
        if value > limit:
            anomalies.append(Anomaly(field=field, message=message, severity=severity))
    return anomalies


# ---------- presentation helpers ----------
def compare_to_world_average(total: float) -> int:
    """Total as a percentage of the per-person world average."""
    return round_half_up(total / WORLD_AVERAGE_KG * 100)


def impact_level(total: float) -> str:
    if total < 3000:
        return "Low"
    if total < 6000:
        return "Medium"
    return "High"


def format_emissions(kg: float) -> str:
    if kg >= 1000:
        return f"{kg / 1000:.1f} tonnes"
    return f"{round_half_up(kg)} kg"
