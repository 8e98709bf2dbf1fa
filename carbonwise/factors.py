# carbonwise/factors.py
from typing import Dict

# -------------------------------------------------------------------
# Transport: kg CO2e per km (plane: per flight hour)
# -------------------------------------------------------------------
TRANSPORT_FACTORS: Dict[str, float] = {
    "car": 0.12,           # gasoline
    "electricCar": 0.04,
    "hybridCar": 0.08,
    "bus": 0.03,
    "train": 0.02,
    "plane": 90.0,
    "motorcycle": 0.08,
}

# -------------------------------------------------------------------
# Home energy: kg CO2e per kWh / therm / gallon
# -------------------------------------------------------------------
HOME_FACTORS: Dict[str, float] = {
    "electricity": 0.42,          # grid average, per kWh
    "renewableElectricity": 0.05,
    "naturalGas": 5.3,            # per therm
    "heatingOil": 7.3,            # per gallon
    "propane": 5.7,               # per gallon
}

# -------------------------------------------------------------------
# Diet: kg CO2e per day by diet type, plus per meat serving
# -------------------------------------------------------------------
DIET_FACTORS: Dict[str, float] = {
    "vegan": 1.5,
    "vegetarian": 2.5,
    "pescatarian": 3.2,
    "mixed": 4.0,
    "high-meat": 5.5,
}
MEAT_SERVING_KG: float = 0.5
DEFAULT_DIET = "mixed"

# -------------------------------------------------------------------
# Shopping: kg CO2e per dollar spent
# -------------------------------------------------------------------
SHOPPING_FACTORS: Dict[str, float] = {
    "clothing": 0.03,
    "electronics": 0.05,
    "furniture": 0.08,
    "food": 0.02,
}

# Annualisation
WEEKS_PER_YEAR = 52
MONTHS_PER_YEAR = 12
DAYS_PER_YEAR = 365

# Per-person global average, kg CO2e per year
WORLD_AVERAGE_KG: int = 4800


def factors_summary() -> dict:
    return {
        "transport_kg_per_km": dict(TRANSPORT_FACTORS),
        "home_kg_per_unit": dict(HOME_FACTORS),
        "diet_kg_per_day": dict(DIET_FACTORS),
        "meat_serving_kg": MEAT_SERVING_KG,
        "shopping_kg_per_dollar": dict(SHOPPING_FACTORS),
        "world_average_kg": WORLD_AVERAGE_KG,
    }
