# carbonwise/mapper.py — minimal mapper that normalizes free-text diet labels
from typing import Optional

from .factors import DIET_FACTORS, DEFAULT_DIET

ALIASES = {
    "high meat": "high-meat",
    "high_meat": "high-meat",
    "highmeat": "high-meat",
    "meat-heavy": "high-meat",
    "meat heavy": "high-meat",
    "heavy meat": "high-meat",
    "carnivore": "high-meat",
    "omnivore": "mixed",
    "average": "mixed",
    "pescetarian": "pescatarian",
    "plant-based": "vegan",
    "plant based": "vegan",
    "veggie": "vegetarian",
}

def canonical_diet(label: Optional[str]) -> str:
    n = (label or "").strip().lower()
    n = ALIASES.get(n, n)
    return n if n in DIET_FACTORS else DEFAULT_DIET
