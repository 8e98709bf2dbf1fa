# carbonwise/suggestions.py — threshold tips plus tips borrowed from similar profiles
from __future__ import annotations
import logging
import threading
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple

from .calculator import round_half_up
from .config import PROFILE_HISTORY_LIMIT
from .factors import WORLD_AVERAGE_KG
from .schemas import EmissionsBreakdown, Recommendation

logger = logging.getLogger(__name__)

CATEGORIES = ("transport", "home", "diet", "shopping")

# (category, threshold, impact fraction, recommendation fields)
RULES = [
    ("transport", 2000, 0.6, {
        "title": "Switch to Electric Vehicle",
        "difficulty": "medium",
        "confidence": 0.85,
        "description": "Electric vehicles can reduce your transport emissions by up to 60%.",
        "action": "Consider leasing or purchasing an electric vehicle for your daily commute.",
    }),
    ("transport", 1500, 0.4, {
        "title": "Use Public Transportation",
        "difficulty": "easy",
        "confidence": 0.75,
        "description": "Public transport can reduce your carbon footprint significantly.",
        "action": "Try taking the bus or train for your daily commute 3 days a week.",
    }),
    ("home", 1500, 0.7, {
        "title": "Switch to Renewable Energy",
        "difficulty": "medium",
        "confidence": 0.80,
        "description": "Renewable energy sources can dramatically reduce your home emissions.",
        "action": "Contact your utility provider about green energy plans or consider solar panels.",
    }),
    ("diet", 1200, 0.3, {
        "title": "Reduce Meat Consumption",
        "difficulty": "easy",
        "confidence": 0.90,
        "description": "Reducing meat consumption is one of the most effective ways to lower your carbon footprint.",
        "action": "Try meatless Mondays or reduce meat servings by 50%.",
    }),
    ("shopping", 200, 0.5, {
        "title": "Buy Secondhand and Reduce Consumption",
        "difficulty": "easy",
        "confidence": 0.70,
        "description": "Extending product lifecycles reduces manufacturing emissions.",
        "action": "Shop at thrift stores and repair items instead of replacing them.",
    }),
]

SIMILARITY_CUTOFF = 0.7
SIMILARITY_SCALE = 1000.0
MAX_NEIGHBOURS = 5
MAX_BORROWED = 2

ACTION_PLAN = [
    "Use public transport twice a week instead of driving",
    "Switch to LED bulbs",
    "Reduce beef consumption to once a week",
]

CATEGORY_ADVICE = {
    "transport": "Consider using public transport, cycling, or walking for short trips. "
                 "For longer distances, carpooling or electric vehicles can make a big difference.",
    "home": "Switch to LED bulbs, improve insulation, and consider renewable energy sources. "
            "Small changes in daily habits can lead to significant savings.",
    "diet": "Try reducing meat consumption by 1-2 days per week. "
            "Plant-based meals are often healthier and have a much lower carbon footprint.",
    "shopping": "Buy less, choose quality items that last longer, and consider second-hand options. "
                "Repair instead of replace when possible.",
}


# ---------- 1) Profile memory for "people like you" tips ----------
class ProfileHistory:
    """
    Process-local memory of earlier breakdowns and the tips they received.
    Bounded: once `limit` profiles are stored the oldest is dropped.
    Nothing survives a restart.
    """

    def __init__(self, limit: int = PROFILE_HISTORY_LIMIT):
        self._profiles: Deque[Tuple[Dict[str, int], List[Recommendation]]] = deque(maxlen=max(limit, 0))
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._profiles)

    def clear(self) -> None:
        with self._lock:
            self._profiles.clear()

    def record(self, profile: Dict[str, int], recommendations: List[Recommendation]) -> None:
        with self._lock:
            self._profiles.append((dict(profile), list(recommendations)))

    def find_similar(self, profile: Dict[str, int]) -> List[Tuple[float, List[Recommendation]]]:
        with self._lock:
            stored = list(self._profiles)
        scored = []
        for other, recs in stored:
            score = similarity(profile, other)
            if score > SIMILARITY_CUTOFF:
                scored.append((score, recs))
        scored.sort(key=lambda s: s[0], reverse=True)
        return scored[:MAX_NEIGHBOURS]


def similarity(a: Dict[str, int], b: Dict[str, int]) -> float:
    diffs = [abs(a.get(c, 0) - b.get(c, 0)) / SIMILARITY_SCALE for c in CATEGORIES]
    return 1 - sum(diffs) / len(CATEGORIES)


PROFILE_HISTORY = ProfileHistory()


# ---------- 2) Recommendations ----------
def threshold_recommendations(breakdown: EmissionsBreakdown) -> List[Recommendation]:
    values = breakdown.categories()
    recs: List[Recommendation] = []
    for category, threshold, fraction, fields in RULES:
        value = values[category]
        if value > threshold:
            recs.append(Recommendation(
                category=category,
                impact=round_half_up(value * fraction),
                source="threshold",
                **fields,
            ))
    return recs


def generate_recommendations(
    breakdown: EmissionsBreakdown,
    history: Optional[ProfileHistory] = None,
) -> List[Recommendation]:
    """
    Threshold tips for this breakdown, plus up to two tips the nearest
    earlier profile received. Sorted by impact, biggest first.
    """
    history = PROFILE_HISTORY if history is None else history
    profile = breakdown.categories()
    recs = _by_impact(threshold_recommendations(breakdown))

    # match before recording so a profile never finds itself
    neighbours = history.find_similar(profile)
    history.record(profile, recs)

    if neighbours:
        best_score, borrowed = neighbours[0]
        seen = {r.title for r in recs}
        added = 0
        for r in borrowed:
            if added >= MAX_BORROWED:
                break
            if r.title in seen:
                continue
            recs.append(r.model_copy(update={"source": "similar_profile"}))
            seen.add(r.title)
            added += 1
        if added:
            logger.info("borrowed %d tip(s) from a profile with similarity %.2f", added, best_score)

    return _by_impact(recs)


def _by_impact(recs: List[Recommendation]) -> List[Recommendation]:
    return sorted(recs, key=lambda r: r.impact, reverse=True)


def action_plan(user_id: str) -> List[str]:
    # Same plan for everyone until plans are tracked per user
    return list(ACTION_PLAN)


# ---------- 3) Canned advice when the text service is unavailable ----------
def largest_category(breakdown: Dict[str, float]) -> str:
    best = CATEGORIES[0]
    for c in CATEGORIES[1:]:
        # ties go to the later category
        if float(breakdown.get(c, 0) or 0) >= float(breakdown.get(best, 0) or 0):
            best = c
    return best


def fallback_advice(total: float, breakdown: Dict[str, float]) -> str:
    top = largest_category(breakdown)
    return (
        f"Based on your carbon footprint of {round_half_up(total)} kg CO2/year, I recommend focusing on "
        f"{top} emissions first, as they represent your largest impact area. "
        f"{CATEGORY_ADVICE[top]} Every small step counts toward a more sustainable future!"
    )


def explain_category(category: str, value: float) -> str:
    share = round_half_up(value / WORLD_AVERAGE_KG * 100)
    return (
        f"Your {category} emissions are {round_half_up(value)} kg CO2/year, about {share}% of the "
        f"average person's entire annual footprint. {CATEGORY_ADVICE[category]}"
    )


FALLBACK_RECOMMENDATIONS = [
    ("Reduce Car Usage", "Walk, bike, or use public transport for trips under 5km",
     "500-1000", "Easy", "Also improves your health and saves money!"),
    ("Energy Efficient Appliances", "Replace old appliances with Energy Star certified ones",
     "300-600", "Medium", "Long-term savings on electricity bills"),
    ("Reduce Meat Consumption", "Try \"Meatless Monday\" or plant-based meals 2-3 times per week",
     "200-400", "Easy", "Discover new cuisines and improve health"),
    ("Smart Home Heating", "Lower thermostat by 2°C and improve insulation",
     "400-800", "Easy to Medium", "Immediate comfort and cost savings"),
    ("Mindful Shopping", "Buy only what you need, choose quality over quantity",
     "100-300", "Easy", "Save money and reduce clutter"),
]


def fallback_recommendations(total: float) -> str:
    lines = [f"Here are 5 personalized recommendations based on your {round_half_up(total)} kg CO2/year footprint:", ""]
    for i, (title, action, savings, difficulty, bonus) in enumerate(FALLBACK_RECOMMENDATIONS, 1):
        lines += [
            f"{i}. **{title}** - {action}",
            f"   • Potential savings: {savings} kg CO2/year",
            f"   • Difficulty: {difficulty}",
            f"   • {bonus}",
            "",
        ]
    lines.append("Start with the easy wins and gradually implement more changes. Every action makes a difference!")
    return "\n".join(lines)
