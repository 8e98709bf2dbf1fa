# carbonwise/chat.py — keyword answers, optional model pass-through, short history
from __future__ import annotations
import logging
import re
import threading
from collections import deque
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional, Tuple

from . import ai_router
from .config import CHAT_HISTORY_LIMIT
from .suggestions import explain_category, fallback_advice, fallback_recommendations

logger = logging.getLogger(__name__)

# Checked in order; first key contained in the message wins
RESPONSES = {
    "what is carbon footprint": (
        "A carbon footprint is the total greenhouse gas emissions caused by an individual, "
        "organization, event, or product. It's measured in carbon dioxide equivalent (CO2e) and "
        "includes emissions from transportation, energy use, diet, and consumption."
    ),
    "how to reduce carbon footprint": (
        "You can reduce your carbon footprint by: 1) Using public transport or electric vehicles, "
        "2) Switching to renewable energy, 3) Reducing meat consumption, 4) Buying secondhand items, "
        "5) Using energy-efficient appliances."
    ),
    "what are emission factors": (
        "Emission factors are coefficients that quantify the emissions or removals of a gas per unit "
        "activity. For example, driving 1 km in a gasoline car produces about 0.12 kg of CO2."
    ),
    "help": (
        "I can help you understand your carbon footprint! Ask me about: what is carbon footprint, "
        "how to reduce it, emission factors, or any specific questions about your results."
    ),
}
DEFAULT_REPLY = (
    "I'm here to help you understand your carbon footprint and find ways to reduce it. "
    "What would you like to know?"
)

_PUNCT = re.compile(r"[^\w\s]")
_SPACES = re.compile(r"\s+")


def _normalize(text: str) -> str:
    return _SPACES.sub(" ", _PUNCT.sub(" ", (text or "").lower())).strip()


def canned_reply(message: str) -> Optional[str]:
    """Keyword lookup; None when nothing matches."""
    msg = _normalize(message)
    for key, value in RESPONSES.items():
        if key in msg:
            return value
    return None


class ChatHistory:
    def __init__(self, limit: int = CHAT_HISTORY_LIMIT):
        self._items: Deque[Dict[str, str]] = deque(maxlen=limit)
        self._lock = threading.Lock()

    def add(self, role: str, content: str) -> None:
        with self._lock:
            self._items.append({
                "role": role,
                "content": content,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            })

    def items(self) -> List[Dict[str, str]]:
        with self._lock:
            return list(self._items)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


HISTORY = ChatHistory()


def reply(message: str, context: Optional[Dict[str, Any]] = None) -> Tuple[str, str]:
    """
    Answer one chat message. Returns (text, source) where source is 'ai'
    when the text service answered and 'canned' otherwise.
    """
    footprint = ai_router.extract_footprint(context)
    text, source = None, "canned"

    if ai_router.enabled():
        try:
            text = ai_router.ask_llm(message, footprint)
            source = "ai"
        except Exception as e:
            logger.warning("text service failed, using canned reply: %s", e)

    if text is None:
        text = canned_reply(message)
    if text is None and footprint:
        text = fallback_advice(footprint["total"], footprint["breakdown"])
    if text is None:
        text = DEFAULT_REPLY

    HISTORY.add("user", message)
    HISTORY.add("assistant", text)
    return text, source


def explain(category: str, value: float, context: Optional[Dict[str, Any]] = None) -> Tuple[str, str]:
    """Model explanation of one category's emissions; canned text otherwise."""
    if ai_router.enabled():
        try:
            return ai_router.explain_llm(category, value, ai_router.extract_footprint(context)), "ai"
        except Exception as e:
            logger.warning("text service failed, using canned explanation: %s", e)
    return explain_category(category, value), "canned"


def personalized_recommendations(footprint: Dict[str, Any]) -> Tuple[str, str]:
    """Five model-written tips for a footprint; the fixed five otherwise."""
    if ai_router.enabled():
        try:
            return ai_router.recommendations_llm(footprint), "ai"
        except Exception as e:
            logger.warning("text service failed, using canned recommendations: %s", e)
    return fallback_recommendations(footprint["total"]), "canned"
