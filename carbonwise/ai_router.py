# carbonwise/ai_router.py
from __future__ import annotations
import math
import os
from typing import Any, Dict, Optional

from openai import OpenAI

from .config import MODEL, require_env, openai_key
from .factors import WORLD_AVERAGE_KG
from .suggestions import CATEGORIES

SYSTEM_PROMPT = (
    "You are an expert environmental advisor specializing in carbon footprint reduction. "
    "Give specific, actionable advice, highest-impact areas first, in clear jargon-free language. "
    "Be encouraging and keep answers under 200 words."
)

def enabled() -> bool:
    return bool(openai_key())

def _client():
    require_env(["OPENAI_API_KEY"])
    return OpenAI(api_key=os.getenv("OPENAI_API_KEY"))

# ---------- 1) Footprint context from whatever the client sent ----------
def extract_footprint(context: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Accepts either {'total': n, 'breakdown': {...}} or a /api/calculate
    response ({'emissions': {...}}). Returns {'total', 'breakdown'} or None.
    """
    if not isinstance(context, dict):
        return None
    if isinstance(context.get("emissions"), dict):
        src = context["emissions"]
        breakdown, total = src, src.get("total")
    elif isinstance(context.get("breakdown"), dict):
        breakdown, total = context["breakdown"], context.get("total")
    else:
        return None

    try:
        parts = {c: float(breakdown.get(c) or 0) for c in CATEGORIES}
        total = float(total) if total is not None else sum(parts.values())
    except (TypeError, ValueError):
        return None
    if not all(math.isfinite(v) for v in [total, *parts.values()]):
        return None
    if total <= 0:
        return None
    return {"total": total, "breakdown": parts}

def build_carbon_context(footprint: Dict[str, Any]) -> str:
    total = footprint["total"]
    b = footprint["breakdown"]
    pct = {c: round(b[c] / total * 100) for c in CATEGORIES}
    relative = "Above" if total > WORLD_AVERAGE_KG else "Below"
    return (
        "Carbon Footprint Analysis:\n"
        f"- Total Annual Emissions: {total:.0f} kg CO2\n"
        f"- Transport: {b['transport']:.0f} kg CO2 ({pct['transport']}%)\n"
        f"- Home Energy: {b['home']:.0f} kg CO2 ({pct['home']}%)\n"
        f"- Diet: {b['diet']:.0f} kg CO2 ({pct['diet']}%)\n"
        f"- Shopping: {b['shopping']:.0f} kg CO2 ({pct['shopping']}%)\n\n"
        f"Global Context: Average person emits ~{WORLD_AVERAGE_KG:,} kg CO2/year\n"
        f"User's impact: {relative} average ({round(total / WORLD_AVERAGE_KG * 100)}% of global average)"
    )

# ---------- 2) Pass-through to the text service ----------
def _complete(prompt: str, max_tokens: int = 400) -> str:
    """Raises on transport/API errors or an empty answer; callers fall back."""
    client = _client()
    rsp = client.chat.completions.create(
        model=MODEL,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        temperature=0.5,
        max_tokens=max_tokens,
    )
    text = (rsp.choices[0].message.content or "").strip()
    if not text:
        raise RuntimeError("empty completion")
    return text

def ask_llm(message: str, footprint: Optional[Dict[str, Any]] = None) -> str:
    """Send one user question (with footprint context when known) to the model."""
    prompt = message
    if footprint:
        prompt = f"{build_carbon_context(footprint)}\n\nUser question: {message}"
    return _complete(prompt)

def explain_llm(category: str, value: float, footprint: Optional[Dict[str, Any]] = None) -> str:
    context = build_carbon_context(footprint) + "\n\n" if footprint else ""
    prompt = (
        f"{context}The user wants to understand their {category} emissions of {value:.0f} kg CO2/year. "
        "Please explain:\n"
        "1. What this means in practical terms (compare to everyday objects/activities)\n"
        "2. How this compares to average levels\n"
        "3. What specific activities contribute to this\n"
        "4. 3 concrete steps to reduce it\n"
        "5. The environmental impact of these emissions\n\n"
        "Make it educational but not overwhelming. Use relatable examples and a positive, encouraging tone."
    )
    return _complete(prompt, max_tokens=600)

def recommendations_llm(footprint: Dict[str, Any]) -> str:
    prompt = (
        f"{build_carbon_context(footprint)}\n\n"
        "Based on this carbon footprint analysis, provide 5 specific, actionable recommendations to reduce "
        "emissions. For each recommendation:\n"
        "1. Specify the exact action to take\n"
        "2. Estimate the potential CO2 reduction in kg/year\n"
        "3. Rate the difficulty (Easy/Medium/Hard)\n"
        "4. Explain why this will help\n\n"
        "Format your response as a clear, numbered list. Focus on the highest impact areas first."
    )
    return _complete(prompt, max_tokens=800)
