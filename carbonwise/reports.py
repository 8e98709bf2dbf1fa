# carbonwise/reports.py — CSV / PDF footprint reports
from __future__ import annotations
import csv
import html
import io
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from .calculator import calculate_emissions
from .db import SessionStore
from .schemas import LifestyleInput

logger = logging.getLogger(__name__)

FIELDS = ["name", "totalEmissions", "transport", "home", "diet", "shopping"]
FORMATS = ("csv", "pdf")

SAMPLE_REPORT = {
    "name": "Sample User",
    "totalEmissions": 4200,
    "transport": 1200,
    "home": 1500,
    "diet": 1000,
    "shopping": 500,
}

_SECTIONS = ("transport", "home", "diet", "shopping")


def _row(name: str, emissions: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": name,
        "totalEmissions": int(emissions["total"]),
        "transport": int(emissions["transport"]),
        "home": int(emissions["home"]),
        "diet": int(emissions["diet"]),
        "shopping": int(emissions["shopping"]),
    }


def _emissions_from_data(data: Any) -> Optional[Dict[str, Any]]:
    """
    A saved session may hold a calculate response ({'emissions': ...}),
    {'input': LifestyleInput} or the LifestyleInput itself.
    """
    if not isinstance(data, dict):
        return None

    saved = data.get("emissions")
    if isinstance(saved, dict) and all(k in saved for k in ("total",) + _SECTIONS):
        try:
            return {k: float(saved[k]) for k in ("total",) + _SECTIONS}
        except (TypeError, ValueError):
            return None

    raw = data.get("input") if isinstance(data.get("input"), dict) else data
    if not any(k in raw for k in _SECTIONS):
        return None
    try:
        return calculate_emissions(LifestyleInput.model_validate(raw)).model_dump()
    except ValidationError as e:
        logger.warning("session data is not a usable lifestyle input: %s", e.error_count())
        return None


def build_report(user_id: str, store: SessionStore) -> Dict[str, Any]:
    """Report row from the user's newest session, or the sample row."""
    session = store.latest_for(user_id)
    if session is not None:
        emissions = _emissions_from_data(session.data)
        if emissions is not None:
            name = session.data.get("name") if isinstance(session.data.get("name"), str) else user_id
            return _row(name, emissions)
    return dict(SAMPLE_REPORT)


def render_csv(row: Dict[str, Any]) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=FIELDS, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writeheader()
    writer.writerow({k: row.get(k) for k in FIELDS})
    return buf.getvalue()


def render_pdf(row: Dict[str, Any]) -> bytes:
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=letter, title="Personal Carbon Footprint Report")
    styles = getSampleStyleSheet()
    normal = styles["Normal"]

    elements = [
        Paragraph("Personal Carbon Footprint Report", styles["Title"]),
        Spacer(1, 12),
        Paragraph(f"Name: {html.escape(str(row['name']))}", normal),
        Paragraph(f"Total Emissions: {row['totalEmissions']} kg CO2/year", normal),
    ]
    for key, label in (("transport", "Transport"), ("home", "Home"), ("diet", "Diet"), ("shopping", "Shopping")):
        elements.append(Paragraph(f"{label}: {row[key]} kg CO2/year", normal))

    doc.build(elements)
    return buf.getvalue()
