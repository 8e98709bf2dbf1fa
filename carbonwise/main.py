# carbonwise/main.py
from .config import CORS_ORIGINS, FRONTEND_DIR, LOG_LEVEL  # loads .env first

import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles

from . import __version__, ai_router, chat
from .calculator import (
    calculate_emissions,
    compare_to_world_average,
    detect_anomalies,
    format_emissions,
    impact_level,
)
from .db import SESSIONS
from .factors import WORLD_AVERAGE_KG, factors_summary
from .forecast import predict_future_footprint
from .reports import FORMATS, build_report, render_csv, render_pdf
from .schemas import (
    CalculationResult,
    ChatRequest,
    ExplainRequest,
    FootprintAdviceRequest,
    LifestyleInput,
    SaveSessionRequest,
)
from .suggestions import action_plan, generate_recommendations

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


# ---- FastAPI app ------------------------------------------------------------
app = FastAPI(
    title="Carbon Wise API",
    description="Personal carbon footprint estimates, tips, forecasts and chat.",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


def failure(message: str, status_code: int = 500, **extra: Any) -> JSONResponse:
    body: Dict[str, Any] = {"success": False, "message": message}
    body.update(extra)
    return JSONResponse(jsonable_encoder(body), status_code=status_code)


@app.exception_handler(RequestValidationError)
async def invalid_input(request: Request, exc: RequestValidationError):
    # raw inputs may be NaN/inf, which JSON cannot carry
    errors = [{"loc": e["loc"], "msg": e["msg"], "type": e["type"]} for e in exc.errors()]
    return failure("Invalid input", status_code=422, errors=errors)


@app.get("/health")
def health():
    return {"ok": True}


@app.get("/api/factors")
def factors():
    return factors_summary()


# ---- Footprint --------------------------------------------------------------
@app.post("/api/calculate")
def calculate(data: LifestyleInput):
    try:
        anomalies = detect_anomalies(data)
        if anomalies:
            logger.info("rejecting input with %d anomalies", len(anomalies))
            return failure(
                "Please review your inputs for potential errors.",
                status_code=400,
                anomalies=anomalies,
            )

        emissions = calculate_emissions(data)
        recommendations = generate_recommendations(emissions)
        predictions = predict_future_footprint(emissions.total)
        logger.info("calculated total=%s kg with %d recommendations", emissions.total, len(recommendations))

        result = CalculationResult(
            emissions=emissions,
            recommendations=recommendations,
            predictions=predictions,
            worldAverage=WORLD_AVERAGE_KG,
            comparison=compare_to_world_average(emissions.total),
            impactLevel=impact_level(emissions.total),
            formatted=format_emissions(emissions.total),
        )
        return result.model_dump()
    except Exception as e:
        logger.exception("calculate failed")
        return failure("Error calculating carbon footprint", error=str(e))


# ---- Chat -------------------------------------------------------------------
@app.post("/api/chat")
def chat_message(req: ChatRequest):
    try:
        text, source = chat.reply(req.message, req.context)
        logger.info("chat reply source=%s", source)
        return {
            "success": True,
            "response": text,
            "source": source,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    except Exception as e:
        logger.exception("chat failed")
        return failure("Error processing chat message", error=str(e))


@app.get("/api/chat/history")
def chat_history():
    return {"success": True, "messages": chat.HISTORY.items()}


@app.post("/api/explain")
def explain(req: ExplainRequest):
    try:
        text, source = chat.explain(req.category, req.value, req.context)
        return {"success": True, "explanation": text, "source": source}
    except Exception as e:
        logger.exception("explain failed")
        return failure("Error explaining emissions", error=str(e))


@app.post("/api/recommendations")
def personalized_recommendations(req: FootprintAdviceRequest):
    footprint = ai_router.extract_footprint(req.context)
    if footprint is None:
        return failure("A footprint with a positive total and a category breakdown is required", status_code=400)
    try:
        text, source = chat.personalized_recommendations(footprint)
        return {"success": True, "recommendations": text, "source": source}
    except Exception as e:
        logger.exception("recommendations failed")
        return failure("Error generating recommendations", error=str(e))


# ---- Sessions ---------------------------------------------------------------
@app.post("/api/save-session")
def save_session(req: SaveSessionRequest):
    try:
        session_id = SESSIONS.save(req.user_key(), req.data)
        return {"success": True, "sessionId": session_id}
    except Exception as e:
        logger.exception("save-session failed")
        return failure("Error saving session", error=str(e))


@app.get("/api/session/{session_id}")
def get_session(session_id: str):
    try:
        session = SESSIONS.get(session_id)
        if session is None:
            return failure("Session not found", status_code=404)
        return {"success": True, "session": session.model_dump()}
    except Exception as e:
        logger.exception("session lookup failed")
        return failure("Error retrieving session", error=str(e))


# ---- Action plan + reports --------------------------------------------------
@app.get("/api/actionplan/{user_id}")
def get_action_plan(user_id: str):
    return {"actions": action_plan(user_id)}


@app.get("/api/report/{user_id}")
def get_report(user_id: str, format: str = Query("pdf")):
    fmt = (format or "pdf").lower()
    if fmt not in FORMATS:
        return failure(f"Unsupported report format {format!r}; use csv or pdf", status_code=400)
    try:
        row = build_report(user_id, SESSIONS)
        if fmt == "csv":
            content, media_type = render_csv(row), "text/csv"
        else:
            content, media_type = render_pdf(row), "application/pdf"
        return Response(
            content=content,
            media_type=media_type,
            headers={"Content-Disposition": f'attachment; filename="carbon_report.{fmt}"'},
        )
    except Exception as e:
        logger.exception("report failed")
        return failure("Error generating report", error=str(e))


# Serve the built frontend, if there is one; must come after the API routes
if os.path.isdir(FRONTEND_DIR):
    app.mount("/", StaticFiles(directory=FRONTEND_DIR, html=True), name="frontend")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("carbonwise.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
