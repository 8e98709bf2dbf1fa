import pytest
from fastapi.testclient import TestClient

from carbonwise import chat
from carbonwise.db import SESSIONS
from carbonwise.schemas import LifestyleInput
from carbonwise.suggestions import PROFILE_HISTORY


EXAMPLE_INPUT = {
    "transport": {"carKm": 100, "flightHours": 10, "publicTransport": 5},
    "home": {"electricity": 500, "gas": 50, "heating": "gas"},
    "diet": {"type": "mixed", "meatServings": 7},
    "shopping": {"clothing": 500, "electronics": 200},
}


@pytest.fixture(autouse=True)
def clean_state(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    SESSIONS.clear()
    PROFILE_HISTORY.clear()
    chat.HISTORY.clear()
    yield
    SESSIONS.clear()
    PROFILE_HISTORY.clear()
    chat.HISTORY.clear()


@pytest.fixture
def example_payload():
    return {k: dict(v) for k, v in EXAMPLE_INPUT.items()}


@pytest.fixture
def example_input(example_payload):
    return LifestyleInput.model_validate(example_payload)


@pytest.fixture
def client():
    from carbonwise.main import app
    return TestClient(app)
