import pytest

from carbonwise import ai_router, chat


@pytest.mark.parametrize("message,fragment", [
    ("What is carbon footprint?", "total greenhouse gas emissions"),
    ("how to reduce carbon footprint!!", "public transport or electric vehicles"),
    ("WHAT ARE EMISSION FACTORS", "0.12 kg of CO2"),
    ("help", "I can help you understand"),
])
def test_canned_reply_keywords(message, fragment):
    assert fragment in chat.canned_reply(message)


def test_canned_reply_no_match():
    assert chat.canned_reply("tell me a joke") is None


def test_reply_without_service_uses_default():
    text, source = chat.reply("tell me a joke")
    assert source == "canned"
    assert text == chat.DEFAULT_REPLY


def test_reply_with_context_gives_fallback_advice():
    context = {"total": 9000, "breakdown": {"transport": 6000, "home": 1000, "diet": 1500, "shopping": 500}}
    text, source = chat.reply("what should I change first", context)
    assert source == "canned"
    assert "focusing on transport emissions" in text


def test_reply_uses_text_service_when_configured(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    seen = {}

    def fake_ask(message, footprint=None):
        seen["message"] = message
        seen["footprint"] = footprint
        return "Cycle more."

    monkeypatch.setattr(ai_router, "ask_llm", fake_ask)
    context = {"emissions": {"transport": 100, "home": 200, "diet": 300, "shopping": 400, "total": 1000}}
    text, source = chat.reply("help", context)
    assert (text, source) == ("Cycle more.", "ai")
    assert seen["footprint"]["total"] == 1000
    assert seen["footprint"]["breakdown"]["shopping"] == 400


def test_reply_falls_back_when_service_fails(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")

    def boom(message, footprint=None):
        raise RuntimeError("rate limited")

    monkeypatch.setattr(ai_router, "ask_llm", boom)
    text, source = chat.reply("What is carbon footprint?")
    assert source == "canned"
    assert "greenhouse gas" in text


def test_history_keeps_last_ten():
    for i in range(8):
        chat.reply(f"question {i}")
    items = chat.HISTORY.items()
    assert len(items) == 10
    assert items[-1]["role"] == "assistant"
    assert items[0]["content"] == "question 3"


@pytest.mark.parametrize("context", [
    None,
    "not a dict",
    {},
    {"breakdown": {"transport": "lots"}},
    {"total": 0, "breakdown": {"transport": 0}},
    {"total": "nan", "breakdown": {"transport": 1}},
    {"total": "inf", "breakdown": {"transport": 1}},
    {"breakdown": {"transport": "inf", "home": 5}},
    {"emissions": {"transport": 1, "home": "nan", "total": 10}},
])
def test_extract_footprint_rejects_unusable_context(context):
    assert ai_router.extract_footprint(context) is None


def test_extract_footprint_fills_missing_total():
    fp = ai_router.extract_footprint({"breakdown": {"transport": 100, "diet": 50}})
    assert fp == {"total": 150.0, "breakdown": {"transport": 100.0, "home": 0.0, "diet": 50.0, "shopping": 0.0}}


def test_build_carbon_context():
    fp = {"total": 9600.0, "breakdown": {"transport": 4800.0, "home": 2400.0, "diet": 1200.0, "shopping": 1200.0}}
    text = ai_router.build_carbon_context(fp)
    assert "Total Annual Emissions: 9600 kg CO2" in text
    assert "Transport: 4800 kg CO2 (50%)" in text
    assert "Above average (200% of global average)" in text


def test_explain_without_service_is_canned():
    text, source = chat.explain("diet", 1642)
    assert source == "canned"
    assert "1642 kg CO2/year" in text


def test_explain_passes_footprint_to_service(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    seen = {}

    def fake_explain(category, value, footprint=None):
        seen["footprint"] = footprint
        return "It is a lot."

    monkeypatch.setattr(ai_router, "explain_llm", fake_explain)
    context = {"total": 100, "breakdown": {"transport": 100}}
    assert chat.explain("transport", 100, context) == ("It is a lot.", "ai")
    assert seen["footprint"]["total"] == 100


def test_explain_falls_back_when_service_fails(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")

    def boom(category, value, footprint=None):
        raise RuntimeError("timeout")

    monkeypatch.setattr(ai_router, "explain_llm", boom)
    text, source = chat.explain("home", 2400)
    assert source == "canned"
    assert "2400 kg CO2/year" in text


def test_personalized_recommendations_fall_back(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")

    def boom(footprint):
        raise RuntimeError("quota")

    monkeypatch.setattr(ai_router, "recommendations_llm", boom)
    text, source = chat.personalized_recommendations({"total": 4200.0, "breakdown": {}})
    assert source == "canned"
    assert text.startswith("Here are 5 personalized recommendations based on your 4200 kg CO2/year footprint:")
