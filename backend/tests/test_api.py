import json

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

from cooklingo.db import get_db
from cooklingo.deps import get_quiz_client, get_recipe_client
from cooklingo.main import app
from cooklingo.routers import quiz as quiz_router
from cooklingo.vocabulary_store import VocabularyStore

from conftest import QUIZ_FIVE, RecordingHandler, make_client, workflow_envelope


RECIPE = {
    "dish": "Omelette Rice",
    "cookingTime": "20 minutes",
    "difficulty": "Easy",
    "ingredients": ["1 egg", "100g rice"],
    "steps": ["Beat the egg.", "Fry the rice."],
    "vocabulary": [
        {"word": "beat", "translation": "溶く", "partOfSpeech": "verb"},
        {"word": "fry", "translation": "炒める", "partOfSpeech": "verb"},
    ],
    "tips": ["Use medium heat."],
}


@pytest.fixture
def workflow():
    return {"quiz": RecordingHandler(body=workflow_envelope("quiz", QUIZ_FIVE)),
            "recipe": RecordingHandler(body=workflow_envelope("json", json.dumps(RECIPE)))}


@pytest.fixture
def api(session_factory, workflow):
    def override_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    async def quiz_client():
        client = make_client(workflow["quiz"])
        try:
            yield client
        finally:
            await client.aclose()

    async def recipe_client():
        client = make_client(workflow["recipe"])
        try:
            yield client
        finally:
            await client.aclose()

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_quiz_client] = quiz_client
    app.dependency_overrides[get_recipe_client] = recipe_client
    yield TestClient(app)
    app.dependency_overrides.clear()
    quiz_router._sessions.clear()


def test_health(api):
    assert api.get("/health").json()["status"] == "ok"


def test_chat_config(api):
    assert "chatbot_url" in api.get("/chat/config").json()


def test_generate_recipe_saves_words(api, workflow):
    res = api.post("/recipe/generate", json={"dish": "omurice"})
    assert res.status_code == 200
    data = res.json()
    assert data["recipe"]["dish"] == "Omelette Rice"
    assert data["recipe"]["cookingTime"] == "20 minutes"
    assert data["saved"] is True
    assert data["words_added"] == 2
    assert json.loads(workflow["recipe"].requests[0].content)["inputs"] == {"recipe_name": "omurice"}

    words = api.get("/words").json()
    assert {w["word"] for w in words} == {"beat", "fry"}
    history = api.get("/recipe/history").json()
    assert history[0]["recipe"]["dish"] == "Omelette Rice"


def test_generate_recipe_blank_dish(api, workflow):
    res = api.post("/recipe/generate", json={"dish": "   "})
    assert res.status_code == 400
    assert res.json()["level"] == "warning"
    assert workflow["recipe"].requests == []


def _fail(*args, **kwargs):
    raise SQLAlchemyError("database is locked")


def test_recipe_returned_when_save_fails(api, monkeypatch):
    monkeypatch.setattr(VocabularyStore, "save_recipe", _fail)
    res = api.post("/recipe/generate", json={"dish": "omurice"})
    assert res.status_code == 200
    data = res.json()
    assert data["recipe"]["dish"] == "Omelette Rice"
    assert data["saved"] is False
    assert data["words_added"] == 0
    assert api.get("/words").json() == []


def test_word_upsert_failure_is_not_surfaced(api, monkeypatch):
    monkeypatch.setattr(VocabularyStore, "upsert_words", _fail)
    res = api.post("/recipe/generate", json={"dish": "omurice"})
    assert res.status_code == 200
    data = res.json()
    assert data["saved"] is True
    assert data["words_added"] == 0
    assert api.get("/recipe/history").json()[0]["recipe"]["dish"] == "Omelette Rice"


def test_recipe_upstream_failure(api, workflow):
    workflow["recipe"].status = 500
    res = api.post("/recipe/generate", json={"dish": "curry"})
    assert res.status_code == 502
    assert res.json()["error"] == "RequestFailed"


@pytest.fixture
def seeded(api, session_factory):
    db = session_factory()
    store = VocabularyStore(db)
    store.upsert_words((f"word{i}", f"trans{i}") for i in range(7))
    for record in store.read_all():
        store.rate_word(record.id, recognition=5, frequency=5, simplicity=5)
    db.close()
    return api


def test_quiz_flow(seeded, workflow):
    api = seeded
    session = api.post("/quiz/sessions").json()
    assert session["state"] == "idle"
    sid = session["session_id"]

    res = api.post(f"/quiz/sessions/{sid}/generate", json={"tier": "basic"})
    assert res.status_code == 200
    snap = res.json()
    assert snap["state"] == "ready"
    assert len(snap["questions"]) == 5
    assert len(workflow["quiz"].requests) == 1

    # Answer the first four with the text we know is right
    for i, q in enumerate(snap["questions"][:4]):
        api.post(f"/quiz/sessions/{sid}/answers", json={"question_index": i, "choice_index": q["choices"].index(f"right{i}")})
    res = api.post(f"/quiz/sessions/{sid}/submit")
    assert res.status_code == 400
    assert res.json()["error"] == "IncompleteAnswers"
    assert api.get(f"/quiz/sessions/{sid}").json()["state"] == "ready"

    last = snap["questions"][4]
    api.post(f"/quiz/sessions/{sid}/answers", json={"question_index": 4, "choice_index": last["choices"].index("right4")})
    res = api.post(f"/quiz/sessions/{sid}/submit")
    assert res.status_code == 200
    result = res.json()
    assert result["state"] == "submitted"
    assert result["score"] == 5
    assert result["total"] == 5


def test_quiz_insufficient_advanced_words(seeded, workflow):
    api = seeded
    sid = api.post("/quiz/sessions").json()["session_id"]
    res = api.post(f"/quiz/sessions/{sid}/generate", json={"tier": "advanced"})
    assert res.status_code == 409
    assert res.json()["error"] == "InsufficientData"
    assert res.json()["level"] == "warning"
    assert workflow["quiz"].requests == []
    assert api.get(f"/quiz/sessions/{sid}").json()["state"] == "idle"


def test_quiz_upstream_500(seeded, workflow):
    api = seeded
    workflow["quiz"].status = 500
    sid = api.post("/quiz/sessions").json()["session_id"]
    res = api.post(f"/quiz/sessions/{sid}/generate", json={"tier": "basic"})
    assert res.status_code == 502
    assert res.json()["error"] == "RequestFailed"
    snap = api.get(f"/quiz/sessions/{sid}").json()
    assert snap["state"] == "idle"
    assert snap["questions"] == []


def test_rate_word_endpoint(seeded):
    api = seeded
    word = api.get("/words").json()[0]
    res = api.put(f"/words/{word['id']}/scores", json={"recognition": 1, "frequency": 2, "simplicity": 3})
    assert res.status_code == 200
    assert res.json()["tier"] == "advanced"
    res = api.put("/words/999/scores", json={"recognition": 1, "frequency": 1, "simplicity": 1})
    assert res.status_code == 404
    assert res.json()["error"] == "WordNotFound"


def test_unknown_session(api):
    res = api.get("/quiz/sessions/nope")
    assert res.status_code == 404
    assert res.json()["error"] == "SessionNotFound"
