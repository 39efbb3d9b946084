import time

import pytest
from conftest import HEURISTIC_TYPES, SAMPLE_NOTES
from fastapi.testclient import TestClient

from studybuddy import app
from studybuddy.db.sqlite import PersistenceError
from studybuddy.services.flashcard_generator import GenerationResult
from studybuddy.services.task_registry import is_running


@pytest.fixture
def client(data_dir):
    with TestClient(app) as c:
        yield c


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_generate_returns_camel_case_cards(client):
    res = client.post(
        "/flashcards/generate",
        json={"notes": SAMPLE_NOTES, "userId": "u1", "sessionId": "s-http"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["totalGenerated"] == len(body["flashcards"]) == 5
    assert body["sessionId"] == "s-http"

    card = body["flashcards"][0]
    assert set(card) == {"id", "question", "answer", "difficulty", "type", "userId", "noteId", "createdAt"}
    assert card["userId"] == "u1"
    assert {c["type"] for c in body["flashcards"]} <= HEURISTIC_TYPES

    progress = client.get("/flashcards/progress/s-http").json()["progress"]
    assert progress == {"current": 5, "total": 5, "status": "completed"}


@pytest.mark.parametrize("notes", ["", None, 12])
def test_generate_rejects_bad_notes(client, notes):
    res = client.post("/flashcards/generate", json={"notes": notes, "userId": "u1"})
    assert res.status_code == 400
    assert res.json() == {"detail": "Notes are required and must be a string"}
    assert client.get("/flashcards/users/u1").json() == {"flashcards": []}


def test_generate_hides_internal_errors(client, monkeypatch):
    async def broken(*args, **kwargs):
        raise PersistenceError("disk full at /var/lib/secret")

    monkeypatch.setattr("studybuddy.routers.flashcards.generate_flashcards", broken)
    res = client.post("/flashcards/generate", json={"notes": SAMPLE_NOTES, "userId": "u1"})
    assert res.status_code == 500
    assert res.json() == {"detail": "Failed to generate flashcards"}



def test_generate_rejects_a_busy_session(client, monkeypatch):
    monkeypatch.setattr("studybuddy.routers.flashcards.is_running", lambda s: s == "s-busy")
    res = client.post(
        "/flashcards/generate",
        json={"notes": SAMPLE_NOTES, "userId": "u6", "sessionId": "s-busy"},
    )
    assert res.status_code == 409

    progress = client.get("/flashcards/progress/s-busy").json()["progress"]
    assert progress["status"] == "not_started"
    assert client.get("/flashcards/users/u6").json() == {"flashcards": []}


def test_generate_holds_its_session_while_running(client, monkeypatch):
    seen = []

    async def record(db, notes, user_id, session_id=None):
        seen.append(is_running(session_id))
        return GenerationResult(flashcards=[], total_generated=0, session_id=session_id)

    monkeypatch.setattr("studybuddy.routers.flashcards.generate_flashcards", record)
    res = client.post(
        "/flashcards/generate",
        json={"notes": SAMPLE_NOTES, "userId": "u7", "sessionId": "s-sync"},
    )
    assert res.status_code == 200
    assert seen == [True]

def test_unknown_progress_is_not_started(client):
    res = client.get("/flashcards/progress/nobody")
    assert res.json() == {"progress": {"current": 0, "total": 0, "status": "not_started"}}


def test_history_lists_cards_and_notes(client):
    client.post("/flashcards/generate", json={"notes": SAMPLE_NOTES, "userId": "u2"})
    client.post("/flashcards/generate", json={"notes": SAMPLE_NOTES, "userId": "u3"})

    cards = client.get("/flashcards/users/u2").json()["flashcards"]
    notes = client.get("/flashcards/users/u2/notes").json()["notes"]
    assert len(cards) == 5
    assert {c["userId"] for c in cards} == {"u2"}
    assert len(notes) == 1
    assert notes[0]["content"] == SAMPLE_NOTES
    assert {c["noteId"] for c in cards} == {notes[0]["id"]}



def test_history_for_a_user_named_progress(client):
    client.post("/flashcards/generate", json={"notes": SAMPLE_NOTES, "userId": "progress"})

    assert len(client.get("/flashcards/users/progress").json()["flashcards"]) == 5
    notes = client.get("/flashcards/users/progress/notes").json()["notes"]
    assert [n["content"] for n in notes] == [SAMPLE_NOTES]

def test_background_job_reports_progress(client):
    res = client.post(
        "/flashcards/jobs", json={"notes": SAMPLE_NOTES, "userId": "u4", "sessionId": "s-job"}
    )
    assert res.status_code == 202
    assert res.json() == {"sessionId": "s-job"}

    progress = None
    for _ in range(100):
        progress = client.get("/flashcards/progress/s-job").json()["progress"]
        if progress["status"] == "completed":
            break
        time.sleep(0.05)

    assert progress["status"] == "completed"
    assert progress["current"] == 5

    cards = []
    for _ in range(100):
        cards = client.get("/flashcards/users/u4").json()["flashcards"]
        if cards:
            break
        time.sleep(0.05)
    assert len(cards) == 5


def test_background_job_rejects_bad_notes(client):
    res = client.post("/flashcards/jobs", json={"notes": "", "userId": "u5"})
    assert res.status_code == 400
