import pytest

from joyverse.engine.word_bank import TYPING_WORDS
from joyverse.models.attempt import Tier

THERAPIST = "482913"


@pytest.fixture
def session_id(client):
    response = client.post(
        "/api/children",
        json={"therapist_code": THERAPIST, "username": "mia", "assigned_themes": ["underwater"]},
    )
    assert response.status_code == 201

    response = client.post("/api/sessions", json={"therapist_code": THERAPIST, "username": "mia"})
    assert response.status_code == 201
    return response.json()["session_id"]


def session_url(session_id, suffix=""):
    return f"/api/sessions/{THERAPIST}/mia/{session_id}{suffix}"


def ref(session_id):
    return {"therapist_code": THERAPIST, "username": "mia", "session_id": session_id}


def test_health(client):
    body = client.get("/api/health").json()

    assert body["status"] == "healthy"
    assert body["dependencies"]["store"] == "memory"
    assert client.get("/api/health/ready").json()["ready"] is True


def test_child_login_opens_a_session(client, session_id):
    response = client.get(session_url(session_id))

    assert response.status_code == 200
    assert response.json()["assigned_themes"] == ["underwater"]
    assert client.get(f"/api/children/{THERAPIST}").json() == {"children": ["mia"]}


def test_duplicate_child_is_a_conflict(client, session_id):
    response = client.post("/api/children", json={"therapist_code": THERAPIST, "username": "mia"})
    assert response.status_code == 409


def test_unknown_child_and_session_are_not_found(client, session_id):
    assert client.post("/api/sessions", json={"therapist_code": THERAPIST, "username": "ghost"}).status_code == 404
    assert client.get(session_url("nope")).status_code == 404
    assert client.post(session_url("nope", "/themes"), json={"theme": "space"}).status_code == 404
    assert client.get(f"/api/children/{THERAPIST}/ghost/sessions").status_code == 404


def test_word_bank_listing(client):
    body = client.get("/api/typing/words").json()
    assert body["easy"] == list(TYPING_WORDS[Tier.EASY])
    assert set(body) == {"easy", "medium", "hard"}


def test_initial_word(client, session_id):
    body = client.post("/api/typing/initial-word", json=ref(session_id)).json()

    assert body["difficulty"] == "medium"
    assert body["word"] in TYPING_WORDS[Tier.MEDIUM]
    assert body["is_initial"] is True


def test_next_word_uses_the_override_and_skips_typed_words(client, session_id):
    history = [{"word": "cat", "input": "cat", "correct": True, "timeSpent": 1000}]

    body = client.post(
        "/api/typing/next-word",
        json={**ref(session_id), "typing_history": history, "difficulty_level": "easy"},
    ).json()

    assert body["difficulty"] == "easy"
    assert body["word"] in TYPING_WORDS[Tier.EASY]
    assert body["word"] != "cat"


def test_next_word_requires_a_history(client, session_id):
    assert client.post("/api/typing/next-word", json=ref(session_id)).status_code == 422


def test_save_results_and_analyze(client, session_id):
    results = [
        {"word": "cat", "input": typed, "correct": typed == "cat", "timeSpent": 2000, "hesitations": 0}
        for typed in ("cat", "bat", "cat", "kat", "cat")
    ]

    response = client.post("/api/typing/results", json={**ref(session_id), "results": results})

    assert response.status_code == 200
    body = response.json()
    assert body["total_words"] == 5
    assert body["analysis"]["overall_accuracy"] == 60
    assert body["analysis"]["confusion_patterns"] == [
        {"letter": "c", "confused_with": "b", "frequency": 1},
        {"letter": "c", "confused_with": "k", "frequency": 1},
    ]

    analysis = client.post("/api/typing/analyze-session", json=ref(session_id)).json()
    assert analysis["total_words"] == 5
    assert analysis["correct_words"] == 3

    stored = client.get(session_url(session_id)).json()
    assert stored["typing_results_map"] == {"cat": "cat"}
    assert stored["typing_analysis"]["severity"] == "moderate"

    report = client.get(f"/api/typing/children/{THERAPIST}/mia/analysis").json()
    assert report["overall_stats"]["total_words"] == 5
    assert report["session_analyses"][0]["analysis"]["total_words"] == 5


def test_save_results_for_another_game_is_rejected(client, session_id):
    client.put(f"/api/children/{THERAPIST}/mia/games", json={"assigned_games": ["reading"]})
    reading_session = client.post("/api/sessions", json={"therapist_code": THERAPIST, "username": "mia"}).json()

    response = client.post(
        "/api/typing/results",
        json={**ref(reading_session["session_id"]), "results": [{"word": "cat", "input": "cat", "correct": True}]},
    )

    assert reading_session["preferred_game"] == "reading"
    assert response.status_code == 400


def test_analyze_session_without_results(client, session_id):
    assert client.post("/api/typing/analyze-session", json=ref(session_id)).status_code == 400
    assert client.post("/api/typing/analyze-session", json=ref("nope")).status_code == 404


def test_real_time_feedback(client):
    results = [{"word": "sun", "input": "son", "correct": False, "hesitations": 4}] * 3

    body = client.post("/api/typing/real-time-feedback", json={"current_results": results}).json()

    assert body["accuracy"] == 0
    assert body["emotional_state"] == "frustrated"
    assert body["needs_support"] is True
    assert body["suggested_difficulty"] == "easy"

    assert client.post("/api/typing/real-time-feedback", json={"current_results": []}).status_code == 400


def test_emotion_reading_round_trip(client, session_id):
    for emotion in ("happy", "happy", "sad"):
        client.post(session_url(session_id, "/emotion-readings"), json={"emotion": emotion})

    assert client.get(session_url(session_id, "/dominant-emotion")).json() == {"emotion": "happy"}
    assert client.get(session_url(session_id, "/dominant-emotion")).status_code == 404


def test_activity_logging(client, session_id):
    client.post(session_url(session_id, "/themes"), json={"theme": "space"})
    client.post(session_url(session_id, "/emotions"), json={"emotion": "calm"})
    client.post(session_url(session_id, "/puzzles"), json={"theme": "space", "level": 1, "puzzle_id": "p-1"})
    client.post(session_url(session_id, "/tracing"), json={"letter": "d", "image_data": "data:x"})
    client.post(
        session_url(session_id, "/recordings"),
        json={"story_title": "The Fox", "audio_ref": "rec/1.webm", "duration_ms": 3000},
    )

    session = client.get(session_url(session_id)).json()
    assert session["themes_changed"] == ["space"]
    assert session["emotions_of_child"] == ["calm"]
    assert session["played_puzzles"][0]["puzzle_id"] == "p-1"
    assert session["preferred_game"] == "tracing"
    assert session["reading_recordings"][0]["story_title"] == "The Fox"
    assert [t["letter"] for t in client.get(session_url(session_id, "/tracing")).json()] == ["d"]


def test_completed_games(client, session_id):
    response = client.post(f"/api/children/{THERAPIST}/mia/completed-games/typing")

    assert response.status_code == 200
    assert response.json()["completed_games"] == ["typing"]
    assert client.post(f"/api/children/{THERAPIST}/mia/completed-games/chess").status_code == 422


def test_malformed_records_are_skipped_not_rejected(client, session_id):
    results = [
        {"word": "sun", "input": "sun", "correct": True, "timeSpent": "n/a"},
        "not a record",
        {"word": "bed", "input": "bad", "correct": False, "completedAt": "yesterday-ish"},
    ]

    response = client.post("/api/typing/results", json={**ref(session_id), "results": results})

    assert response.status_code == 200
    assert response.json()["total_words"] == 2
    assert response.json()["analysis"]["overall_accuracy"] == 50

    feedback = client.post("/api/typing/real-time-feedback", json={"current_results": results})
    assert feedback.status_code == 200
    assert feedback.json()["accuracy"] == 50

    next_word = client.post("/api/typing/next-word", json={**ref(session_id), "typing_history": results})
    assert next_word.status_code == 200
