"""HTTP surface, driven through FastAPI's TestClient with a fake provider."""

import pytest
from fakes import CORRECT
from fastapi.testclient import TestClient

from omnilearn.api import app, get_controller


@pytest.fixture
def client(controller):
    app.dependency_overrides[get_controller] = lambda: controller
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _create(client, **overrides) -> dict:
    body = {"topic": "Cell Biology", "difficulty": "Basic", "subtopicCount": 3, "lessonCount": 2, **overrides}
    r = client.post("/courses", json=body)
    assert r.status_code == 200
    return r.json()


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_initial_state(client):
    data = client.get("/state").json()
    assert data["step"] == "DASHBOARD"
    assert data["courses"] == []
    assert data["quiz"]["canSubmit"] is False


def test_full_walkthrough(client):
    snap = _create(client)
    assert snap["step"] == "SUBTOPICS"
    course = snap["courses"][0]
    assert course["subtopicCount"] == 3

    snap = client.post("/subtopics/select", json={"subtopic": course["subtopics"][0]}).json()
    assert snap["step"] == "LESSONS"
    lessons = snap["courses"][0]["lessonsCache"][course["subtopics"][0]]

    snap = client.post("/lessons/select", json={"lesson": lessons[0]}).json()
    assert snap["step"] == "CONTENT"
    assert snap["courses"][0]["imageCache"][lessons[0]]["sourceUrl"].startswith("https://")

    narration = client.get("/lessons/narration").json()
    assert narration["lesson"] == lessons[0]
    assert "#" not in narration["text"]

    snap = client.post("/lessons/next").json()
    assert snap["selectedLesson"] == lessons[1]
    snap = client.post("/lessons/previous").json()
    assert snap["selectedLesson"] == lessons[0]

    snap = client.post("/quiz/start").json()
    assert snap["step"] == "QUIZ"
    for q, label in zip(snap["currentQuiz"]["questions"], CORRECT):
        snap = client.post("/quiz/answer", json={"questionId": q["id"], "optionId": label}).json()
    assert snap["quiz"]["canSubmit"] is True

    snap = client.post("/quiz/submit").json()
    assert snap["quiz"]["score"] == 5
    assert snap["courses"][0]["completedQuizzes"] == {lessons[0]: 5}

    progress = client.get(f"/courses/{course['id']}/progress").json()
    assert progress == {"completed": 1, "total": 6, "percent": 17, "passed": {lessons[0]: True}}


def test_navigation_endpoints(client):
    assert client.post("/navigation/input").json()["step"] == "INPUT"
    assert client.post("/navigation/back").json()["step"] == "DASHBOARD"
    _create(client)
    snap = client.post("/navigation/dashboard").json()
    assert snap["step"] == "DASHBOARD"
    assert snap["activeCourseId"] is None


def test_provider_failure_visible_in_state(client, provider):
    provider.failing.add("subtopics")
    snap = _create(client)
    assert snap["step"] == "DASHBOARD"
    assert snap["error"] == "Could not generate subtopics. Please try again."


def test_resume_and_delete(client):
    cid = _create(client)["activeCourseId"]
    client.post("/navigation/dashboard")
    assert client.post(f"/courses/{cid}/resume").json()["activeCourseId"] == cid

    snap = client.delete(f"/courses/{cid}").json()
    assert snap["step"] == "DASHBOARD"
    assert snap["courses"] == []


def test_unknown_course_is_404(client):
    assert client.post("/courses/missing/resume").status_code == 404
    assert client.get("/courses/missing/progress").status_code == 404


def test_narration_without_lesson_is_404(client):
    assert client.get("/lessons/narration").status_code == 404


def test_bad_difficulty_rejected(client):
    r = client.post("/courses", json={"topic": "X", "difficulty": "Impossible"})
    assert r.status_code == 422
