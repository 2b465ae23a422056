import pytest
from fastapi.testclient import TestClient

from program_service.main import app
from program_service.routers import programs
from program_service.schemas.profile import UserProfile

HEADERS = {"X-User-Id": "user-42"}

PROFILE_BODY = {
    "primary_goal": "Strength Gain",
    "experience_level": "Beginner",
    "training_frequency_days": 3,
    "session_duration_minutes": 60,
    "squat_e1rm": 100,
    "deadlift_e1rm": 130,
}


class StubProfileClient:
    def __init__(self, profile=None):
        self.profile = profile
        self.requested: list[str] = []

    async def fetch_intake(self, user_id):
        self.requested.append(user_id)
        return self.profile


@pytest.fixture()
def wire(client, scripted_backend, history_store):
    """Install the generative backend, history store and profile client used by the endpoints."""

    def _wire(*responses, profile=None):
        backend = scripted_backend(*responses)
        profile_client = StubProfileClient(profile)
        app.dependency_overrides[programs.get_program_backend] = lambda: backend
        app.dependency_overrides[programs.get_history_store] = lambda: history_store()
        app.dependency_overrides[programs.get_profile_client] = lambda: profile_client
        return backend, profile_client

    return _wire


def test_health(client: TestClient):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_metrics_are_exposed(client: TestClient):
    r = client.get("/metrics")
    assert r.status_code == 200


def test_generate_requires_user_header(client: TestClient, wire, program_payload):
    wire(program_payload())
    r = client.post("/programs/generate", json=PROFILE_BODY)
    assert r.status_code == 401


def test_generate_and_read_active_program(client: TestClient, wire, program_payload):
    backend, _ = wire(program_payload())

    assert client.get("/programs/active", headers=HEADERS).status_code == 404

    r = client.post("/programs/generate", json=PROFILE_BODY, headers=HEADERS)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["program"]["programName"] == "Test Program"
    assert body["metadata"]["generation_tier"] == "full"
    assert body["metadata"]["periodization_model"] == "linear"
    assert body["metadata"]["weak_points"]["is_default"] is True
    assert backend.calls == 1

    r_active = client.get("/programs/active", headers=HEADERS)
    assert r_active.status_code == 200
    active = r_active.json()
    assert active["id"] == body["program_id"]
    assert active["user_id"] == "user-42"
    assert active["is_active"] is True
    assert active["program_data"]["programName"] == "Test Program"


def test_generate_falls_back_to_stored_profile(client: TestClient, wire, program_payload):
    _, profile_client = wire(program_payload(), profile=UserProfile(**PROFILE_BODY))
    r = client.post("/programs/generate", headers=HEADERS)
    assert r.status_code == 201, r.text
    assert profile_client.requested == ["user-42"]


def test_generate_without_any_profile_is_unprocessable(client: TestClient, wire, program_payload):
    backend, _ = wire(program_payload())
    r = client.post("/programs/generate", headers=HEADERS)
    assert r.status_code == 422
    assert r.json()["error"] == "profile_incomplete"
    assert backend.calls == 0


def test_generate_with_incomplete_profile(client: TestClient, wire, program_payload):
    wire(program_payload())
    r = client.post("/programs/generate", json={"primary_goal": "Muscle Gain"}, headers=HEADERS)
    assert r.status_code == 422
    body = r.json()
    assert body["error"] == "profile_incomplete"
    assert body["missing_fields"] == ["experience_level"]


def test_backend_exhaustion_maps_to_bad_gateway(client: TestClient, wire):
    backend, _ = wire(RuntimeError("upstream unavailable"))
    r = client.post("/programs/generate", json=PROFILE_BODY, headers=HEADERS)
    assert r.status_code == 502
    body = r.json()
    assert body["error"] == "generation_failed"
    assert "upstream unavailable" in body["detail"]
    assert backend.calls == 3
    assert client.get("/programs/active", headers=HEADERS).status_code == 404


def test_rejected_program_maps_to_bad_gateway(client: TestClient, wire):
    wire({"programName": "Incomplete"})
    r = client.post("/programs/generate", json=PROFILE_BODY, headers=HEADERS)
    assert r.status_code == 502
    assert r.json()["error"] == "validation_failed"
    assert r.json()["violations"]


def test_generate_async_enqueues_task(client: TestClient, wire, monkeypatch):
    wire({})
    submitted = {}

    class FakeAsyncResult:
        id = "task-123"
        status = "PENDING"

    class FakeSignature:
        def __init__(self, **kwargs):
            submitted.update(kwargs)

        def apply_async(self):
            return FakeAsyncResult()

    class FakeTask:
        name = "program.generate_program"

        def s(self, **kwargs):
            return FakeSignature(**kwargs)

    monkeypatch.setattr(programs, "generate_program_task", FakeTask())

    r = client.post("/programs/generate/async", json=PROFILE_BODY, headers=HEADERS)
    assert r.status_code == 202
    assert r.json() == {"task_id": "task-123", "status": "PENDING"}
    assert submitted["user_id"] == "user-42"
    assert submitted["profile_data"]["primary_goal"] == "Strength Gain"


def test_task_status_reports_result(client: TestClient, monkeypatch):
    class FakeResult:
        status = "SUCCESS"
        result = {"program_id": 7}
        info = {"program_id": 7}

        def __init__(self, task_id, app=None):
            self.task_id = task_id

        def failed(self):
            return False

        def successful(self):
            return True

    monkeypatch.setattr(programs, "AsyncResult", FakeResult)
    r = client.get("/programs/tasks/task-123")
    assert r.status_code == 200
    body = r.json()
    assert body["task_id"] == "task-123"
    assert body["status"] == "SUCCESS"
    assert body["result"] == {"program_id": 7}
