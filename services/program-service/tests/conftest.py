import os
import sys
import tempfile
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient

# Ensure the service package is importable
SERVICE_ROOT = Path(__file__).resolve().parents[1]
if str(SERVICE_ROOT) not in sys.path:
    sys.path.insert(0, str(SERVICE_ROOT))

# The engine is created at import time, so the database URL must be set before program_service is imported.
_TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="program_service_tests_"))
TEST_DB_URL = f"sqlite:///{_TEST_DB_DIR / 'test_program_service.db'}"
os.environ["PROGRAM_DATABASE_URL"] = TEST_DB_URL
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")


def _alembic_upgrade_head(db_url: str) -> None:
    os.environ["PROGRAM_DATABASE_URL"] = db_url
    cfg = Config(str(SERVICE_ROOT / "alembic.ini"))
    # Pin script_location explicitly to avoid picking up wrong migrations when running from repo root
    cfg.set_main_option("script_location", str(SERVICE_ROOT / "alembic"))
    command.upgrade(cfg, "head")


class ScriptedBackend:
    """Generative backend returning (or raising) the queued responses in order; the last one repeats."""

    def __init__(self, *responses):
        self._responses = list(responses)
        self.prompts: list[str] = []
        self.options = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def generate(self, prompt, options):
        self.prompts.append(prompt)
        self.options.append(options)
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(response, BaseException):
            raise response
        return response


class InMemoryHistoryStore:
    def __init__(self, programs=None, error: Exception | None = None):
        self._programs = list(programs or [])
        self._error = error
        self.requests: list[tuple[str, int]] = []

    async def fetch_recent_programs(self, user_id, limit):
        self.requests.append((user_id, limit))
        if self._error is not None:
            raise self._error
        return self._programs[:limit]


def _exercise(name, sets=3, reps="8-10", rpe="7-8", **extra):
    exercise = {"name": name, "sets": sets, "reps": reps, "rest": "2 min", "rpe": rpe, "category": "Compound"}
    exercise.update(extra)
    return exercise


def _week(week_number, training_day_numbers, exercises):
    days = []
    for day in range(1, 8):
        if day in training_day_numbers:
            days.append(
                {
                    "dayOfWeek": day,
                    "isRestDay": False,
                    "focus": "Full Body",
                    "exercises": [dict(exercise) for exercise in exercises],
                }
            )
        else:
            days.append({"dayOfWeek": day, "isRestDay": True, "focus": "Rest Day", "exercises": []})
    return {"weekNumber": week_number, "days": days}


def build_program_payload(
    *,
    training_days=(1, 3, 5),
    exercises=None,
    weeks_per_phase=(1,),
    phase_names=None,
):
    """A camelCase program document: every training day repeats ``exercises``."""
    exercises = exercises or [
        _exercise("Back Squat"),
        _exercise("Bench Press"),
        _exercise("Barbell Row"),
    ]
    phase_names = phase_names or [f"Phase {index + 1}" for index in range(len(weeks_per_phase))]
    phases = []
    week_number = 0
    for name, count in zip(phase_names, weeks_per_phase):
        weeks = []
        for _ in range(count):
            week_number += 1
            weeks.append(_week(week_number, training_days, exercises))
        phases.append({"phaseName": name, "durationWeeks": count, "weeks": weeks})
    return {
        "programName": "Test Program",
        "description": "Three full body sessions per week.",
        "durationWeeksTotal": sum(weeks_per_phase),
        "phases": phases,
    }


@pytest.fixture()
def exercise():
    return _exercise


@pytest.fixture()
def program_payload():
    return build_program_payload


@pytest.fixture()
def scripted_backend():
    return ScriptedBackend


@pytest.fixture()
def history_store():
    return InMemoryHistoryStore


@pytest.fixture()
def intermediate_profile():
    from program_service.schemas.profile import UserProfile

    return UserProfile(
        primary_goal="Muscle Gain",
        experience_level="Intermediate",
        training_frequency_days=3,
        session_duration_minutes=60,
        squat_e1rm=140,
        bench_e1rm=100,
        deadlift_e1rm=180,
        overhead_press_e1rm=65,
    )


@pytest.fixture(scope="session")
def migrated_db():
    _alembic_upgrade_head(TEST_DB_URL)
    yield TEST_DB_URL


@pytest.fixture()
def db_session(migrated_db: str):
    from program_service.dependencies import SessionLocal
    from program_service.models import GeneratedProgram

    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.query(GeneratedProgram).delete()
        db.commit()
        db.close()


@pytest.fixture()
def client(db_session):
    from program_service.dependencies import get_db
    from program_service.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
