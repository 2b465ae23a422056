"""Celery task running the program derivation pipeline off the request path."""

from __future__ import annotations

import asyncio
from typing import Any

from celery import shared_task
from celery.utils.log import get_task_logger

from ..celery_app import PROGRAM_TASK_QUEUE
from ..dependencies import SessionLocal
from ..exceptions import ProfileIncomplete, ProgramGenerationError
from ..schemas.profile import UserProfile
from ..services.genai_backend import GenAIProgramBackend
from ..services.program_generation import GeneratedProgramResult, generate_program, persist_generated_program
from ..services.program_history import SqlProgramHistoryStore

logger = get_task_logger(__name__)


def _run_async(coro):
    return asyncio.run(coro)


def _persist_program(result: GeneratedProgramResult, user_id: str) -> GeneratedProgramResult:
    db = SessionLocal()
    try:
        return persist_generated_program(db, result, user_id)
    finally:
        db.close()


def _build_payload(result: GeneratedProgramResult) -> dict[str, Any]:
    return {
        "program_id": result.program_id,
        "program": result.program,
        "metadata": result.metadata.model_dump(mode="json"),
    }


# Tier degradation inside the pipeline is the only retry; the task itself never re-runs it.
@shared_task(bind=True, name="program.generate_program", queue=PROGRAM_TASK_QUEUE, max_retries=0)
def generate_program_task(self, profile_data: dict[str, Any], user_id: str) -> dict[str, Any]:
    """Generate, validate and store a program for ``user_id``."""
    profile = UserProfile.model_validate(profile_data)
    try:
        result = _run_async(
            generate_program(
                profile,
                user_id=user_id,
                backend=GenAIProgramBackend(),
                history_store=SqlProgramHistoryStore(SessionLocal),
            )
        )
        result = _persist_program(result, user_id)
    except ProfileIncomplete as exc:
        logger.warning("generate_program_task_profile_incomplete", exc_info=exc)
        raise
    except ProgramGenerationError as exc:
        logger.exception("generate_program_task_failed code=%s", exc.code, exc_info=exc)
        raise
    return _build_payload(result)
