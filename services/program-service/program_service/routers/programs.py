from __future__ import annotations

from typing import Any

import structlog
from celery.result import AsyncResult
from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..celery_app import celery_app
from ..dependencies import SessionLocal, get_current_user_id, get_db
from ..exceptions import ProfileIncomplete
from ..schemas.generation import (
    GeneratedProgramResponse,
    ProgramTaskStatusResponse,
    ProgramTaskSubmissionResponse,
    StoredProgramResponse,
)
from ..schemas.profile import UserProfile
from ..services.genai_backend import GenAIProgramBackend, ProgramBackend
from ..services.generated_program_storage import get_active_program
from ..services.profile_client import ProfileServiceClient
from ..services.program_generation import generate_and_store_program
from ..services.program_history import ProgramHistoryStore, SqlProgramHistoryStore
from ..tasks.program_tasks import generate_program_task

router = APIRouter(tags=["programs"])
logger = structlog.get_logger(__name__)


def get_program_backend() -> ProgramBackend:
    return GenAIProgramBackend()


def get_history_store() -> ProgramHistoryStore:
    return SqlProgramHistoryStore(SessionLocal)


def get_profile_client() -> ProfileServiceClient:
    return ProfileServiceClient()


async def _resolve_profile(
    profile: UserProfile | None,
    user_id: str,
    profile_client: ProfileServiceClient,
) -> UserProfile:
    if profile is not None:
        return profile
    stored = await profile_client.fetch_intake(user_id)
    if stored is None:
        logger.warning("profile_unavailable", user_id=user_id)
        raise ProfileIncomplete(["profile"])
    return stored


@router.post("/generate", response_model=GeneratedProgramResponse, status_code=status.HTTP_201_CREATED)
async def generate_program_endpoint(
    profile: UserProfile | None = Body(default=None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    backend: ProgramBackend = Depends(get_program_backend),
    history_store: ProgramHistoryStore = Depends(get_history_store),
    profile_client: ProfileServiceClient = Depends(get_profile_client),
):
    """Derive, generate, validate and store a training program for the caller."""
    resolved = await _resolve_profile(profile, user_id, profile_client)
    result = await generate_and_store_program(
        resolved,
        user_id=user_id,
        backend=backend,
        history_store=history_store,
        db=db,
    )
    return GeneratedProgramResponse(program_id=result.program_id, program=result.program, metadata=result.metadata)


@router.post(
    "/generate/async",
    response_model=ProgramTaskSubmissionResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def generate_program_async(
    profile: UserProfile | None = Body(default=None),
    user_id: str = Depends(get_current_user_id),
    profile_client: ProfileServiceClient = Depends(get_profile_client),
):
    resolved = await _resolve_profile(profile, user_id, profile_client)
    async_result = generate_program_task.s(
        profile_data=resolved.model_dump(mode="json"),
        user_id=user_id,
    ).apply_async()
    logger.info("program_task_enqueued", task_id=async_result.id, task_name=generate_program_task.name, user_id=user_id)
    return ProgramTaskSubmissionResponse(task_id=async_result.id, status=async_result.status)


@router.get("/tasks/{task_id}", response_model=ProgramTaskStatusResponse)
async def get_program_task_status(task_id: str):
    result = AsyncResult(task_id, app=celery_app)
    payload: dict[str, Any] = {"task_id": task_id, "status": result.status}
    if result.failed():
        payload["error"] = str(result.result)
    elif result.successful():
        payload["result"] = result.result
    if isinstance(result.info, dict):
        payload["meta"] = result.info
    return ProgramTaskStatusResponse(**payload)


@router.get("/active", response_model=StoredProgramResponse)
def read_active_program(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    program = get_active_program(db, user_id)
    if program is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active program")
    return program
