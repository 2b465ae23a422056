from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, Protocol

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import GeneratedProgram

logger = structlog.get_logger(__name__)


class ProgramHistoryStore(Protocol):
    async def fetch_recent_programs(self, user_id: str, limit: int) -> list[dict[str, Any]]: ...


class SqlProgramHistoryStore:
    """Reads the user's previously generated programs, newest first."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _load(self, user_id: str, limit: int) -> list[dict[str, Any]]:
        db = self._session_factory()
        try:
            stmt = (
                select(GeneratedProgram.program_data)
                .where(GeneratedProgram.user_id == user_id)
                .order_by(GeneratedProgram.created_at.desc(), GeneratedProgram.id.desc())
                .limit(limit)
            )
            return [data for data in db.scalars(stmt) if isinstance(data, dict)]
        finally:
            db.close()

    async def fetch_recent_programs(self, user_id: str, limit: int) -> list[dict[str, Any]]:
        programs = await asyncio.to_thread(self._load, user_id, limit)
        logger.debug("program_history_loaded", user_id=user_id, count=len(programs))
        return programs
