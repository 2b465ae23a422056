from __future__ import annotations

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import PersistenceFailure
from ..models import GeneratedProgram
from ..schemas.generation import ProgramMetadata

logger = structlog.get_logger(__name__)


def save_generated_program(db: Session, program: dict, metadata: ProgramMetadata, user_id: str) -> GeneratedProgram:
    """Store a validated program as the user's active one, retiring the previous active program."""
    try:
        db.execute(
            update(GeneratedProgram)
            .where(GeneratedProgram.user_id == user_id, GeneratedProgram.is_active.is_(True))
            .values(is_active=False)
        )
        row = GeneratedProgram(
            user_id=user_id,
            is_active=True,
            program_data=program,
            scientific_metadata=metadata.model_dump(mode="json"),
            periodization_model=metadata.periodization_model.value,
            validation_tier=metadata.validation_tier.value,
            attempts=metadata.attempts,
        )
        db.add(row)
        db.commit()
        db.refresh(row)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("generated_program_save_failed", user_id=user_id, error=str(exc))
        raise PersistenceFailure(str(exc)) from exc

    logger.info("generated_program_saved", user_id=user_id, program_id=row.id)
    return row


def get_active_program(db: Session, user_id: str) -> GeneratedProgram | None:
    stmt = (
        select(GeneratedProgram)
        .where(GeneratedProgram.user_id == user_id, GeneratedProgram.is_active.is_(True))
        .order_by(GeneratedProgram.created_at.desc(), GeneratedProgram.id.desc())
        .limit(1)
    )
    return db.scalars(stmt).first()
