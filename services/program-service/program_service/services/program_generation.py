from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

import structlog
from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..data import TABLES_VERSION
from ..logging_config import bind_generation_context, clear_generation_context
from ..metrics import TRAINING_PROGRAMS_GENERATED_TOTAL
from ..schemas.analysis import MuscleGroup
from ..schemas.generation import GenerationContext, GenerationOptions, ProgramMetadata
from ..schemas.profile import UserProfile
from ..schemas.program import program_to_payload
from .exercise_variation import plan_exercise_variations
from .generated_program_storage import save_generated_program
from .genai_backend import ProgramBackend
from .periodization import build_periodization_plan
from .profile_enrichment import enrich_profile
from .program_history import ProgramHistoryStore
from .program_validator import ProgramConstraints
from .prompt_orchestrator import PromptOrchestrator
from .volume_landmarks import calculate_volume_landmarks
from .weak_points import analyze_profile_weak_points

logger = structlog.get_logger(__name__)


@dataclass
class GeneratedProgramResult:
    program: dict[str, Any]
    metadata: ProgramMetadata
    program_id: int | None = None


def generation_options(settings: Settings) -> GenerationOptions:
    return GenerationOptions(
        format="json",
        max_output_tokens=settings.GENERATION_MAX_OUTPUT_TOKENS,
        model=settings.LLM_MODEL,
        temperature=settings.GENERATION_TEMPERATURE,
    )


async def build_generation_context(
    profile: UserProfile,
    *,
    user_id: str,
    history_store: ProgramHistoryStore,
    history_limit: int,
) -> GenerationContext:
    enriched = enrich_profile(profile)
    landmarks = calculate_volume_landmarks(enriched)
    weak_points = analyze_profile_weak_points(profile)
    variations = await plan_exercise_variations(
        user_id,
        list(MuscleGroup),
        history_store=history_store,
        limit=history_limit,
    )
    periodization = build_periodization_plan(enriched, landmarks)
    return GenerationContext(
        enriched=enriched,
        landmarks=landmarks,
        weak_points=weak_points,
        variations=variations,
        periodization=periodization,
    )


async def generate_program(
    profile: UserProfile,
    *,
    user_id: str,
    backend: ProgramBackend,
    history_store: ProgramHistoryStore,
    settings: Settings | None = None,
) -> GeneratedProgramResult:
    """Run the derivation pipeline and return a validated, not yet persisted, program."""
    settings = settings or get_settings()
    bind_generation_context(user_id=user_id)
    try:
        context = await build_generation_context(
            profile,
            user_id=user_id,
            history_store=history_store,
            history_limit=settings.PROGRAM_HISTORY_LIMIT,
        )
        constraints = ProgramConstraints(
            training_frequency=profile.training_frequency_days,
            landmarks=context.landmarks,
            weak_points=context.weak_points,
            rpe_ceiling=context.periodization.rpe_ceiling,
        )
        orchestrator = PromptOrchestrator(
            backend,
            options=generation_options(settings),
            attempt_timeout=settings.GENERATION_ATTEMPT_TIMEOUT_SECONDS,
        )
        outcome = await orchestrator.run(context, constraints)
    finally:
        clear_generation_context("user_id")

    enriched = context.enriched
    metadata = ProgramMetadata(
        volume_landmarks=context.landmarks,
        weak_points=context.weak_points,
        variations=context.variations,
        periodization_model=context.periodization.model,
        periodization=context.periodization,
        training_age_years=enriched.training_age_years,
        recovery_capacity=enriched.recovery_capacity,
        stress_level=enriched.stress_level,
        volume_tolerance=enriched.volume_tolerance,
        generation_tier=outcome.tier,
        attempts=outcome.attempts,
        validation_tier=outcome.validation.tier,
        validation_caveats=list(outcome.validation.violations),
        tables_version=TABLES_VERSION,
    )
    logger.info(
        "program_generated",
        user_id=user_id,
        tier=outcome.tier.value,
        validation_tier=outcome.validation.tier.value,
        attempts=outcome.attempts,
    )
    return GeneratedProgramResult(program=program_to_payload(outcome.validation.program), metadata=metadata)


def persist_generated_program(db: Session, result: GeneratedProgramResult, user_id: str) -> GeneratedProgramResult:
    row = save_generated_program(db, result.program, result.metadata, user_id)
    TRAINING_PROGRAMS_GENERATED_TOTAL.labels(
        tier=result.metadata.generation_tier.value,
        validation_tier=result.metadata.validation_tier.value,
    ).inc()
    result.program_id = row.id
    return result


async def generate_and_store_program(
    profile: UserProfile,
    *,
    user_id: str,
    backend: ProgramBackend,
    history_store: ProgramHistoryStore,
    db: Session,
    settings: Settings | None = None,
) -> GeneratedProgramResult:
    result = await generate_program(
        profile,
        user_id=user_id,
        backend=backend,
        history_store=history_store,
        settings=settings,
    )
    return await asyncio.to_thread(persist_generated_program, db, result, user_id)
