from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .analysis import MuscleGroup, PeriodizationModel, PeriodizationPlan, PhasicVariationAnalysis, VolumeLandmark, WeakPointResult
from .profile import EnrichedProfile
from .validation import ValidationTier


class GenerationTier(str, Enum):
    FULL = "full"
    SIMPLIFIED = "simplified"
    BASIC = "basic"
    FAILED = "failed"


class GenerationOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    format: str = "json"
    max_output_tokens: int = 40000
    model: str | None = None
    temperature: float = 0.4


class GenerationContext(BaseModel):
    """Request-scoped outputs of the derivation steps that feed the prompt and the validator."""

    model_config = ConfigDict(frozen=True)

    enriched: EnrichedProfile
    landmarks: dict[MuscleGroup, VolumeLandmark]
    weak_points: WeakPointResult
    variations: PhasicVariationAnalysis
    periodization: PeriodizationPlan


class ProgramMetadata(BaseModel):
    """Scientific context handed to persistence alongside the validated program."""

    volume_landmarks: dict[MuscleGroup, VolumeLandmark]
    weak_points: WeakPointResult
    variations: PhasicVariationAnalysis
    periodization_model: PeriodizationModel
    periodization: PeriodizationPlan
    training_age_years: float
    recovery_capacity: int
    stress_level: int
    volume_tolerance: float
    generation_tier: GenerationTier
    attempts: int
    validation_tier: ValidationTier
    validation_caveats: list[str] = Field(default_factory=list)
    tables_version: str


class GeneratedProgramResponse(BaseModel):
    program_id: int | None = None
    program: dict[str, Any]
    metadata: ProgramMetadata


class StoredProgramResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    created_at: datetime | None = None
    is_active: bool
    periodization_model: str
    validation_tier: str
    attempts: int
    program_data: dict[str, Any]
    scientific_metadata: dict[str, Any] = Field(default_factory=dict)


class ProgramTaskSubmissionResponse(BaseModel):
    task_id: str
    status: str


class ProgramTaskStatusResponse(BaseModel):
    task_id: str
    status: str
    result: dict[str, Any] | None = None
    error: str | None = None
    meta: dict[str, Any] | None = None
