from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MuscleGroup(str, Enum):
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    ARMS = "arms"
    QUADS = "quads"
    HAMSTRINGS = "hamstrings"
    GLUTES = "glutes"
    CALVES = "calves"
    ABS = "abs"


class VolumeLandmark(BaseModel):
    model_config = ConfigDict(frozen=True)

    mev: int = Field(ge=0)
    mav: int = Field(ge=0)
    mrv: int = Field(ge=0)

    @model_validator(mode="after")
    def _ordered(self) -> VolumeLandmark:
        if not (self.mev <= self.mav <= self.mrv):
            raise ValueError(f"landmarks must satisfy MEV <= MAV <= MRV, got {self.mev}/{self.mav}/{self.mrv}")
        return self


class Severity(str, Enum):
    MODERATE = "Moderate"
    HIGH = "High"


class StrengthRatioIssue(BaseModel):
    ratio_name: str
    user_ratio: float
    minimum_ratio: float
    severity: Severity
    explanation: str


class WeakPointResult(BaseModel):
    issues: list[StrengthRatioIssue] = Field(default_factory=list)
    primary_weak_points: list[str] = Field(default_factory=list)
    corrective_exercises: list[str] = Field(default_factory=list)
    reassessment_period_weeks: int = 16
    is_default: bool = False


class ExerciseVariation(BaseModel):
    original_exercise: str
    variation_exercise: str
    targeted_muscle_groups: list[MuscleGroup]
    rationale: str


class PhasicVariationAnalysis(BaseModel):
    previous_exercises: list[str] = Field(default_factory=list)
    suggested_variations: list[ExerciseVariation] = Field(default_factory=list)
    rationale: str = ""


class PeriodizationModel(str, Enum):
    STRENGTH_FOCUSED = "strength-focused"
    HYPERTROPHY_FOCUSED = "hypertrophy-focused"
    LINEAR = "linear"
    BALANCED = "balanced"


class VolumeProgression(str, Enum):
    LINEAR = "linear"
    RAMPING = "ramping"
    STABLE = "stable"


class Adaptation(str, Enum):
    HYPERTROPHY = "hypertrophy"
    STRENGTH = "strength"
    PEAKING = "peaking"
    RECOVERY = "recovery"


class PhaseTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    duration_weeks: int = Field(ge=1)
    intensity_range: tuple[float, float]
    volume_progression: VolumeProgression
    primary_adaptation: Adaptation


class WeeklyProgression(BaseModel):
    week_number: int
    phase_name: str
    week_in_phase: int
    target_volume_sets: int
    target_intensity_percent: float
    rpe_range: tuple[int, int]
    focus: str


class PeriodizationPlan(BaseModel):
    model: PeriodizationModel
    total_weeks: int
    phases: list[PhaseTemplate]
    weekly_progression: list[WeeklyProgression]
    rpe_targets: dict[Adaptation, tuple[int, int]]
    progression_strategy: str
    autoregulation_guidance: str

    @property
    def rpe_ceiling(self) -> int:
        return max(high for _, high in self.rpe_targets.values())
