from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

LBS_PER_KG = 2.20462


class ExperienceLevel(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class PrimaryGoal(str, Enum):
    MUSCLE_GAIN = "Muscle Gain"
    STRENGTH_GAIN = "Strength Gain"
    ENDURANCE = "Endurance Improvement"
    SPORT_SPECIFIC = "Sport-Specific"
    GENERAL_FITNESS = "General Fitness"


class WeightUnit(str, Enum):
    KG = "kg"
    LBS = "lbs"


_GOAL_PREFIXES: tuple[tuple[str, PrimaryGoal], ...] = (
    ("muscle", PrimaryGoal.MUSCLE_GAIN),
    ("hypertrophy", PrimaryGoal.MUSCLE_GAIN),
    ("strength", PrimaryGoal.STRENGTH_GAIN),
    ("endurance", PrimaryGoal.ENDURANCE),
    ("sport", PrimaryGoal.SPORT_SPECIFIC),
    ("general", PrimaryGoal.GENERAL_FITNESS),
)


def _parse_session_minutes(value: Any) -> Any:
    """Accept onboarding answers such as "45-60 minutes" or "75+ minutes"."""
    if not isinstance(value, str):
        return value
    numbers = [int(n) for n in re.findall(r"\d+", value)]
    if not numbers:
        return value
    if "+" in value:
        return numbers[0] + 15
    return max(numbers)


class UserProfile(BaseModel):
    """Read-only snapshot of the onboarding answers."""

    model_config = ConfigDict(frozen=True)

    primary_goal: PrimaryGoal | None = None
    experience_level: ExperienceLevel | None = None
    training_frequency_days: int = Field(default=3, ge=1, le=7)
    session_duration_minutes: int = Field(default=60, ge=15, le=240)
    available_equipment: tuple[str, ...] = ()
    injuries_limitations: str | None = None
    squat_e1rm: float | None = None
    bench_e1rm: float | None = None
    deadlift_e1rm: float | None = None
    overhead_press_e1rm: float | None = None
    weight_unit: WeightUnit = WeightUnit.KG
    age: int | None = Field(default=None, ge=10, le=100)
    reported_stress_level: int | None = Field(default=None, ge=0, le=10)
    sport_focus: str | None = None

    @field_validator("experience_level", mode="before")
    @classmethod
    def _coerce_experience(cls, value: Any) -> Any:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if not lowered:
                return None
            for level in ExperienceLevel:
                if lowered.startswith(level.value.lower()):
                    return level
        return value

    @field_validator("primary_goal", mode="before")
    @classmethod
    def _coerce_goal(cls, value: Any) -> Any:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if not lowered:
                return None
            for prefix, goal in _GOAL_PREFIXES:
                if lowered.startswith(prefix):
                    return goal
        return value

    @field_validator("session_duration_minutes", mode="before")
    @classmethod
    def _coerce_session(cls, value: Any) -> Any:
        return _parse_session_minutes(value)

    @field_validator("squat_e1rm", "bench_e1rm", "deadlift_e1rm", "overhead_press_e1rm", mode="before")
    @classmethod
    def _drop_non_positive(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        return number if number > 0 else None

    def lift_estimates(self) -> dict[str, float]:
        lifts = {
            "squat": self.squat_e1rm,
            "bench": self.bench_e1rm,
            "deadlift": self.deadlift_e1rm,
            "overhead_press": self.overhead_press_e1rm,
        }
        return {name: value for name, value in lifts.items() if value is not None}


class InjuryFlag(BaseModel):
    model_config = ConfigDict(frozen=True)

    area: str
    contraindications: tuple[str, ...] = ()


class EnrichedProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    profile: UserProfile
    goal: PrimaryGoal
    experience: ExperienceLevel
    training_age_years: float
    recovery_capacity: int = Field(ge=0, le=10)
    stress_level: int = Field(ge=0, le=10)
    volume_tolerance: float = Field(gt=0)
    injury_flags: tuple[InjuryFlag, ...] = ()
