"""Generated program shapes.

Two schema tiers describe the same JSON document. The strict models enforce the
closed enumerations, integer set counts, the seven-day week and the cross-field
consistency of durations. The relaxed models only check types and required
fields so that a structurally sound program can still be accepted with caveats.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

_REPS_PATTERN = re.compile(
    r"^\s*(\d+\s*(-\s*\d+)?\s*(s|sec|secs|seconds|min|m|reps)?\s*(per side|each side|each leg|each arm|/side)?|amrap)\s*$",
    re.IGNORECASE,
)
_RPE_PATTERN = re.compile(r"^\s*(\d+(\.\d+)?)\s*(-\s*(\d+(\.\d+)?))?\s*$")


class WorkoutFocus(str, Enum):
    UPPER_BODY = "Upper Body"
    LOWER_BODY = "Lower Body"
    PUSH = "Push"
    PULL = "Pull"
    LEGS = "Legs"
    FULL_BODY = "Full Body"
    CARDIO = "Cardio"
    CORE = "Core"
    ARMS = "Arms"
    BACK = "Back"
    CHEST = "Chest"
    SHOULDERS = "Shoulders"
    GLUTES = "Glutes"
    RECOVERY_MOBILITY = "Recovery/Mobility"
    SPORT_SPECIFIC = "Sport-Specific"
    REST_DAY = "Rest Day"
    LOWER_BODY_ENDURANCE = "Lower Body Endurance"


class ExerciseCategory(str, Enum):
    COMPOUND = "Compound"
    ISOLATION = "Isolation"
    CARDIO = "Cardio"
    MOBILITY = "Mobility"
    CORE = "Core"
    WARM_UP = "Warm-up"
    COOL_DOWN = "Cool-down"


def parse_rpe(value: Any) -> tuple[float, float] | None:
    """Return the (low, high) RPE bounds expressed by a number or a "7-8" string."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value), float(value)
    if isinstance(value, str):
        match = _RPE_PATTERN.match(value)
        if not match:
            return None
        low = float(match.group(1))
        high = float(match.group(4)) if match.group(4) else low
        return min(low, high), max(low, high)
    return None


class _ProgramModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ExerciseDetail(_ProgramModel):
    name: str = Field(min_length=1)
    sets: int = Field(strict=True, ge=1, le=12)
    reps: int | str
    rest: str = Field(min_length=1)
    tempo: str | None = None
    rpe: float | str | None = None
    weight: str | None = None
    category: ExerciseCategory | None = None
    notes: str | None = None

    @field_validator("reps")
    @classmethod
    def _validate_reps(cls, value: int | str) -> int | str:
        if isinstance(value, int):
            if value < 1:
                raise ValueError("reps must be positive")
            return value
        if not _REPS_PATTERN.match(value):
            raise ValueError(f"unrecognized reps format: {value!r}")
        return value

    @field_validator("rpe")
    @classmethod
    def _validate_rpe(cls, value: float | str | None) -> float | str | None:
        if value is None:
            return value
        bounds = parse_rpe(value)
        if bounds is None or bounds[0] < 1 or bounds[1] > 10:
            raise ValueError(f"rpe must be within 1-10, got {value!r}")
        return value


class WorkoutDay(_ProgramModel):
    day_of_week: int = Field(ge=1, le=7)
    is_rest_day: bool
    focus: WorkoutFocus | None = None
    exercises: list[ExerciseDetail] = Field(default_factory=list)
    warm_up: list[str] | None = None
    cool_down: list[str] | None = None
    estimated_duration_minutes: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _rest_day_consistency(self) -> WorkoutDay:
        if self.is_rest_day and self.exercises:
            raise ValueError(f"day {self.day_of_week} is a rest day but lists exercises")
        if not self.is_rest_day and not self.exercises:
            raise ValueError(f"day {self.day_of_week} is a training day without exercises")
        return self


class TrainingWeek(_ProgramModel):
    week_number: int = Field(ge=1)
    days: list[WorkoutDay]
    weekly_goals: list[str] | None = None
    progression_strategy: str | None = None
    coach_tip: str | None = None

    @model_validator(mode="after")
    def _seven_calendar_days(self) -> TrainingWeek:
        day_numbers = [day.day_of_week for day in self.days]
        if day_numbers != list(range(1, 8)):
            raise ValueError(f"week {self.week_number} must list days 1-7 in order, got {day_numbers}")
        return self


class TrainingPhase(_ProgramModel):
    phase_name: str = Field(min_length=1)
    duration_weeks: int = Field(ge=1)
    weeks: list[TrainingWeek] = Field(min_length=1)
    progression_strategy: str | None = None

    @model_validator(mode="after")
    def _duration_matches_weeks(self) -> TrainingPhase:
        if self.duration_weeks != len(self.weeks):
            raise ValueError(
                f"phase {self.phase_name!r} declares {self.duration_weeks} weeks but contains {len(self.weeks)}"
            )
        return self


class TrainingProgram(_ProgramModel):
    program_name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    duration_weeks_total: int = Field(ge=1)
    phases: list[TrainingPhase] = Field(min_length=1)
    general_advice: str | None = None
    difficulty_level: str | None = None
    training_frequency: int | None = Field(default=None, ge=1, le=7)

    @model_validator(mode="after")
    def _total_matches_phases(self) -> TrainingProgram:
        declared = sum(phase.duration_weeks for phase in self.phases)
        if declared != self.duration_weeks_total:
            raise ValueError(f"durationWeeksTotal is {self.duration_weeks_total} but phases sum to {declared}")
        week_numbers = [week.week_number for phase in self.phases for week in phase.weeks]
        if week_numbers != sorted(set(week_numbers)):
            raise ValueError("week numbers must be unique and ascending across phases")
        return self


class RelaxedExerciseDetail(_ProgramModel):
    name: str
    sets: int
    reps: int | str
    rest: str | None = None
    tempo: str | None = None
    rpe: float | str | None = None
    weight: str | None = None
    category: str | None = None
    notes: str | None = None


class RelaxedWorkoutDay(_ProgramModel):
    day_of_week: int
    is_rest_day: bool
    focus: str | None = None
    exercises: list[RelaxedExerciseDetail] = Field(default_factory=list)
    warm_up: list[Any] | None = None
    cool_down: list[Any] | None = None
    estimated_duration_minutes: int | None = None


class RelaxedTrainingWeek(_ProgramModel):
    week_number: int
    days: list[RelaxedWorkoutDay] = Field(min_length=1)
    weekly_goals: list[str] | None = None
    progression_strategy: str | None = None
    coach_tip: str | None = None


class RelaxedTrainingPhase(_ProgramModel):
    phase_name: str
    duration_weeks: int
    weeks: list[RelaxedTrainingWeek] = Field(min_length=1)
    progression_strategy: str | None = None


class RelaxedTrainingProgram(_ProgramModel):
    program_name: str
    description: str | None = None
    duration_weeks_total: int
    phases: list[RelaxedTrainingPhase] = Field(min_length=1)
    general_advice: str | None = None
    difficulty_level: str | None = None
    training_frequency: int | None = None


AnyTrainingProgram = TrainingProgram | RelaxedTrainingProgram


def program_to_payload(program: AnyTrainingProgram) -> dict[str, Any]:
    return program.model_dump(mode="json", by_alias=True, exclude_none=True)
