from __future__ import annotations

from types import MappingProxyType

from ..schemas.analysis import Adaptation, PeriodizationModel, PhaseTemplate, VolumeProgression
from ..schemas.profile import ExperienceLevel, PrimaryGoal

_HYPERTROPHY = Adaptation.HYPERTROPHY
_STRENGTH = Adaptation.STRENGTH
_PEAKING = Adaptation.PEAKING
_RECOVERY = Adaptation.RECOVERY

# (experience, goal) -> model. Pairs not listed fall back to the experience default.
MODEL_DECISION_TABLE: MappingProxyType[tuple[ExperienceLevel, PrimaryGoal], PeriodizationModel] = MappingProxyType(
    {
        (ExperienceLevel.INTERMEDIATE, PrimaryGoal.MUSCLE_GAIN): PeriodizationModel.HYPERTROPHY_FOCUSED,
        (ExperienceLevel.INTERMEDIATE, PrimaryGoal.STRENGTH_GAIN): PeriodizationModel.STRENGTH_FOCUSED,
        (ExperienceLevel.ADVANCED, PrimaryGoal.MUSCLE_GAIN): PeriodizationModel.HYPERTROPHY_FOCUSED,
        (ExperienceLevel.ADVANCED, PrimaryGoal.STRENGTH_GAIN): PeriodizationModel.STRENGTH_FOCUSED,
        (ExperienceLevel.ADVANCED, PrimaryGoal.SPORT_SPECIFIC): PeriodizationModel.STRENGTH_FOCUSED,
    }
)

EXPERIENCE_DEFAULT_MODEL: MappingProxyType[ExperienceLevel, PeriodizationModel] = MappingProxyType(
    {
        ExperienceLevel.BEGINNER: PeriodizationModel.LINEAR,
        ExperienceLevel.INTERMEDIATE: PeriodizationModel.BALANCED,
        ExperienceLevel.ADVANCED: PeriodizationModel.BALANCED,
    }
)

PHASE_TEMPLATES: MappingProxyType[PeriodizationModel, tuple[PhaseTemplate, ...]] = MappingProxyType(
    {
        PeriodizationModel.HYPERTROPHY_FOCUSED: (
            PhaseTemplate(name="Volume Accumulation", duration_weeks=3, intensity_range=(65, 80), volume_progression=VolumeProgression.RAMPING, primary_adaptation=_HYPERTROPHY),
            PhaseTemplate(name="Intensification", duration_weeks=2, intensity_range=(80, 90), volume_progression=VolumeProgression.STABLE, primary_adaptation=_STRENGTH),
            PhaseTemplate(name="Realization", duration_weeks=1, intensity_range=(90, 95), volume_progression=VolumeProgression.LINEAR, primary_adaptation=_PEAKING),
        ),
        PeriodizationModel.STRENGTH_FOCUSED: (
            PhaseTemplate(name="Base Volume", duration_weeks=2, intensity_range=(70, 85), volume_progression=VolumeProgression.STABLE, primary_adaptation=_HYPERTROPHY),
            PhaseTemplate(name="Strength Intensification", duration_weeks=3, intensity_range=(85, 95), volume_progression=VolumeProgression.RAMPING, primary_adaptation=_STRENGTH),
            PhaseTemplate(name="Peaking", duration_weeks=1, intensity_range=(95, 102.5), volume_progression=VolumeProgression.LINEAR, primary_adaptation=_PEAKING),
        ),
        PeriodizationModel.LINEAR: (
            PhaseTemplate(name="Linear Progression Block", duration_weeks=4, intensity_range=(75, 85), volume_progression=VolumeProgression.LINEAR, primary_adaptation=_STRENGTH),
        ),
        PeriodizationModel.BALANCED: (
            PhaseTemplate(name="Hypertrophy Block", duration_weeks=2, intensity_range=(67, 77), volume_progression=VolumeProgression.RAMPING, primary_adaptation=_HYPERTROPHY),
            PhaseTemplate(name="Strength Block", duration_weeks=2, intensity_range=(78, 88), volume_progression=VolumeProgression.STABLE, primary_adaptation=_STRENGTH),
            PhaseTemplate(name="Deload", duration_weeks=1, intensity_range=(55, 65), volume_progression=VolumeProgression.STABLE, primary_adaptation=_RECOVERY),
        ),
    }
)

RPE_RANGES: MappingProxyType[Adaptation, tuple[int, int]] = MappingProxyType(
    {
        _HYPERTROPHY: (7, 9),
        _STRENGTH: (8, 10),
        _PEAKING: (9, 10),
        _RECOVERY: (5, 6),
    }
)

# Readiness signal -> (RPE delta, set multiplier) applied on the day.
READINESS_ADJUSTMENTS: MappingProxyType[str, tuple[int, float]] = MappingProxyType(
    {
        "ready to go": (1, 1.0),
        "feeling good": (0, 1.0),
        "sore/tired": (-1, 0.8),
    }
)

LOW_RECOVERY_THRESHOLD = 3
HIGH_STRESS_THRESHOLD = 7

PROGRAM_WEEKS_BY_GOAL: MappingProxyType[PrimaryGoal, int] = MappingProxyType(
    {
        PrimaryGoal.GENERAL_FITNESS: 4,
        PrimaryGoal.MUSCLE_GAIN: 6,
        PrimaryGoal.STRENGTH_GAIN: 6,
        PrimaryGoal.ENDURANCE: 5,
        PrimaryGoal.SPORT_SPECIFIC: 6,
    }
)
DEFAULT_PROGRAM_WEEKS = 6
