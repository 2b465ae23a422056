"""Derive hidden training attributes from onboarding answers."""

from __future__ import annotations

import structlog

from ..data.injuries import INJURY_PATTERNS
from ..exceptions import ProfileIncomplete
from ..schemas.profile import EnrichedProfile, ExperienceLevel, InjuryFlag, UserProfile

logger = structlog.get_logger(__name__)

TRAINING_AGE_BY_EXPERIENCE: dict[ExperienceLevel, float] = {
    ExperienceLevel.BEGINNER: 0.25,
    ExperienceLevel.INTERMEDIATE: 1.25,
    ExperienceLevel.ADVANCED: 3.0,
}

DEFAULT_STRESS_LEVEL = 5


def infer_injury_flags(injuries: str | None) -> tuple[InjuryFlag, ...]:
    if not injuries or not injuries.strip():
        return ()
    return tuple(
        InjuryFlag(area=entry.area, contraindications=entry.contraindications)
        for entry in INJURY_PATTERNS
        if entry.pattern.search(injuries)
    )


def _habit_score(profile: UserProfile) -> int:
    if profile.training_frequency_days >= 6:
        score = 3
    elif profile.training_frequency_days >= 4:
        score = 2
    else:
        score = 1

    if profile.session_duration_minutes > 60:
        score += 3
    elif profile.session_duration_minutes > 45:
        score += 2
    else:
        score += 1
    return score


def estimate_recovery_capacity(profile: UserProfile, injury_flags: tuple[InjuryFlag, ...]) -> int:
    score = _habit_score(profile)
    if score >= 5:
        capacity = 9
    elif score >= 3:
        capacity = 6
    else:
        capacity = 3

    if profile.age is not None:
        if profile.age >= 50:
            capacity -= 2
        elif profile.age >= 40:
            capacity -= 1

    capacity -= len(injury_flags)
    return max(1, min(capacity, 10))


def _training_age_multiplier(training_age: float) -> float:
    return 1 + min(training_age, 2) / 2 * 0.8


def _recovery_multiplier(recovery: int) -> float:
    if recovery <= 3:
        return 0.7
    if recovery <= 7:
        return 1.0
    return 1.3


def _stress_multiplier(stress: int) -> float:
    if stress <= 2:
        return 1.1
    if stress <= 4:
        return 1.0
    if stress <= 6:
        return 0.9
    if stress <= 8:
        return 0.7
    return 0.6


def volume_tolerance(training_age: float, recovery: int, stress: int) -> float:
    multiplier = _training_age_multiplier(training_age) * _recovery_multiplier(recovery) * _stress_multiplier(stress)
    return round(multiplier, 2)


def enrich_profile(profile: UserProfile) -> EnrichedProfile:
    goal, experience = profile.primary_goal, profile.experience_level
    if goal is None or experience is None:
        missing = [
            field_name
            for field_name, value in (("primary_goal", goal), ("experience_level", experience))
            if value is None
        ]
        logger.info("profile_incomplete", missing_fields=missing)
        raise ProfileIncomplete(missing)

    training_age = TRAINING_AGE_BY_EXPERIENCE[experience]
    injury_flags = infer_injury_flags(profile.injuries_limitations)
    recovery = estimate_recovery_capacity(profile, injury_flags)
    stress = profile.reported_stress_level if profile.reported_stress_level is not None else DEFAULT_STRESS_LEVEL

    return EnrichedProfile(
        profile=profile,
        goal=goal,
        experience=experience,
        training_age_years=training_age,
        recovery_capacity=recovery,
        stress_level=stress,
        volume_tolerance=volume_tolerance(training_age, recovery, stress),
        injury_flags=injury_flags,
    )
