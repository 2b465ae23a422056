"""Two-tier validation of generated programs.

The strict tier parses the payload with the strict schema and then applies the
business rules (training frequency, anchor lifts, per-muscle volume within
MEV..MRV, RPE targets, weak point coverage). When anything fails, the payload
is re-parsed with the relaxed schema; a shape-valid program is accepted with the
strict violations recorded as caveats, anything else is ``Invalid``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import structlog
from pydantic import ValidationError

from ..data.muscles import SECONDARY_SET_CREDIT
from ..data.strength_standards import CORRECTIVE_PROTOCOLS
from ..schemas.analysis import MuscleGroup, VolumeLandmark, WeakPointResult
from ..schemas.program import AnyTrainingProgram, RelaxedTrainingProgram, TrainingProgram, parse_rpe
from ..schemas.validation import Invalid, Valid, ValidationResult, ValidationTier
from .exercise_catalog import exercise_key, is_compound, muscle_contributions
from .volume_landmarks import round_half_up

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ProgramConstraints:
    training_frequency: int
    landmarks: dict[MuscleGroup, VolumeLandmark]
    weak_points: WeakPointResult
    rpe_ceiling: int = 10


def weekly_muscle_volume(week) -> dict[MuscleGroup, int]:
    totals = {group: 0 for group in MuscleGroup}
    for day in week.days:
        if day.is_rest_day:
            continue
        for exercise in day.exercises:
            primary, secondary = muscle_contributions(exercise.name)
            for group in primary:
                totals[group] += exercise.sets
            for group in secondary:
                totals[group] += round_half_up(exercise.sets * SECONDARY_SET_CREDIT)
    return totals


def check_training_frequency(program: AnyTrainingProgram, constraints: ProgramConstraints) -> list[str]:
    violations: list[str] = []
    for phase in program.phases:
        for week in phase.weeks:
            training_days = sum(1 for day in week.days if not day.is_rest_day)
            if training_days != constraints.training_frequency:
                violations.append(
                    f"week {week.week_number}: {training_days} training days, expected {constraints.training_frequency}"
                )
    return violations


def check_anchor_lifts(program: AnyTrainingProgram, constraints: ProgramConstraints) -> list[str]:
    violations: list[str] = []
    for phase in program.phases:
        for week in phase.weeks:
            for day in week.days:
                if day.is_rest_day or not day.exercises:
                    continue
                first = day.exercises[0].name
                if not is_compound(first):
                    violations.append(
                        f"week {week.week_number} day {day.day_of_week}: first exercise {first!r} is not a compound anchor lift"
                    )
    return violations


def check_volume_compliance(program: AnyTrainingProgram, constraints: ProgramConstraints) -> list[str]:
    violations: list[str] = []
    for phase in program.phases:
        is_deload = "deload" in phase.phase_name.lower()
        for week in phase.weeks:
            totals = weekly_muscle_volume(week)
            for group, landmark in constraints.landmarks.items():
                sets = totals.get(group, 0)
                if sets > landmark.mrv:
                    violations.append(
                        f"week {week.week_number}: {group.value} receives {sets} sets, above MRV {landmark.mrv}"
                    )
                elif sets < landmark.mev and not is_deload:
                    violations.append(
                        f"week {week.week_number}: {group.value} receives {sets} sets, below MEV {landmark.mev}"
                    )
    return violations


def check_rpe_targets(program: AnyTrainingProgram, constraints: ProgramConstraints) -> list[str]:
    violations: list[str] = []
    for phase in program.phases:
        for week in phase.weeks:
            for day in week.days:
                if day.is_rest_day:
                    continue
                bounds = [parse_rpe(exercise.rpe) for exercise in day.exercises]
                if not any(bounds):
                    violations.append(f"week {week.week_number} day {day.day_of_week}: no RPE target prescribed")
                    continue
                for exercise, bound in zip(day.exercises, bounds):
                    if bound is not None and bound[1] > constraints.rpe_ceiling:
                        violations.append(
                            f"week {week.week_number} day {day.day_of_week}: {exercise.name} RPE {exercise.rpe} "
                            f"exceeds ceiling {constraints.rpe_ceiling}"
                        )
    return violations


def check_weak_point_coverage(program: AnyTrainingProgram, constraints: ProgramConstraints) -> list[str]:
    if constraints.weak_points.is_default:
        return []
    program_keys = {
        exercise_key(exercise.name)
        for phase in program.phases
        for week in phase.weeks
        for day in week.days
        for exercise in day.exercises
    }
    violations: list[str] = []
    for weak_point in constraints.weak_points.primary_weak_points:
        correctives = [exercise_key(name) for name in CORRECTIVE_PROTOCOLS.get(weak_point, ())]
        covered = any(corrective in key for corrective in correctives for key in program_keys)
        if not covered:
            violations.append(f"weak point {weak_point!r} has no corrective exercise in the program")
    return violations


BUSINESS_RULES: tuple[Callable[[AnyTrainingProgram, ProgramConstraints], list[str]], ...] = (
    check_training_frequency,
    check_anchor_lifts,
    check_volume_compliance,
    check_rpe_targets,
    check_weak_point_coverage,
)


def business_rule_violations(program: AnyTrainingProgram, constraints: ProgramConstraints) -> list[str]:
    violations: list[str] = []
    for rule in BUSINESS_RULES:
        violations.extend(rule(program, constraints))
    return violations


def _schema_errors(exc: ValidationError, label: str) -> list[str]:
    errors: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
        errors.append(f"{label}: {location}: {error.get('msg')}")
    return errors


def validate_program(payload: dict, constraints: ProgramConstraints) -> ValidationResult:
    strict_violations: list[str] = []
    strict_program: TrainingProgram | None = None
    try:
        strict_program = TrainingProgram.model_validate(payload)
    except ValidationError as exc:
        strict_violations.extend(_schema_errors(exc, "strict schema"))

    if strict_program is not None:
        strict_violations.extend(business_rule_violations(strict_program, constraints))
        if not strict_violations:
            return Valid(tier=ValidationTier.STRICT, program=strict_program)

    try:
        relaxed_program = RelaxedTrainingProgram.model_validate(payload)
    except ValidationError as exc:
        violations = strict_violations + _schema_errors(exc, "relaxed schema")
        logger.warning("program_validation_failed", violation_count=len(violations))
        return Invalid(violations=tuple(dict.fromkeys(violations)))

    if strict_program is None:
        strict_violations.extend(business_rule_violations(relaxed_program, constraints))

    caveats = tuple(dict.fromkeys(strict_violations))
    logger.info("program_validation_relaxed", caveat_count=len(caveats))
    return Valid(tier=ValidationTier.RELAXED, program=relaxed_program, violations=caveats)
