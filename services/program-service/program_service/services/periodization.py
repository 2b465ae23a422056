from __future__ import annotations

from ..data.periodization import (
    DEFAULT_PROGRAM_WEEKS,
    EXPERIENCE_DEFAULT_MODEL,
    HIGH_STRESS_THRESHOLD,
    LOW_RECOVERY_THRESHOLD,
    MODEL_DECISION_TABLE,
    PHASE_TEMPLATES,
    PROGRAM_WEEKS_BY_GOAL,
    READINESS_ADJUSTMENTS,
    RPE_RANGES,
)
from ..schemas.analysis import (
    Adaptation,
    MuscleGroup,
    PeriodizationModel,
    PeriodizationPlan,
    PhaseTemplate,
    VolumeLandmark,
    VolumeProgression,
    WeeklyProgression,
)
from ..schemas.profile import EnrichedProfile, ExperienceLevel, PrimaryGoal
from .volume_landmarks import round_half_up


def select_model(experience: ExperienceLevel, goal: PrimaryGoal) -> PeriodizationModel:
    return MODEL_DECISION_TABLE.get((experience, goal), EXPERIENCE_DEFAULT_MODEL[experience])


def program_weeks_for_goal(goal: PrimaryGoal) -> int:
    return PROGRAM_WEEKS_BY_GOAL.get(goal, DEFAULT_PROGRAM_WEEKS)


def fit_phases(templates: tuple[PhaseTemplate, ...], total_weeks: int) -> list[PhaseTemplate]:
    """Rescale template phase lengths so they sum to ``total_weeks`` (each phase keeps >= 1 week)."""
    template_total = sum(phase.duration_weeks for phase in templates)
    if template_total == total_weeks:
        return list(templates)

    weeks = [max(1, round_half_up(phase.duration_weeks * total_weeks / template_total)) for phase in templates]
    # Hand any rounding drift to the longest phases first.
    order = sorted(range(len(weeks)), key=lambda i: -weeks[i])
    drift = total_weeks - sum(weeks)
    while drift != 0:
        step = 1 if drift > 0 else -1
        adjusted = False
        for index in order:
            if weeks[index] + step >= 1:
                weeks[index] += step
                drift -= step
                adjusted = True
                break
        if not adjusted:
            break
    return [phase.model_copy(update={"duration_weeks": count}) for phase, count in zip(templates, weeks)]


def adjusted_rpe_ranges(enriched: EnrichedProfile) -> dict[Adaptation, tuple[int, int]]:
    conservative = (
        enriched.recovery_capacity <= LOW_RECOVERY_THRESHOLD or enriched.stress_level >= HIGH_STRESS_THRESHOLD
    )
    ranges: dict[Adaptation, tuple[int, int]] = {}
    for adaptation, (low, high) in RPE_RANGES.items():
        if conservative:
            high = max(low, high - 1)
        ranges[adaptation] = (low, high)
    return ranges


def _weekly_targets(phase: PhaseTemplate, base_sets: int) -> list[tuple[int, float]]:
    start, end = phase.intensity_range
    span = max(phase.duration_weeks - 1, 1)
    targets: list[tuple[int, float]] = []
    for week in range(1, phase.duration_weeks + 1):
        if phase.volume_progression == VolumeProgression.RAMPING:
            sets = base_sets * (0.8 + 0.3 * (week / phase.duration_weeks))
        elif phase.volume_progression == VolumeProgression.STABLE:
            sets = base_sets
        else:
            sets = base_sets * (1 - 0.1 * ((week - 1) / span))
        if phase.primary_adaptation == Adaptation.RECOVERY:
            sets = base_sets * 0.5
        intensity = start + (end - start) * ((week - 1) / span)
        targets.append((round_half_up(sets), round(intensity, 1)))
    return targets


def generate_weekly_progression(
    phases: list[PhaseTemplate],
    base_sets: int,
    rpe_ranges: dict[Adaptation, tuple[int, int]],
) -> list[WeeklyProgression]:
    progression: list[WeeklyProgression] = []
    week_number = 0
    for phase in phases:
        for week_in_phase, (sets, intensity) in enumerate(_weekly_targets(phase, base_sets), start=1):
            week_number += 1
            progression.append(
                WeeklyProgression(
                    week_number=week_number,
                    phase_name=phase.name,
                    week_in_phase=week_in_phase,
                    target_volume_sets=sets,
                    target_intensity_percent=intensity,
                    rpe_range=rpe_ranges[phase.primary_adaptation],
                    focus=f"Focus on {phase.primary_adaptation.value} at {intensity:.0f}% intensity.",
                )
            )
    return progression


def describe_progression(progression: list[WeeklyProgression]) -> str:
    return "\n".join(
        f"Week {week.week_number} ({week.phase_name}): ~{week.target_volume_sets} sets per muscle, "
        f"{week.target_intensity_percent:.0f}% 1RM, RPE {week.rpe_range[0]}-{week.rpe_range[1]}. {week.focus}"
        for week in progression
    )


def autoregulation_guidance(enriched: EnrichedProfile, rpe_ranges: dict[Adaptation, tuple[int, int]]) -> str:
    lines = [
        f"{adaptation.value.capitalize()} phases: RPE {low}-{high}."
        for adaptation, (low, high) in rpe_ranges.items()
    ]
    for signal, (rpe_delta, set_multiplier) in READINESS_ADJUSTMENTS.items():
        if rpe_delta == 0 and set_multiplier == 1.0:
            lines.append(f"If feeling '{signal}': train as prescribed.")
            continue
        action = f"{'+' if rpe_delta > 0 else ''}{rpe_delta} RPE"
        if set_multiplier != 1.0:
            action += f" and {round((1 - set_multiplier) * 100)}% fewer sets"
        lines.append(f"If feeling '{signal}': {action}.")
    if enriched.recovery_capacity <= LOW_RECOVERY_THRESHOLD or enriched.stress_level >= HIGH_STRESS_THRESHOLD:
        lines.append(
            f"Recovery capacity {enriched.recovery_capacity}/10 and stress {enriched.stress_level}/10: "
            "RPE ceilings are lowered by 1; stop sets early when bar speed drops."
        )
    return "\n".join(lines)


def build_periodization_plan(
    enriched: EnrichedProfile,
    landmarks: dict[MuscleGroup, VolumeLandmark] | None = None,
) -> PeriodizationPlan:
    model = select_model(enriched.experience, enriched.goal)
    total_weeks = program_weeks_for_goal(enriched.goal)
    phases = fit_phases(PHASE_TEMPLATES[model], total_weeks)
    rpe_ranges = adjusted_rpe_ranges(enriched)
    used = {phase.primary_adaptation for phase in phases}
    rpe_targets = {adaptation: bounds for adaptation, bounds in rpe_ranges.items() if adaptation in used}

    base_sets = round_half_up(sum(lm.mav for lm in landmarks.values()) / len(landmarks)) if landmarks else 12
    progression = generate_weekly_progression(phases, base_sets, rpe_ranges)
    return PeriodizationPlan(
        model=model,
        total_weeks=total_weeks,
        phases=phases,
        weekly_progression=progression,
        rpe_targets=rpe_targets,
        progression_strategy=describe_progression(progression),
        autoregulation_guidance=autoregulation_guidance(enriched, rpe_targets),
    )
