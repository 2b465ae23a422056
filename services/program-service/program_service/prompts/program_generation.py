from __future__ import annotations

from collections.abc import Callable
from textwrap import dedent

from ..data.exercises import COMPOUND_LIFTS
from ..data.schedule import DAY_NAMES, split_for_frequency, training_days
from ..schemas.generation import GenerationContext, GenerationTier
from ..services.exercise_catalog import is_compound

SIMPLIFIED_CORRECTIVE_LIMIT = 4


def _profile_section(ctx: GenerationContext, tier: GenerationTier) -> str:
    profile = ctx.enriched.profile
    lines = [
        "User profile:",
        f"- primary goal: {ctx.enriched.goal.value}",
        f"- experience level: {ctx.enriched.experience.value}",
        f"- training days per week: {profile.training_frequency_days}",
        f"- session length: about {profile.session_duration_minutes} minutes",
    ]
    if tier != GenerationTier.BASIC:
        equipment = ", ".join(profile.available_equipment) or "not specified"
        lines.append(f"- equipment: {equipment}")
        if profile.sport_focus:
            lines.append(f"- sport focus: {profile.sport_focus}")
        lifts = profile.lift_estimates()
        if lifts:
            formatted = ", ".join(f"{name.replace('_', ' ')} {value:g} {profile.weight_unit.value}" for name, value in lifts.items())
            lines.append(f"- estimated 1RMs: {formatted}")
    return "\n".join(lines)


def _enrichment_section(ctx: GenerationContext, tier: GenerationTier) -> str:
    enriched = ctx.enriched
    return "\n".join(
        [
            "Derived training attributes:",
            f"- training age: {enriched.training_age_years:g} years",
            f"- recovery capacity: {enriched.recovery_capacity}/10",
            f"- stress level: {enriched.stress_level}/10",
            f"- volume tolerance multiplier: {enriched.volume_tolerance:.2f}",
        ]
    )


def _injury_section(ctx: GenerationContext, tier: GenerationTier) -> str:
    flags = ctx.enriched.injury_flags
    if not flags:
        return ""
    lines = ["Injuries and limitations (never program the contraindicated exercises):"]
    raw = ctx.enriched.profile.injuries_limitations
    if raw and tier == GenerationTier.FULL:
        lines.append(f"- user note: {raw.strip()}")
    for flag in flags:
        lines.append(f"- {flag.area}: avoid {', '.join(flag.contraindications)}")
    return "\n".join(lines)


def _landmark_section(ctx: GenerationContext, tier: GenerationTier) -> str:
    if tier == GenerationTier.FULL:
        header = "Weekly set landmarks per muscle group (MEV / MAV / MRV). Keep every week between MEV and MRV, aim near MAV:"
        rows = [f"- {group.value}: {lm.mev} / {lm.mav} / {lm.mrv}" for group, lm in ctx.landmarks.items()]
    else:
        header = "Weekly sets per muscle group must stay within these ranges:"
        rows = [f"- {group.value}: {lm.mev}-{lm.mrv}" for group, lm in ctx.landmarks.items()]
    note = "Count full sets for the primary muscles of an exercise and half of the sets for secondary muscles."
    return "\n".join([header, *rows, note])


def _weak_point_section(ctx: GenerationContext, tier: GenerationTier) -> str:
    result = ctx.weak_points
    if tier == GenerationTier.FULL:
        lines = [f"Weak point analysis (reassess in {result.reassessment_period_weeks} weeks):"]
        for issue in result.issues:
            lines.append(
                f"- {issue.ratio_name}: {issue.user_ratio:.2f} vs minimum {issue.minimum_ratio:.2f} ({issue.severity.value})"
            )
        lines.append(f"- priorities: {', '.join(result.primary_weak_points)}")
        lines.append(f"- corrective exercises: {', '.join(result.corrective_exercises)}")
    else:
        lines = [
            f"Priorities: {', '.join(result.primary_weak_points)}",
            f"Include corrective work such as: {', '.join(result.corrective_exercises[:SIMPLIFIED_CORRECTIVE_LIMIT])}",
        ]
    if not result.is_default:
        lines.append("Every priority above must have at least one of its corrective exercises in the program.")
    return "\n".join(lines)


def _variation_section(ctx: GenerationContext, tier: GenerationTier) -> str:
    analysis = ctx.variations
    lines = [f"Exercise variation: {analysis.rationale}"]
    for variation in analysis.suggested_variations:
        lines.append(f"- replace {variation.original_exercise} with {variation.variation_exercise}")
    compounds = [name for name in analysis.previous_exercises if is_compound(name)]
    if compounds:
        lines.append(f"- keep these compound lifts: {', '.join(compounds)}")
    return "\n".join(lines)


def _periodization_section(ctx: GenerationContext, tier: GenerationTier) -> str:
    plan = ctx.periodization
    lines = [f"Periodization model: {plan.model.value}, {plan.total_weeks} weeks total."]
    if tier == GenerationTier.BASIC:
        return lines[0]
    for phase in plan.phases:
        low, high = plan.rpe_targets[phase.primary_adaptation]
        lines.append(
            f"- phase {phase.name!r}: {phase.duration_weeks} weeks, {phase.intensity_range[0]:g}-{phase.intensity_range[1]:g}% 1RM, "
            f"{phase.primary_adaptation.value}, RPE {low}-{high}"
        )
    if tier == GenerationTier.FULL:
        lines.append("Week-by-week progression:")
        lines.append(plan.progression_strategy)
        lines.append("Autoregulation:")
        lines.append(plan.autoregulation_guidance)
    return "\n".join(lines)


def _schedule_section(ctx: GenerationContext, tier: GenerationTier) -> str:
    frequency = ctx.enriched.profile.training_frequency_days
    days = training_days(frequency)
    names = ", ".join(f"{DAY_NAMES[day - 1]} ({day})" for day in days)
    return "\n".join(
        [
            f"Weekly schedule: {split_for_frequency(frequency)} split.",
            f"Train on {names}; every other day is a rest day.",
        ]
    )


def _rules_section(ctx: GenerationContext, tier: GenerationTier) -> str:
    frequency = ctx.enriched.profile.training_frequency_days
    ceiling = ctx.periodization.rpe_ceiling
    anchor_lifts = ", ".join(COMPOUND_LIFTS)
    return dedent(
        f"""
        Rules:
        - Every week lists exactly 7 days, dayOfWeek 1 (Monday) through 7 (Sunday), in order.
        - Exactly {frequency} days per week are training days; the rest have isRestDay true and no exercises.
        - The first exercise of every training day is a compound anchor lift (one of: {anchor_lifts}).
        - sets is an integer; reps is an integer or a range string such as "8-12".
        - Give every training day at least one exercise with an rpe target; never exceed RPE {ceiling}.
        - phases[].durationWeeks equals the number of weeks in the phase and durationWeeksTotal equals their sum.
        """
    ).strip()


def _output_section(ctx: GenerationContext, tier: GenerationTier) -> str:
    return dedent(
        """
        Respond with ONLY a JSON object of this shape (no markdown, no comments):
        {"programName": str, "description": str, "durationWeeksTotal": int, "difficultyLevel": str,
         "trainingFrequency": int, "generalAdvice": str,
         "phases": [{"phaseName": str, "durationWeeks": int, "progressionStrategy": str,
           "weeks": [{"weekNumber": int, "progressionStrategy": str, "coachTip": str,
             "days": [{"dayOfWeek": 1-7, "isRestDay": bool, "focus": str, "estimatedDurationMinutes": int,
               "warmUp": [str], "coolDown": [str],
               "exercises": [{"name": str, "sets": int, "reps": int | str, "rest": str,
                 "rpe": number | str, "weight": str, "category": str, "notes": str}]}]}]}]}
        Allowed focus values: Upper Body, Lower Body, Push, Pull, Legs, Full Body, Cardio, Core, Arms, Back,
        Chest, Shoulders, Glutes, Recovery/Mobility, Sport-Specific, Rest Day, Lower Body Endurance.
        Allowed category values: Compound, Isolation, Cardio, Mobility, Core, Warm-up, Cool-down.
        """
    ).strip()


SectionBuilder = Callable[[GenerationContext, GenerationTier], str]

_ALL_SECTIONS: dict[str, SectionBuilder] = {
    "profile": _profile_section,
    "enrichment": _enrichment_section,
    "injuries": _injury_section,
    "landmarks": _landmark_section,
    "weak_points": _weak_point_section,
    "variations": _variation_section,
    "periodization": _periodization_section,
    "schedule": _schedule_section,
    "rules": _rules_section,
    "output": _output_section,
}

TIER_SECTIONS: dict[GenerationTier, tuple[str, ...]] = {
    GenerationTier.FULL: tuple(_ALL_SECTIONS),
    GenerationTier.SIMPLIFIED: ("profile", "injuries", "landmarks", "weak_points", "periodization", "schedule", "rules", "output"),
    GenerationTier.BASIC: ("profile", "periodization", "schedule", "rules", "output"),
}

_INTRO: dict[GenerationTier, str] = {
    GenerationTier.FULL: (
        "You are an evidence-based strength coach. Design a complete periodized training program "
        "that respects every constraint below."
    ),
    GenerationTier.SIMPLIFIED: "You are a strength coach. Design a periodized training program using the constraints below.",
    GenerationTier.BASIC: "Design a simple training program for this user.",
}


def build_program_prompt(*, tier: GenerationTier, context: GenerationContext) -> str:
    """Compose the generation prompt for one complexity tier."""
    if tier not in TIER_SECTIONS:
        raise ValueError(f"No prompt defined for tier {tier.value!r}")
    sections = [_INTRO[tier]]
    for name in TIER_SECTIONS[tier]:
        text = _ALL_SECTIONS[name](context, tier)
        if text:
            sections.append(text)
    return "\n\n".join(sections)
