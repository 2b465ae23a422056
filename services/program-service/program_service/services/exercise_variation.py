from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

import structlog

from ..schemas.analysis import ExerciseVariation, MuscleGroup, PhasicVariationAnalysis
from .exercise_catalog import exercise_key, is_compound, substitutes_for, target_muscle_groups
from .program_history import ProgramHistoryStore

logger = structlog.get_logger(__name__)

DEFAULT_HISTORY_LIMIT = 2

NO_HISTORY_RATIONALE = "No previous programs found, so this program establishes your baseline exercise selection."
HISTORY_UNAVAILABLE_RATIONALE = "Program history is currently unavailable, so exercise selection starts fresh."


def _get(node: dict[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    if camel in node:
        return node[camel]
    return node.get(snake, default)


def extract_exercise_names(program: dict[str, Any]) -> list[str]:
    """Every exercise name on non-rest days, in program order."""
    names: list[str] = []
    for phase in _get(program, "phases", "phases", []) or []:
        if not isinstance(phase, dict):
            continue
        for week in _get(phase, "weeks", "weeks", []) or []:
            if not isinstance(week, dict):
                continue
            for day in _get(week, "days", "days", []) or []:
                if not isinstance(day, dict) or _get(day, "isRestDay", "is_rest_day", False):
                    continue
                for exercise in _get(day, "exercises", "exercises", []) or []:
                    name = exercise.get("name") if isinstance(exercise, dict) else None
                    if isinstance(name, str) and name.strip():
                        names.append(name.strip())
    return names


def collect_previous_exercises(programs: Iterable[dict[str, Any]]) -> list[str]:
    seen: dict[str, str] = {}
    for program in programs:
        for name in extract_exercise_names(program):
            seen.setdefault(exercise_key(name), name)
    return list(seen.values())


def _ordered_groups(groups: Iterable[MuscleGroup]) -> list[MuscleGroup]:
    wanted = set(groups)
    return [group for group in MuscleGroup if group in wanted]


def suggest_variations(
    previous_exercises: Sequence[str],
    target_groups: Sequence[MuscleGroup],
) -> list[ExerciseVariation]:
    previous_keys = {exercise_key(name) for name in previous_exercises}
    accessories = [name for name in previous_exercises if not is_compound(name)]

    chosen_keys: set[str] = set()
    varied_originals: set[str] = set()
    variations: list[ExerciseVariation] = []

    for group in target_groups:
        for original in accessories:
            original_key = exercise_key(original)
            original_targets = target_muscle_groups(original)
            if original_key in varied_originals or group not in original_targets:
                continue
            for candidate in substitutes_for(original):
                candidate_key = exercise_key(candidate)
                if candidate_key in previous_keys or candidate_key in chosen_keys or is_compound(candidate):
                    continue
                candidate_targets = target_muscle_groups(candidate)
                if not candidate_targets >= original_targets:
                    continue
                chosen_keys.add(candidate_key)
                varied_originals.add(original_key)
                variations.append(
                    ExerciseVariation(
                        original_exercise=original,
                        variation_exercise=candidate,
                        targeted_muscle_groups=_ordered_groups(candidate_targets),
                        rationale=(
                            f"{candidate} trains the same {', '.join(g.value for g in _ordered_groups(original_targets))} "
                            f"pattern as {original} with a new stimulus."
                        ),
                    )
                )
                break
    return variations


def analyze_phasic_variation(
    previous_programs: Sequence[dict[str, Any]],
    target_groups: Sequence[MuscleGroup],
) -> PhasicVariationAnalysis:
    if not previous_programs:
        return PhasicVariationAnalysis(rationale=NO_HISTORY_RATIONALE)

    previous = collect_previous_exercises(previous_programs)
    variations = suggest_variations(previous, target_groups)
    compounds = sum(1 for name in previous if is_compound(name))
    if variations:
        rationale = (
            f"Rotated {len(variations)} accessory exercises from your last {len(previous_programs)} "
            f"program(s); {compounds} compound lifts are kept for specificity."
        )
    else:
        rationale = "Previous accessories have no unused substitutes for the targeted muscle groups; keep progressing them."
    return PhasicVariationAnalysis(previous_exercises=previous, suggested_variations=variations, rationale=rationale)


async def plan_exercise_variations(
    user_id: str,
    target_groups: Sequence[MuscleGroup],
    *,
    history_store: ProgramHistoryStore,
    limit: int = DEFAULT_HISTORY_LIMIT,
) -> PhasicVariationAnalysis:
    try:
        programs = await history_store.fetch_recent_programs(user_id, limit)
    except Exception as exc:
        logger.warning("program_history_fetch_failed", user_id=user_id, error=str(exc))
        return PhasicVariationAnalysis(rationale=HISTORY_UNAVAILABLE_RATIONALE)
    return analyze_phasic_variation(programs[:limit], target_groups)
