from __future__ import annotations

import re
from functools import lru_cache

from ..data.exercises import COMPOUND_LIFTS, EXERCISE_MUSCLE_MAP, SUBSTITUTIONS, ExerciseMuscleRow
from ..schemas.analysis import MuscleGroup

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_exercise_name(name: str) -> str:
    return _NON_ALNUM.sub(" ", (name or "").lower()).strip()


def exercise_key(name: str) -> str:
    """Identity key that treats "Hip Thrusts" and "hip thrust" as the same exercise."""
    return " ".join(word[:-1] if word.endswith("s") and len(word) > 2 else word for word in normalize_exercise_name(name).split())


_NORMALIZED_COMPOUNDS = tuple(normalize_exercise_name(lift) for lift in COMPOUND_LIFTS)
_NORMALIZED_SUBSTITUTIONS = tuple((normalize_exercise_name(key), options) for key, options in SUBSTITUTIONS.items())


def is_compound(name: str) -> bool:
    """Substring match in either direction against the canonical compound lifts."""
    normalized = normalize_exercise_name(name)
    if not normalized:
        return False
    return any(lift in normalized or normalized in lift for lift in _NORMALIZED_COMPOUNDS)


@lru_cache(maxsize=1024)
def _match_row(name: str) -> ExerciseMuscleRow | None:
    for row in EXERCISE_MUSCLE_MAP:
        if row.pattern.search(name):
            return row
    return None


def muscle_contributions(name: str) -> tuple[tuple[MuscleGroup, ...], tuple[MuscleGroup, ...]]:
    """Return (primary, secondary) muscle groups; unknown exercises map to nothing."""
    row = _match_row(name.strip())
    if row is None:
        return (), ()
    secondary = tuple(group for group in row.secondary if group not in row.primary)
    return row.primary, secondary


def target_muscle_groups(name: str) -> frozenset[MuscleGroup]:
    primary, secondary = muscle_contributions(name)
    return frozenset(primary) | frozenset(secondary)


def substitutes_for(name: str) -> tuple[str, ...]:
    normalized = normalize_exercise_name(name)
    for key, options in _NORMALIZED_SUBSTITUTIONS:
        if key in normalized:
            return options
    return ()
