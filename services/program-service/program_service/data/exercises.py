from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType

from ..schemas.analysis import MuscleGroup

CHEST = MuscleGroup.CHEST
BACK = MuscleGroup.BACK
SHOULDERS = MuscleGroup.SHOULDERS
ARMS = MuscleGroup.ARMS
QUADS = MuscleGroup.QUADS
HAMSTRINGS = MuscleGroup.HAMSTRINGS
GLUTES = MuscleGroup.GLUTES
CALVES = MuscleGroup.CALVES
ABS = MuscleGroup.ABS


@dataclass(frozen=True)
class ExerciseMuscleRow:
    pattern: re.Pattern[str]
    primary: tuple[MuscleGroup, ...]
    secondary: tuple[MuscleGroup, ...] = ()


def _row(pattern: str, primary: tuple[MuscleGroup, ...], secondary: tuple[MuscleGroup, ...] = ()) -> ExerciseMuscleRow:
    return ExerciseMuscleRow(re.compile(pattern, re.IGNORECASE), primary, secondary)


# First match wins, so more specific patterns precede the generic ones they contain.
EXERCISE_MUSCLE_MAP: tuple[ExerciseMuscleRow, ...] = (
    # push
    _row(r"incline\s*(bench|dumbbell|machine|smith)?\s*press|incline\s*(bench|dumbbell)", (CHEST, SHOULDERS), (ARMS,)),
    _row(r"bench\s*press|flat\s*bench|barbell\s*bench|floor\s*press", (CHEST,), (ARMS, SHOULDERS)),
    _row(r"landmine\s*press", (SHOULDERS, CHEST), (ARMS,)),
    _row(
        r"overhead\s*press|\bohp\b|military\s*press|shoulder\s*press|push\s*press|arnold\s*press|seated\s*dumbbell\s*press",
        (SHOULDERS,),
        (ARMS,),
    ),
    _row(r"lateral\s*raise|side\s*raise", (SHOULDERS,)),
    _row(r"rear\s*delt\s*row|band\s*pull[- ]?aparts?|face\s*pull", (SHOULDERS,), (BACK,)),
    _row(r"rear\s*delt|reverse\s*(pec\s*deck|fly)", (SHOULDERS,)),
    _row(r"external\s*rotation", (SHOULDERS,)),
    _row(r"flyes?\b|pec\s*deck|cable\s*fly|cable\s*crossover", (CHEST,)),
    _row(r"\bdips?\b", (CHEST, ARMS)),
    _row(r"push[- ]?ups?", (CHEST,), (ARMS, SHOULDERS)),
    # pull
    _row(r"barbell\s*row|bent[- ]?over\s*row|t[- ]?bar\s*row|pendlay\s*row", (BACK,), (ARMS, SHOULDERS)),
    _row(r"dumbbell\s*row|single[- ]?arm\s*row|one[- ]?arm\s*row|seal\s*row|chest[- ]?supported\s*row|cable\s*row", (BACK,), (ARMS,)),
    _row(r"pull[- ]?ups?|chin[- ]?ups?", (BACK,), (ARMS,)),
    _row(r"lat\s*pull[- ]?down|pulldown", (BACK,), (ARMS,)),
    # arms
    _row(r"leg\s*curl|hamstring\s*curl", (HAMSTRINGS,)),
    _row(r"curl(?![- ]?ups?\b)", (ARMS,)),
    _row(r"triceps?\s*(pushdown|extension|kickback)|skull\s*crusher|pushdown", (ARMS,)),
    # legs
    _row(r"romanian\s*deadlift|\brdl\b|stiff[- ]?leg", (HAMSTRINGS, GLUTES)),
    _row(r"deadlift", (HAMSTRINGS, GLUTES, BACK)),
    _row(r"good\s*mornings?", (HAMSTRINGS, GLUTES), (BACK,)),
    _row(r"back\s*extension|hyperextension", (HAMSTRINGS, GLUTES, BACK)),
    _row(r"split\s*squat|lunge|step[- ]?ups?", (QUADS, GLUTES), (HAMSTRINGS,)),
    _row(r"squat", (QUADS, GLUTES), (HAMSTRINGS,)),
    _row(r"leg\s*press", (QUADS, GLUTES)),
    _row(r"leg\s*extension|reverse\s*nordic|terminal\s*knee\s*extension", (QUADS,)),
    _row(r"glute[- ]?ham\s*raise|nordic", (HAMSTRINGS,), (GLUTES,)),
    _row(r"hip\s*thrust|glute\s*bridge|pull[- ]?through", (GLUTES,), (HAMSTRINGS,)),
    _row(r"calf\s*raise", (CALVES,)),
    # trunk
    _row(r"plank|pallof|dead\s*bug|ab\s*wheel|rollout|crunch|leg\s*raise|knee\s*raise|bird\s*dog|curl[- ]?up|sit[- ]?up", (ABS,)),
)

# Canonical compound lifts. A name is compound when it contains, or is contained in, one of these.
COMPOUND_LIFTS: tuple[str, ...] = (
    "squat",
    "bench press",
    "deadlift",
    "overhead press",
    "military press",
    "push press",
    "barbell row",
    "bent-over row",
    "pendlay row",
    "pull-up",
    "chin-up",
)

# Accessory substitutes keyed by the accessory they replace. Keys are matched as
# substrings of the normalized exercise name, first match wins.
SUBSTITUTIONS: MappingProxyType[str, tuple[str, ...]] = MappingProxyType(
    {
        "lateral raise": ("Cable Lateral Raise", "Lean-Away Lateral Raise", "Machine Lateral Raise"),
        "face pull": ("Band Pull-Apart", "Cable Rear Delt Row"),
        "arnold press": ("Seated Dumbbell Press", "Landmine Press"),
        "seated dumbbell press": ("Arnold Press", "Landmine Press"),
        "incline dumbbell press": ("Incline Machine Press", "Incline Smith Press"),
        "cable fly": ("Dumbbell Flye", "Pec Deck"),
        "dumbbell flye": ("Cable Fly", "Pec Deck"),
        "pec deck": ("Cable Fly", "Dumbbell Flye"),
        "dip": ("Weighted Push-Up", "Deficit Push-Up"),
        "lat pulldown": ("Neutral-Grip Lat Pulldown", "Single-Arm Lat Pulldown"),
        "dumbbell row": ("Chest-Supported Row", "Seal Row", "Seated Cable Row"),
        "cable row": ("Chest-Supported Row", "Single-Arm Dumbbell Row"),
        "leg curl": ("Seated Leg Curl", "Lying Leg Curl", "Nordic Hamstring Curl"),
        "hammer curl": ("Cross-Body Hammer Curl", "Rope Hammer Curl"),
        "curl": ("Incline Dumbbell Curl", "Cable Curl", "Preacher Curl"),
        "pushdown": ("Overhead Cable Triceps Extension", "Skull Crusher"),
        "skull crusher": ("Overhead Triceps Extension", "Triceps Pushdown"),
        "triceps extension": ("Triceps Pushdown", "Skull Crusher"),
        "leg extension": ("Single-Leg Extension", "Reverse Nordic"),
        "leg press": ("Single-Leg Press", "Pendulum Leg Press"),
        "lunge": ("Walking Lunge", "Reverse Lunge", "Step-Up"),
        "step-up": ("Reverse Lunge", "Walking Lunge"),
        "hip thrust": ("Single-Leg Hip Thrust", "Glute Bridge", "Cable Pull-Through"),
        "glute bridge": ("Hip Thrust", "Cable Pull-Through"),
        "good morning": ("45-Degree Back Extension", "Reverse Hyperextension"),
        "back extension": ("Good Morning", "Reverse Hyperextension"),
        "calf raise": ("Seated Calf Raise", "Standing Calf Raise", "Single-Leg Calf Raise"),
        "plank": ("Ab Wheel Rollout", "Dead Bug", "Pallof Press"),
        "crunch": ("Cable Crunch", "Hanging Leg Raise"),
        "leg raise": ("Hanging Knee Raise", "Reverse Crunch"),
    }
)
