from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class RatioStandard:
    name: str
    numerator: str
    denominator: str
    minimum: float
    weak_point: str


# Evaluated in this order; the order doubles as the tie-break between equal priorities.
RATIO_STANDARDS: tuple[RatioStandard, ...] = (
    RatioStandard("deadlift:squat", "deadlift", "squat", 1.1, "Posterior Chain Weakness"),
    RatioStandard("bench:squat", "bench", "squat", 0.6, "Horizontal Press Weakness"),
    RatioStandard("overhead_press:bench", "overhead_press", "bench", 0.6, "Vertical Press Weakness"),
)

# A ratio below minimum * HIGH_SEVERITY_FACTOR is a High severity issue, otherwise Moderate.
HIGH_SEVERITY_FACTOR = 0.9

# Squat (kg) above which advanced lifters get a core stability finding.
CORE_STABILITY_SQUAT_KG = 180.0

CORRECTIVE_PROTOCOLS: MappingProxyType[str, tuple[str, ...]] = MappingProxyType(
    {
        "Posterior Chain Weakness": ("Romanian Deadlifts", "Good Mornings", "Glute-Ham Raises", "Hip Thrusts"),
        "Horizontal Press Weakness": ("Dumbbell Bench Press", "Incline Barbell Press", "Weighted Dips", "Push-Ups"),
        "Vertical Press Weakness": ("Seated Dumbbell Press", "Arnold Press", "Lateral Raises", "Close-Grip Bench Press"),
        "Push/Pull Imbalance": ("Chest-Supported Rows", "Face Pulls", "Pull-Ups", "Band Pull-Aparts"),
        "Core Stability": ("Pallof Press", "Ab Wheel Rollouts", "Dead Bugs"),
        "Hypertrophy Specialization": ("Incline Dumbbell Press", "Lateral Raises", "Leg Press", "Cable Rows"),
        "Hip/Knee Stability": ("Glute Bridges", "Terminal Knee Extensions", "Step-Ups", "Copenhagen Planks"),
        "Spinal Stability": ("Bird Dogs", "McGill Curl-Ups", "Side Planks", "Back Extensions"),
        "Shoulder Stability": ("Band Pull-Aparts", "External Rotations", "Face Pulls", "Scapular Push-Ups"),
        "General Balance": ("Face Pulls", "Bulgarian Split Squats", "Single-Arm Dumbbell Rows", "Planks"),
    }
)

DEFAULT_WEAK_POINT = "General Balance"

# Weeks until strength ratios should be re-tested, keyed by the worst severity found.
REASSESSMENT_WEEKS_HIGH = 8
REASSESSMENT_WEEKS_MODERATE = 12
REASSESSMENT_WEEKS_DEFAULT = 16
