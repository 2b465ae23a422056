from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class InjuryPattern:
    area: str
    pattern: re.Pattern[str]
    contraindications: tuple[str, ...]


INJURY_PATTERNS: tuple[InjuryPattern, ...] = (
    InjuryPattern(
        area="Knees",
        pattern=re.compile(r"\b(?:knee|patella)", re.IGNORECASE),
        contraindications=("Deep Squats", "Jump Squats", "Box Jumps", "Walking Lunges"),
    ),
    InjuryPattern(
        area="Lower Back",
        pattern=re.compile(r"\b(?:back|spine|spinal|discs?)\b", re.IGNORECASE),
        contraindications=("Conventional Deadlifts", "Good Mornings", "Bent-Over Rows", "Heavy Back Squats"),
    ),
    InjuryPattern(
        area="Shoulders",
        pattern=re.compile(r"\b(?:shoulder|rotator\s*cuff)", re.IGNORECASE),
        contraindications=("Behind-the-Neck Press", "Upright Rows", "Weighted Dips", "Heavy Overhead Press"),
    ),
)
